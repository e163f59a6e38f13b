from __future__ import annotations

import logging
from typing import List, Optional
from datetime import datetime

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from papercatcher.model.paper import Paper, RawPaper
from papercatcher.model.search import SortBy
from papercatcher.database.db.session import SessionLocal
from papercatcher.database.db.models import FavoriteRow, PaperRow

logger = logging.getLogger(__name__)


class PaperRepository:
    """
    Async repository for Paper.

    source_id is unique at the table level, so a concurrent double insert
    is rejected by the database and absorbed here as "not inserted".
    """

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    # =====================================================
    # Basic reads
    # =====================================================

    async def get_paper_by_id(self, paper_id: int) -> Optional[Paper]:
        async with self._session_factory() as db:
            row = await db.get(PaperRow, paper_id)
            if not row:
                return None
            return Paper.model_validate(row)

    async def get_paper_by_source_id(self, source_id: str) -> Optional[Paper]:
        async with self._session_factory() as db:
            row = (
                await db.execute(
                    select(PaperRow).where(PaperRow.source_id == source_id).limit(1)
                )
            ).scalar_one_or_none()
            if not row:
                return None
            return Paper.model_validate(row)

    async def list(self, sort_by: SortBy = SortBy.CREATED_AT) -> List[Paper]:
        """
        List all papers ordered by a storage-level sort.

        Only createdAt / publishedAt / journal have a column ordering;
        anything else falls back to createdAt.
        """
        if sort_by == SortBy.PUBLISHED_AT:
            order = [func.coalesce(PaperRow.published_at, 0).desc()]
        elif sort_by == SortBy.JOURNAL:
            order = [func.coalesce(PaperRow.category, "").asc()]
        else:
            order = [PaperRow.created_at.desc()]

        # newest row first among equal keys
        order.append(PaperRow.id.desc())

        async with self._session_factory() as db:
            rows = (await db.execute(select(PaperRow).order_by(*order))).scalars().all()
            return [Paper.model_validate(r) for r in rows]

    async def list_categories(self) -> List[str]:
        async with self._session_factory() as db:
            rows = await db.execute(
                select(PaperRow.category)
                .where(PaperRow.category.is_not(None), PaperRow.category != "")
                .distinct()
                .order_by(PaperRow.category.asc())
            )
            return [category for (category,) in rows]

    # =====================================================
    # Insert-only logic (ingestion)
    # =====================================================

    async def insert_paper(
        self,
        raw: RawPaper,
        title_translated: str = "",
        abstract_translated: str = "",
    ) -> Optional[Paper]:
        """
        Insert a new paper.

        Returns:
            The stored Paper, or None when a paper with the same source_id
            already exists (pre-check or unique constraint).
        """
        if not raw.source_id:
            raise ValueError("source_id is required to insert a paper")

        existing = await self.get_paper_by_source_id(raw.source_id)
        if existing:
            logger.info(f"Paper {raw.source_id} already exists, skipping")
            return None

        async with self._session_factory() as db:
            row = PaperRow(
                source_id=raw.source_id,
                title=raw.title,
                title_translated=title_translated,
                authors=raw.authors,
                abstract=raw.abstract,
                abstract_translated=abstract_translated,
                category=raw.category,
                published_at=raw.published_at,
                source_url=raw.source_url,
                pdf_url=raw.pdf_url,
                origin_keyword=raw.origin_keyword,
            )
            db.add(row)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                logger.info(f"Paper {raw.source_id} inserted concurrently, skipping")
                return None

            await db.refresh(row)
            return Paper.model_validate(row)

    # =====================================================
    # Translation enrichment
    # =====================================================

    async def list_missing_translation(self) -> List[Paper]:
        """
        Papers where either translated field is null or empty.
        """
        async with self._session_factory() as db:
            rows = (
                await db.execute(
                    select(PaperRow)
                    .where(
                        or_(
                            PaperRow.title_translated.is_(None),
                            PaperRow.title_translated == "",
                            PaperRow.abstract_translated.is_(None),
                            PaperRow.abstract_translated == "",
                        )
                    )
                    .order_by(PaperRow.created_at.asc(), PaperRow.id.asc())
                )
            ).scalars().all()
            return [Paper.model_validate(r) for r in rows]

    async def update_translation(
        self,
        paper_id: int,
        title_translated: str,
        abstract_translated: str,
    ) -> bool:
        async with self._session_factory() as db:
            row = await db.get(PaperRow, paper_id)
            if not row:
                return False

            row.title_translated = title_translated
            row.abstract_translated = abstract_translated
            row.updated_at = datetime.utcnow()

            await db.commit()
            return True

    # =====================================================
    # Delete
    # =====================================================

    async def delete_paper(self, paper_id: int) -> bool:
        """
        Delete a paper and every favorite pointing at it.
        """
        async with self._session_factory() as db:
            await db.execute(delete(FavoriteRow).where(FavoriteRow.paper_id == paper_id))
            result = await db.execute(delete(PaperRow).where(PaperRow.id == paper_id))
            await db.commit()
            return result.rowcount > 0
