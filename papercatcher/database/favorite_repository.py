import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from papercatcher.model.favorite import Favorite
from papercatcher.model.paper import Paper
from papercatcher.database.db.session import SessionLocal
from papercatcher.database.db.models import FavoriteRow, PaperRow

logger = logging.getLogger(__name__)


class FavoriteRepository:
    """
    Manage per-user favorite papers
    """

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    async def _find(self, db, user_id: int, paper_id: int) -> Optional[FavoriteRow]:
        return (
            await db.execute(
                select(FavoriteRow)
                .where(FavoriteRow.user_id == user_id, FavoriteRow.paper_id == paper_id)
                .limit(1)
            )
        ).scalar_one_or_none()

    async def add(self, user_id: int, paper_id: int) -> Optional[Favorite]:
        """
        Add a favorite. Adding twice returns the existing record.

        Returns None when the paper does not exist.
        """
        if user_id is None:
            raise ValueError("user_id is required")
        if paper_id is None or paper_id <= 0:
            return None

        async with self._session_factory() as db:
            if not await db.get(PaperRow, paper_id):
                logger.warning(f"Cannot favorite missing paper: {paper_id}")
                return None

            existing = await self._find(db, user_id, paper_id)
            if existing:
                return Favorite.model_validate(existing)

            row = FavoriteRow(user_id=user_id, paper_id=paper_id)
            db.add(row)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                existing = await self._find(db, user_id, paper_id)
                return Favorite.model_validate(existing) if existing else None

            await db.refresh(row)
            return Favorite.model_validate(row)

    async def remove(self, user_id: int, paper_id: int) -> bool:
        async with self._session_factory() as db:
            result = await db.execute(
                delete(FavoriteRow).where(
                    FavoriteRow.user_id == user_id,
                    FavoriteRow.paper_id == paper_id,
                )
            )
            await db.commit()
            return result.rowcount > 0

    async def list_papers(self, user_id: int) -> List[Paper]:
        """
        Favorited papers, most recently favorited first.
        """
        async with self._session_factory() as db:
            rows = (
                await db.execute(
                    select(PaperRow)
                    .join(FavoriteRow, FavoriteRow.paper_id == PaperRow.id)
                    .where(FavoriteRow.user_id == user_id)
                    .order_by(FavoriteRow.created_at.desc(), FavoriteRow.id.desc())
                )
            ).scalars().all()
            return [Paper.model_validate(r) for r in rows]

    async def is_favorite(self, user_id: int, paper_id: int) -> bool:
        async with self._session_factory() as db:
            return await self._find(db, user_id, paper_id) is not None
