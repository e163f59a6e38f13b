import logging
from typing import List, Optional
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from papercatcher.model.keyword import Keyword
from papercatcher.database.db.session import SessionLocal
from papercatcher.database.db.models import KeywordRow

logger = logging.getLogger(__name__)


class KeywordRepository:
    """
    Keyword registry. The active subset drives each ingestion run.
    """

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    async def list_all(self) -> List[Keyword]:
        async with self._session_factory() as db:
            rows = (
                await db.execute(
                    select(KeywordRow).order_by(KeywordRow.created_at.desc(), KeywordRow.id.desc())
                )
            ).scalars().all()
            return [Keyword.model_validate(r) for r in rows]

    async def list_active(self) -> List[Keyword]:
        async with self._session_factory() as db:
            rows = (
                await db.execute(
                    select(KeywordRow)
                    .where(KeywordRow.is_active.is_(True))
                    .order_by(KeywordRow.id.asc())
                )
            ).scalars().all()
            return [Keyword.model_validate(r) for r in rows]

    async def get_by_id(self, keyword_id: int) -> Optional[Keyword]:
        async with self._session_factory() as db:
            row = await db.get(KeywordRow, keyword_id)
            return Keyword.model_validate(row) if row else None

    async def add(self, text: str) -> Optional[Keyword]:
        """
        Register a keyword.

        Returns:
            The new Keyword, or None if the text is already registered.
        """
        text = (text or "").strip()
        if not text:
            raise ValueError("Keyword text cannot be empty")

        async with self._session_factory() as db:
            row = KeywordRow(text=text, is_active=True)
            db.add(row)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                logger.warning(f"Keyword already registered: {text!r}")
                return None

            await db.refresh(row)
            return Keyword.model_validate(row)

    async def delete(self, keyword_id: int) -> bool:
        async with self._session_factory() as db:
            result = await db.execute(delete(KeywordRow).where(KeywordRow.id == keyword_id))
            await db.commit()
            return result.rowcount > 0

    async def toggle(self, keyword_id: int) -> Optional[Keyword]:
        """
        Flip is_active. Returns the updated Keyword or None if not found.
        """
        async with self._session_factory() as db:
            row = await db.get(KeywordRow, keyword_id)
            if not row:
                return None

            row.is_active = not row.is_active
            row.updated_at = datetime.utcnow()
            await db.commit()
            await db.refresh(row)
            return Keyword.model_validate(row)
