from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from papercatcher.model.keyword import Keyword


class KeywordResponse(BaseModel):
    id: int
    keyword: str
    is_active: bool
    created_at: datetime

    @classmethod
    def from_keyword(cls, keyword: Keyword) -> KeywordResponse:
        return cls(
            id=keyword.id,
            keyword=keyword.text,
            is_active=keyword.is_active,
            created_at=keyword.created_at,
        )


class CreateKeywordRequest(BaseModel):
    keyword: str = Field(min_length=1, max_length=255)


class KeywordMutationResponse(BaseModel):
    success: bool
    keyword: Optional[KeywordResponse] = None
