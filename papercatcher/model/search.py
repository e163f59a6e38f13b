from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class SortBy(str, Enum):
    CREATED_AT = "createdAt"
    PUBLISHED_AT = "publishedAt"
    JOURNAL = "journal"
    CITATIONS = "citations"
    RELEVANCE = "relevance"


class SearchFilters(BaseModel):
    """
    Optional, AND-composed filters. Blank strings count as absent.
    """

    author: Optional[str] = None
    start_date: Optional[int] = None  # epoch millis, inclusive
    end_date: Optional[int] = None  # epoch millis, inclusive
    category: Optional[str] = None

    @field_validator("author", "category")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()
