from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class RawPaper(BaseModel):
    """
    One normalized entry from the arXiv Atom feed, before it is stored.
    """

    source_id: str
    title: str
    authors: str = ""
    abstract: str = ""
    published_at: Optional[int] = None  # epoch millis
    source_url: str
    pdf_url: Optional[str] = None
    category: str = "arXiv"
    origin_keyword: Optional[str] = None

    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class Paper(BaseModel):
    """
    Stored paper record.
    - authors is a single comma-joined string
    - published_at is epoch millis
    """

    id: int
    source_id: str

    title: str
    title_translated: Optional[str] = None
    authors: str = ""
    abstract: str = ""
    abstract_translated: Optional[str] = None

    category: Optional[str] = None
    published_at: Optional[int] = None
    source_url: str
    pdf_url: Optional[str] = None
    origin_keyword: Optional[str] = None
    citation_count: Optional[int] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {
        "from_attributes": True,
        "extra": "ignore",
    }

    @property
    def display_title(self) -> str:
        return self.title_translated or self.title

    @property
    def is_translated(self) -> bool:
        return bool(self.title_translated) and bool(self.abstract_translated)


class TranslationResult(BaseModel):
    title_translated: str = ""
    abstract_translated: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.title_translated and not self.abstract_translated
