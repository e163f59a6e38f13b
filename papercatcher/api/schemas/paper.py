from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from papercatcher.model.paper import Paper


class PaperResponse(BaseModel):
    id: int
    source_id: str
    title: str
    title_translated: Optional[str] = None
    authors: str
    abstract: str
    abstract_translated: Optional[str] = None
    category: Optional[str] = None
    published_at: Optional[int] = None
    source_url: str
    pdf_url: Optional[str] = None
    origin_keyword: Optional[str] = None
    citation_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_paper(cls, paper: Paper) -> PaperResponse:
        return cls(**paper.model_dump())

    @classmethod
    def from_papers(cls, papers: List[Paper]) -> List[PaperResponse]:
        return [cls.from_paper(p) for p in papers]


class FetchResponse(BaseModel):
    success: bool
    message: str
    count: int = 0


class MutationResponse(BaseModel):
    success: bool
    message: Optional[str] = None
