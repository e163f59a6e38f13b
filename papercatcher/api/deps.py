from typing import Optional

from fastapi import Header, HTTPException

from papercatcher.database.favorite_repository import FavoriteRepository
from papercatcher.database.keyword_repository import KeywordRepository
from papercatcher.database.paper_repository import PaperRepository
from papercatcher.jobs.fetch_papers import IngestionPipeline
from papercatcher.service.related_service import RelatedPaperFinder
from papercatcher.service.search_service import SearchService


# Repositories are stateless, safe to create per-request.

def get_paper_repo() -> PaperRepository:
    return PaperRepository()


def get_keyword_repo() -> KeywordRepository:
    return KeywordRepository()


def get_favorite_repo() -> FavoriteRepository:
    return FavoriteRepository()


def get_search_service() -> SearchService:
    return SearchService()


def get_related_finder() -> RelatedPaperFinder:
    return RelatedPaperFinder()


def get_pipeline() -> IngestionPipeline:
    return IngestionPipeline()


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> int:
    """
    Caller identity is resolved upstream; we only read the forwarded id.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header")
    if user_id <= 0:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header")
    return user_id
