from typing import List

from fastapi import APIRouter, Depends, HTTPException

from papercatcher.api.deps import get_keyword_repo
from papercatcher.api.schemas.keyword import (
    CreateKeywordRequest,
    KeywordMutationResponse,
    KeywordResponse,
)
from papercatcher.api.schemas.paper import MutationResponse
from papercatcher.database.keyword_repository import KeywordRepository

router = APIRouter(prefix="/api/keywords", tags=["keywords"])


@router.get("", response_model=List[KeywordResponse])
async def list_keywords(
    repo: KeywordRepository = Depends(get_keyword_repo),
):
    """List all keywords, newest first."""
    keywords = await repo.list_all()
    return [KeywordResponse.from_keyword(k) for k in keywords]


@router.post("", response_model=KeywordMutationResponse)
async def add_keyword(
    body: CreateKeywordRequest,
    repo: KeywordRepository = Depends(get_keyword_repo),
):
    """Register a new keyword (active by default)."""
    try:
        keyword = await repo.add(body.keyword)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return KeywordMutationResponse(
        success=keyword is not None,
        keyword=KeywordResponse.from_keyword(keyword) if keyword else None,
    )


@router.delete("/{keyword_id}", response_model=MutationResponse)
async def delete_keyword(
    keyword_id: int,
    repo: KeywordRepository = Depends(get_keyword_repo),
):
    deleted = await repo.delete(keyword_id)
    return MutationResponse(success=deleted)


@router.post("/{keyword_id}/toggle", response_model=KeywordMutationResponse)
async def toggle_keyword(
    keyword_id: int,
    repo: KeywordRepository = Depends(get_keyword_repo),
):
    """Enable / disable a keyword for ingestion."""
    keyword = await repo.toggle(keyword_id)
    return KeywordMutationResponse(
        success=keyword is not None,
        keyword=KeywordResponse.from_keyword(keyword) if keyword else None,
    )
