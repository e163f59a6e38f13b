from typing import List

from fastapi import APIRouter, Depends

from papercatcher.api.deps import get_current_user_id, get_favorite_repo
from papercatcher.api.schemas.favorite import (
    FavoriteCheckResponse,
    FavoriteMutationResponse,
    FavoriteRequest,
    FavoriteResponse,
)
from papercatcher.api.schemas.paper import MutationResponse, PaperResponse
from papercatcher.database.favorite_repository import FavoriteRepository

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


@router.get("", response_model=List[PaperResponse])
async def list_favorites(
    user_id: int = Depends(get_current_user_id),
    repo: FavoriteRepository = Depends(get_favorite_repo),
):
    """Favorited papers of the caller, most recent first."""
    papers = await repo.list_papers(user_id)
    return PaperResponse.from_papers(papers)


@router.post("", response_model=FavoriteMutationResponse)
async def add_favorite(
    body: FavoriteRequest,
    user_id: int = Depends(get_current_user_id),
    repo: FavoriteRepository = Depends(get_favorite_repo),
):
    favorite = await repo.add(user_id, body.paper_id)
    return FavoriteMutationResponse(
        success=favorite is not None,
        favorite=FavoriteResponse.from_favorite(favorite) if favorite else None,
    )


@router.delete("/{paper_id}", response_model=MutationResponse)
async def remove_favorite(
    paper_id: int,
    user_id: int = Depends(get_current_user_id),
    repo: FavoriteRepository = Depends(get_favorite_repo),
):
    removed = await repo.remove(user_id, paper_id)
    return MutationResponse(success=removed)


@router.get("/{paper_id}", response_model=FavoriteCheckResponse)
async def check_favorite(
    paper_id: int,
    user_id: int = Depends(get_current_user_id),
    repo: FavoriteRepository = Depends(get_favorite_repo),
):
    return FavoriteCheckResponse(is_favorite=await repo.is_favorite(user_id, paper_id))
