from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from papercatcher.model.favorite import Favorite


class FavoriteRequest(BaseModel):
    paper_id: int


class FavoriteResponse(BaseModel):
    id: int
    user_id: int
    paper_id: int
    created_at: datetime

    @classmethod
    def from_favorite(cls, favorite: Favorite) -> FavoriteResponse:
        return cls(**favorite.model_dump())


class FavoriteMutationResponse(BaseModel):
    success: bool
    favorite: Optional[FavoriteResponse] = None


class FavoriteCheckResponse(BaseModel):
    is_favorite: bool
