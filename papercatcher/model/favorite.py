from pydantic import BaseModel, Field
from datetime import datetime


class Favorite(BaseModel):
    id: int
    user_id: int
    paper_id: int
    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"from_attributes": True}
