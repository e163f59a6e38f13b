from pydantic import BaseModel, Field
from datetime import datetime


class Keyword(BaseModel):
    id: int
    text: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"from_attributes": True}
