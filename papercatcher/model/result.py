from pydantic import BaseModel


class OperationResult(BaseModel):
    success: bool
    message: str


class IngestionResult(BaseModel):
    success: bool
    message: str
    count: int = 0
