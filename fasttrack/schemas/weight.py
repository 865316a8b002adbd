from pydantic import BaseModel, Field, validator
from typing import List
from datetime import date


class WeightUpsert(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    date: str = Field(..., description="ISO date, YYYY-MM-DD")
    weight: float = Field(..., gt=0)

    @validator('date')
    def validate_date(cls, v):
        # Raises ValueError for anything that isn't a real calendar date
        date.fromisoformat(v)
        return v


class WeightResponse(BaseModel):
    id: str
    user_id: str
    date: str
    weight: float

    class Config:
        from_attributes = True


class WeightListResponse(BaseModel):
    weights: List[WeightResponse]
    total_count: int
