from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class FastUpsert(BaseModel):
    """Fast as sent by the client; the id is generated on the device."""
    id: str = Field(..., min_length=1, max_length=64)
    start_time: int = Field(..., ge=0, description="Epoch milliseconds")
    end_time: Optional[int] = Field(None, ge=0, description="Epoch milliseconds, null while active")
    target_duration: float = Field(16, gt=0, description="Target length in hours")
    plan_id: str = ""
    plan_name: str = ""
    completed: bool = False
    note: Optional[str] = Field(None, max_length=1000)


class FastResponse(BaseModel):
    id: str
    user_id: str
    start_time: int
    end_time: Optional[int] = None
    target_duration: float
    plan_id: str
    plan_name: str
    completed: bool
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FastSaveResponse(BaseModel):
    fast: FastResponse
    created: bool
    newly_unlocked_badges: List[str] = []


class FastListResponse(BaseModel):
    fasts: List[FastResponse]
    total_count: int


class ActiveFastResponse(BaseModel):
    fast: Optional[FastResponse] = None
    elapsed_hours: float = 0.0
