from pydantic import BaseModel
from typing import List, Optional


class StatsResponse(BaseModel):
    total_fasts: int
    total_hours: float
    average_duration: float
    longest_fast_hours: float
    current_streak: int
    longest_streak: int
    timezone: str


class BadgeResponse(BaseModel):
    id: str
    name: str
    description: str
    category: str
    requirement: float
    icon: str
    color: str
    kind: Optional[str] = None
    unlocked: bool = False


class BadgeListResponse(BaseModel):
    badges: List[BadgeResponse]
    unlocked_count: int
    total_count: int


class BadgeEvaluateResponse(BaseModel):
    newly_unlocked_badges: List[str]
    unlocked_badges: List[str]
