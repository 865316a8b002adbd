from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime
import pytz


class ProfileResponse(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    avatar_id: int = 0
    custom_avatar_uri: Optional[str] = None
    weight_unit: str = "lbs"
    notifications_enabled: bool = False
    timezone: str = "UTC"
    unlocked_badges: List[str] = []
    bio: Optional[str] = None
    is_public: bool = True
    show_on_leaderboard: bool = True
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """Partial update; unlocked badges are merged, never replaced."""
    display_name: Optional[str] = Field(None, max_length=50)
    avatar_id: Optional[int] = Field(None, ge=0)
    custom_avatar_uri: Optional[str] = None
    weight_unit: Optional[str] = None
    notifications_enabled: Optional[bool] = None
    timezone: Optional[str] = None
    unlocked_badges: Optional[List[str]] = None

    @validator('weight_unit')
    def validate_weight_unit(cls, v):
        if v is not None and v not in ("lbs", "kg"):
            raise ValueError("weight_unit must be 'lbs' or 'kg'")
        return v

    @validator('timezone')
    def validate_timezone(cls, v):
        if v is not None and v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {v}")
        return v


class MeResponse(BaseModel):
    id: str
    email: str
    username: Optional[str] = None
    created_at: Optional[datetime] = None
    profile: Optional[ProfileResponse] = None
