from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class DeviceRegisterRequest(BaseModel):
    token: str = Field(..., min_length=1)
    platform: Optional[str] = Field(None, pattern="^(ios|android|web)$")


class DeviceResponse(BaseModel):
    id: str
    token: str
    platform: Optional[str] = None
    is_active: bool = True
    last_seen: Optional[datetime] = None

    class Config:
        from_attributes = True


class DeviceListResponse(BaseModel):
    devices: List[DeviceResponse]


class NotificationSettingsResponse(BaseModel):
    fast_reminder: bool = True
    milestone_reached: bool = True
    streak_at_risk: bool = True
    daily_motivation: bool = True
    reminder_hour: int = 20

    class Config:
        from_attributes = True


class NotificationSettingsUpdate(BaseModel):
    fast_reminder: Optional[bool] = None
    milestone_reached: Optional[bool] = None
    streak_at_risk: Optional[bool] = None
    daily_motivation: Optional[bool] = None
    reminder_hour: Optional[int] = Field(None, ge=0, le=23)


class StatusResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
