from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class ChallengeCreate(BaseModel):
    """Type, target and date order are checked in the handler (400)."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    type: str
    target_value: float
    start_date: datetime
    end_date: datetime
    is_public: bool = True
    max_participants: Optional[int] = Field(None, ge=2)


class ChallengeJoinRequest(BaseModel):
    challenge_id: Optional[str] = None
    invite_code: Optional[str] = None


class ChallengeResponse(BaseModel):
    id: str
    creator_id: str
    name: str
    description: Optional[str] = None
    type: str
    target_value: float
    start_date: datetime
    end_date: datetime
    is_public: bool
    invite_code: Optional[str] = None
    max_participants: Optional[int] = None
    participant_count: int = 0
    is_joined: bool = False
    user_progress: int = 0
    completed: bool = False


class ChallengeListResponse(BaseModel):
    challenges: List[ChallengeResponse]


class ParticipantResponse(BaseModel):
    rank: int
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    progress: int
    completed: bool
    completed_at: Optional[datetime] = None


class ChallengeDetailResponse(BaseModel):
    challenge: ChallengeResponse
    participants: List[ParticipantResponse]
    just_completed: bool = False


class JoinResponse(BaseModel):
    success: bool = True
    challenge_id: str
    progress: int
    completed: bool = False


class WeeklyChallengeResponse(BaseModel):
    id: str
    week_number: int
    year: int
    name: str
    description: Optional[str] = None
    type: str
    target_value: float
    start_date: datetime
    end_date: datetime
    reward_badge_id: Optional[str] = None
    participant_count: int = 0
    is_joined: bool = False
    user_progress: int = 0
    completed: bool = False
    days_left: Optional[int] = None
    hours_left: Optional[int] = None


class WeeklyChallengeEnvelope(BaseModel):
    challenge: WeeklyChallengeResponse


class WeeklyChallengeListResponse(BaseModel):
    challenges: List[WeeklyChallengeResponse]
