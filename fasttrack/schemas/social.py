from pydantic import BaseModel, Field
from typing import List, Optional


class SocialProfileResponse(BaseModel):
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_id: int = 0
    bio: Optional[str] = None
    is_public: bool = True
    show_on_leaderboard: bool = True
    current_streak: int = 0
    longest_streak: int = 0
    total_fasts: int = 0
    total_hours: float = 0.0
    unlocked_badges: List[str] = []
    relationship: Optional[str] = None  # friend | request_sent | request_received | none


class SocialProfileUpdate(BaseModel):
    username: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=280)
    is_public: Optional[bool] = None
    show_on_leaderboard: Optional[bool] = None


class UserSearchResult(BaseModel):
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_id: int = 0
    relationship: str = "none"


class UserSearchResponse(BaseModel):
    users: List[UserSearchResult]


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_id: int = 0
    value: float
    completed: Optional[bool] = None
    is_current_user: bool = False


class LeaderboardResponse(BaseModel):
    type: str
    period: Optional[str] = None
    challenge_id: Optional[str] = None
    leaderboard: List[LeaderboardEntry]
    user_rank: Optional[int] = None
