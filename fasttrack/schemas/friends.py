from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum

class FriendRequestStatus(str, Enum):
    PENDING = "pending"

class FriendRequestCreate(BaseModel):
    recipient_username: str = Field(..., description="Username of the user to send friend request to")

class FriendRequestResponse(BaseModel):
    id: str
    requester_id: str
    recipient_id: str
    status: str
    created_at: Optional[datetime] = None
    requester_username: Optional[str] = None
    recipient_username: Optional[str] = None

class FriendshipResponse(BaseModel):
    id: str
    friend_id: str
    created_at: Optional[datetime] = None
    friend_username: Optional[str] = None
    friend_display_name: Optional[str] = None
    friend_avatar_id: int = 0
    friend_current_streak: int = 0
    friend_longest_streak: int = 0
    friend_total_fasts: int = 0

class FriendsListResponse(BaseModel):
    friends: List[FriendshipResponse]
    total_count: int
    page: int
    page_size: int

class FriendRequestsListResponse(BaseModel):
    requests: List[FriendRequestResponse]
    total_count: int
    page: int
    page_size: int

class FriendRequestStatusResponse(BaseModel):
    message: str
    status: str
