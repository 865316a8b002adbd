from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class CircleCreate(BaseModel):
    """Name length is checked in the handler after trimming (400)."""
    name: str = Field(..., max_length=60)
    description: Optional[str] = Field(None, max_length=500)
    max_members: Optional[int] = Field(None, ge=2, le=100)
    is_private: bool = True


class CircleUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=60)
    description: Optional[str] = Field(None, max_length=500)
    max_members: Optional[int] = Field(None, ge=2, le=100)
    is_private: Optional[bool] = None


class CircleJoinRequest(BaseModel):
    circle_id: Optional[str] = None
    invite_code: Optional[str] = None


class MemberRoleUpdate(BaseModel):
    role: str = Field(..., pattern="^(admin|member)$")


class CircleMessageCreate(BaseModel):
    """Content is trimmed and length-checked in the handler (400)."""
    content: str
    type: str = Field("text", max_length=40)
    metadata: Optional[Dict[str, Any]] = None


class CircleMessageResponse(BaseModel):
    id: str
    circle_id: str
    user_id: str
    username: Optional[str] = None
    display_name: str = "Anonymous"
    avatar_id: int = 0
    type: str
    content: str
    metadata: Optional[Dict[str, Any]] = None
    is_own: bool = False
    created_at: datetime


class CircleResponse(BaseModel):
    id: str
    creator_id: str
    name: str
    description: Optional[str] = None
    invite_code: Optional[str] = None
    max_members: int
    is_private: bool
    member_count: int = 0
    user_role: Optional[str] = None
    last_message: Optional[CircleMessageResponse] = None
    created_at: Optional[datetime] = None


class CircleSummary(BaseModel):
    """What an invite code reveals before joining."""
    id: str
    name: str
    description: Optional[str] = None
    member_count: int
    max_members: int
    is_private: bool


class CircleListResponse(BaseModel):
    circles: List[CircleResponse]


class CircleMemberResponse(BaseModel):
    user_id: str
    username: Optional[str] = None
    display_name: str = "Anonymous"
    avatar_id: int = 0
    role: str
    joined_at: Optional[datetime] = None


class CircleDetailResponse(BaseModel):
    circle: CircleResponse
    members: List[CircleMemberResponse]


class CircleJoinResponse(BaseModel):
    success: bool = True
    circle_id: str


class CircleMessagesResponse(BaseModel):
    messages: List[CircleMessageResponse]
    has_more: bool
