from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class PostCreate(BaseModel):
    type: str = Field("text", max_length=40)
    content: Optional[str] = Field(None, max_length=1000)
    metadata: Optional[Dict[str, Any]] = None
    visibility: str = Field("friends", pattern="^(public|friends)$")


class PostResponse(BaseModel):
    id: str
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_id: int = 0
    type: str
    content: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    visibility: str
    likes_count: int = 0
    is_liked: bool = False
    created_at: Optional[datetime] = None


class FeedResponse(BaseModel):
    posts: List[PostResponse]
    limit: int
    offset: int
