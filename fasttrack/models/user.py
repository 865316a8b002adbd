from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from fasttrack.database import Base
import uuid

class User(Base):
    """Account credentials; everything user-facing lives on Profile."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)  # stored lower-cased
    password_hash = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=True)  # [a-z0-9_], 3-20 chars
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    fasts = relationship("Fast", back_populates="user", cascade="all, delete-orphan")
    weights = relationship("Weight", back_populates="user", cascade="all, delete-orphan")

    # Friend relationships
    sent_friend_requests = relationship("FriendRequest", foreign_keys="FriendRequest.requester_id", back_populates="requester", cascade="all, delete-orphan")
    received_friend_requests = relationship("FriendRequest", foreign_keys="FriendRequest.recipient_id", back_populates="recipient", cascade="all, delete-orphan")
    friendships_as_user1 = relationship("Friendship", foreign_keys="Friendship.user1_id", back_populates="user1", cascade="all, delete-orphan")
    friendships_as_user2 = relationship("Friendship", foreign_keys="Friendship.user2_id", back_populates="user2", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} email={self.email} username={self.username}>"
