from datetime import datetime
import pytz
from sqlalchemy import Column, String, DateTime, Integer, Boolean, Text, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from fasttrack.database import Base
import uuid


def _utcnow():
    return datetime.now(pytz.UTC).replace(tzinfo=None)


class Circle(Base):
    """Small fasting group with its own chat, joined by invite code."""
    __tablename__ = "circles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    creator_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    invite_code = Column(String(6), unique=True, index=True, nullable=False)
    max_members = Column(Integer, nullable=False, default=10)
    is_private = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())

    creator = relationship("User")
    members = relationship("CircleMember", back_populates="circle", cascade="all, delete-orphan")
    messages = relationship("CircleMessage", back_populates="circle", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Circle id={self.id} name={self.name} max_members={self.max_members}>"


class CircleMember(Base):
    __tablename__ = "circle_members"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    circle_id = Column(String, ForeignKey("circles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String, nullable=False, default="member")  # admin | member
    joined_at = Column(DateTime, server_default=func.now())

    circle = relationship("Circle", back_populates="members")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("circle_id", "user_id", name="uq_circle_member"),
    )

    def __repr__(self):
        return f"<CircleMember circle={self.circle_id} user={self.user_id} role={self.role}>"


class CircleMessage(Base):
    __tablename__ = "circle_messages"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    circle_id = Column(String, ForeignKey("circles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False, default="text")  # text | system | fast_completed | badge_unlocked
    content = Column(Text, nullable=False)
    metadata_json = Column(JSON, nullable=True)
    # Set client-side with microseconds; message pages are cut on this column
    created_at = Column(DateTime, default=_utcnow, nullable=False, index=True)

    circle = relationship("Circle", back_populates="messages")

    def __repr__(self):
        return f"<CircleMessage id={self.id} circle={self.circle_id} type={self.type}>"
