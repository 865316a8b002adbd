from sqlalchemy import Column, String, DateTime, Integer, Float, Boolean, Text, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from fasttrack.database import Base
import uuid


class Challenge(Base):
    """User-created challenge, joinable publicly or by invite code."""
    __tablename__ = "challenges"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    creator_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=False)  # complete_fasts | total_hours | longest_fast | streak
    target_value = Column(Float, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)
    invite_code = Column(String(6), unique=True, index=True, nullable=True)
    max_participants = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    creator = relationship("User")
    participants = relationship("ChallengeParticipant", back_populates="challenge", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Challenge id={self.id} name={self.name} type={self.type} target={self.target_value}>"


class ChallengeParticipant(Base):
    __tablename__ = "challenge_participants"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    challenge_id = Column(String, ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    progress = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    joined_at = Column(DateTime, server_default=func.now())

    challenge = relationship("Challenge", back_populates="participants")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("challenge_id", "user_id", name="uq_challenge_participant"),
    )

    def __repr__(self):
        return f"<ChallengeParticipant challenge={self.challenge_id} user={self.user_id} progress={self.progress} completed={self.completed}>"
