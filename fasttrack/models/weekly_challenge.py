from sqlalchemy import Column, String, DateTime, Integer, Float, Boolean, Text, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from fasttrack.database import Base
import uuid


class WeeklyChallenge(Base):
    """Community challenge generated from a template, one per ISO week."""
    __tablename__ = "weekly_challenges"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    week_number = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=False)
    target_value = Column(Float, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    reward_badge_id = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    participants = relationship("WeeklyChallengeParticipant", back_populates="weekly_challenge", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("week_number", "year", name="uq_weekly_challenge_week"),
    )

    def __repr__(self):
        return f"<WeeklyChallenge id={self.id} year={self.year} week={self.week_number} name={self.name}>"


class WeeklyChallengeParticipant(Base):
    __tablename__ = "weekly_challenge_participants"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    weekly_challenge_id = Column(String, ForeignKey("weekly_challenges.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    progress = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)
    joined_at = Column(DateTime, server_default=func.now())

    weekly_challenge = relationship("WeeklyChallenge", back_populates="participants")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("weekly_challenge_id", "user_id", name="uq_weekly_challenge_participant"),
    )
