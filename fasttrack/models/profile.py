from sqlalchemy import Column, String, DateTime, Integer, Boolean, Text, JSON, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from fasttrack.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    # One row per user
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    display_name = Column(String, nullable=True)
    avatar_id = Column(Integer, nullable=False, default=0)
    custom_avatar_uri = Column(String, nullable=True)
    weight_unit = Column(String(3), nullable=False, default="lbs")  # "lbs" | "kg"
    notifications_enabled = Column(Boolean, nullable=False, default=False)
    timezone = Column(String, nullable=False, default="UTC")
    unlocked_badges = Column(JSON, nullable=False, default=list)

    # Social
    bio = Column(Text, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    show_on_leaderboard = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")

    def __repr__(self) -> str:
        return f"<Profile user_id={self.user_id} display_name={self.display_name} tz={self.timezone}>"
