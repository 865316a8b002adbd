from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey
from sqlalchemy.sql import func
from fasttrack.database import Base


class NotificationSettings(Base):
    __tablename__ = "notification_settings"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    fast_reminder = Column(Boolean, nullable=False, default=True)
    milestone_reached = Column(Boolean, nullable=False, default=True)
    streak_at_risk = Column(Boolean, nullable=False, default=True)
    daily_motivation = Column(Boolean, nullable=False, default=True)
    reminder_hour = Column(Integer, nullable=False, default=20)  # local hour, 0-23
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<NotificationSettings user_id={self.user_id} reminder_hour={self.reminder_hour}>"
