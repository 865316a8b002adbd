from sqlalchemy import Column, String, DateTime, Boolean, Float, Text, BigInteger, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from fasttrack.database import Base


class Fast(Base):
    """A single fasting session. Times are epoch milliseconds as sent by the client."""
    __tablename__ = "fasts"

    id = Column(String, primary_key=True)  # client-generated
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(BigInteger, nullable=False)
    end_time = Column(BigInteger, nullable=True)  # null while the fast is active
    target_duration = Column(Float, nullable=False, default=16)  # hours
    plan_id = Column(String, nullable=False, default="")
    plan_name = Column(String, nullable=False, default="")
    completed = Column(Boolean, nullable=False, default=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="fasts")

    __table_args__ = (
        Index("ix_fasts_user_end_time", "user_id", "end_time"),
    )

    def __repr__(self):
        return f"<Fast id={self.id} user={self.user_id} start={self.start_time} end={self.end_time} completed={self.completed}>"
