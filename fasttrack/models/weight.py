from sqlalchemy import Column, String, DateTime, Float, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from fasttrack.database import Base


class Weight(Base):
    __tablename__ = "weights"

    id = Column(String, primary_key=True)  # client-generated
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    weight = Column(Float, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="weights")

    def __repr__(self):
        return f"<Weight id={self.id} user={self.user_id} date={self.date} weight={self.weight}>"
