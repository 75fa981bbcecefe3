from sqlalchemy import Column, Integer, String, ForeignKey, JSON
from sqlalchemy.orm import relationship
from .base import Base, BaseModel

class Watchlist(BaseModel, Base):
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    symbols = Column(JSON, nullable=False, default=list)

    user = relationship("User", back_populates="watchlists")
