from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from .base import Base, BaseModel

class User(BaseModel, Base):
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    watchlists = relationship("Watchlist", back_populates="user", cascade="all, delete-orphan")
    push_subscriptions = relationship("PushSubscription", back_populates="user", cascade="all, delete-orphan")
