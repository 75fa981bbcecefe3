"""Declarative base and the id/timestamp columns shared by every table."""
from sqlalchemy import Boolean, Column, DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, declared_attr
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class BaseModel:
    id = Column(Integer, primary_key=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    is_deleted = Column(Boolean, default=False, nullable=False)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
