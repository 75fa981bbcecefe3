from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WatchlistCreate(BaseModel):
    name: str = Field(max_length=100, description="Watchlist name")
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValueError("Watchlist name is required and must not be empty")
        return name


class WatchlistSymbol(BaseModel):
    symbol: str

    @field_validator("symbol")
    @classmethod
    def symbol_not_blank(cls, symbol: str) -> str:
        symbol = symbol.strip().upper()
        if not symbol:
            raise ValueError("Symbol is required")
        return symbol


class WatchlistOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    description: Optional[str] = None
    symbols: list[str] = Field(default_factory=list)
    created_at: datetime = Field(serialization_alias="createdAt")
