from typing import Any, Optional

from pydantic import BaseModel, field_validator, model_validator

MAX_SYMBOLS_PER_REQUEST = 50


class QuoteRequest(BaseModel):
    symbols: list[str]

    @model_validator(mode="before")
    @classmethod
    def check_symbols(cls, data: Any):
        symbols = data.get("symbols") if isinstance(data, dict) else None
        if not symbols or not isinstance(symbols, list):
            raise ValueError("Symbols array is required and must not be empty")
        if len(symbols) > MAX_SYMBOLS_PER_REQUEST:
            raise ValueError(f"Maximum {MAX_SYMBOLS_PER_REQUEST} symbols allowed per request")
        return data

    @field_validator("symbols")
    @classmethod
    def normalize_symbols(cls, symbols: list[str]) -> list[str]:
        normalized = [s.strip().upper() for s in symbols]
        if any(not s for s in normalized):
            raise ValueError("Symbols must not be blank")
        return normalized


class Quote(BaseModel):
    symbol: str
    price: float
    previousClose: Optional[float] = None
    change: Optional[float] = None
    changePercent: Optional[float] = None
    open: Optional[float] = None
    dayHigh: Optional[float] = None
    dayLow: Optional[float] = None
    volume: Optional[int] = None
    marketCap: Optional[float] = None
    currency: Optional[str] = None
    exchange: Optional[str] = None


class QuoteResponse(BaseModel):
    quotes: list[Quote]
