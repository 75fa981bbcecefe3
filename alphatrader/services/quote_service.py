import asyncio
import json
import math
from typing import Optional

import yfinance as yf
from fastapi import Depends
from redis.exceptions import RedisError
from yfinance.exceptions import YFRateLimitError

from ..core import ConfigService, get_config_service, logger
from ..redis import get_redis_client
from ..schemas import Quote


class QuoteService:
    """Fetches quotes from Yahoo Finance one symbol at a time, through a Redis cache.

    The cache is optional: when Redis cannot be reached, quotes are fetched live.
    """

    def __init__(self, redis=None, cache_ttl: int = 300, rate_limit_delay: float = 1.0):
        self.redis = redis
        self.cache_ttl = cache_ttl
        self.rate_limit_delay = rate_limit_delay

    def _key(self, symbol: str) -> str:
        return f"quote:{symbol.upper()}"

    async def _cache(self):
        if self.redis is None:
            try:
                self.redis = await get_redis_client()
            except (RuntimeError, RedisError) as e:
                logger.warning("Quote cache unavailable: %s", e)
        return self.redis

    async def get_quotes(self, symbols: list[str]) -> list[Quote]:
        logger.info("Fetching quotes for %d symbols", len(symbols))
        cache = await self._cache()
        quotes: list[Quote] = []
        cache_hits = 0

        for symbol in symbols:
            cached = await self._get_cached(cache, symbol)
            if cached is not None:
                quotes.append(cached)
                cache_hits += 1
                continue

            try:
                quote = await asyncio.to_thread(self.fetch_quote, symbol)
            except YFRateLimitError:
                logger.warning("Rate limited on %s, backing off", symbol)
                await asyncio.sleep(self.rate_limit_delay)
                continue
            except Exception as e:
                logger.warning("Failed to fetch quote for %s: %s", symbol, e)
                continue

            if quote is not None:
                quotes.append(quote)
                await self._set_cached(cache, quote)

        logger.info("Fetched %d/%d quotes (%d from cache)", len(quotes), len(symbols), cache_hits)
        return quotes

    async def _get_cached(self, cache, symbol: str) -> Optional[Quote]:
        if cache is None:
            return None
        try:
            raw = await cache.get(self._key(symbol))
        except RedisError as e:
            logger.warning("Quote cache read failed for %s: %s", symbol, e)
            return None
        if not raw:
            return None
        try:
            return Quote.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValueError):
            return None

    async def _set_cached(self, cache, quote: Quote) -> None:
        if cache is None:
            return
        try:
            await cache.set(self._key(quote.symbol), quote.model_dump_json(), ex=self.cache_ttl)
        except RedisError as e:
            logger.warning("Quote cache write failed for %s: %s", quote.symbol, e)

    def fetch_quote(self, symbol: str) -> Optional[Quote]:
        info = yf.Ticker(symbol).fast_info
        price = _number(info, "lastPrice")
        if price is None:
            return None

        previous_close = _number(info, "previousClose")
        change = change_percent = None
        if previous_close:
            change = round(price - previous_close, 4)
            change_percent = round(change / previous_close * 100, 4)

        volume = _number(info, "lastVolume")
        return Quote(
            symbol=symbol.upper(),
            price=round(price, 4),
            previousClose=previous_close,
            change=change,
            changePercent=change_percent,
            open=_number(info, "open"),
            dayHigh=_number(info, "dayHigh"),
            dayLow=_number(info, "dayLow"),
            volume=int(volume) if volume is not None else None,
            marketCap=_number(info, "marketCap"),
            currency=_text(info, "currency"),
            exchange=_text(info, "exchange"),
        )


def _field(info, key: str):
    # fast_info computes fields lazily and raises when Yahoo has no data for them
    try:
        return info[key]
    except (KeyError, TypeError, ValueError, AttributeError):
        return None


def _number(info, key: str) -> Optional[float]:
    value = _field(info, key)
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(value) else value


def _text(info, key: str) -> Optional[str]:
    value = _field(info, key)
    return str(value) if value else None


def get_quote_service(config_service: ConfigService = Depends(get_config_service)) -> QuoteService:
    return QuoteService(cache_ttl=config_service.get_int("QUOTE_CACHE_TTL_SECONDS", 300))
