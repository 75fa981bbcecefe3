from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ..core import ApiError, ErrorCode, logger
from ..database import get_db
from ..models import Watchlist


class WatchlistService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_watchlists(self, user_id: int) -> list[Watchlist]:
        result = await self.db.execute(
            select(Watchlist)
            .where(Watchlist.user_id == user_id, Watchlist.is_deleted == False)
            .order_by(Watchlist.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_watchlist(self, user_id: int, watchlist_id: int) -> Watchlist:
        result = await self.db.execute(
            select(Watchlist).where(
                Watchlist.id == watchlist_id,
                Watchlist.user_id == user_id,
                Watchlist.is_deleted == False,
            )
        )
        watchlist = result.scalars().first()
        if not watchlist:
            raise ApiError(ErrorCode.NOT_FOUND, "Watchlist not found", status_code=404)
        return watchlist

    async def create_watchlist(self, user_id: int, name: str, description: Optional[str] = None) -> Watchlist:
        watchlist = Watchlist(user_id=user_id, name=name, description=description, symbols=[])
        self.db.add(watchlist)
        await self.db.commit()
        await self.db.refresh(watchlist)
        logger.info("Created watchlist %s for user %s", watchlist.id, user_id)
        return watchlist

    async def delete_watchlist(self, user_id: int, watchlist_id: int) -> None:
        watchlist = await self.get_watchlist(user_id, watchlist_id)
        watchlist.is_deleted = True
        await self.db.commit()
        logger.info("Deleted watchlist %s for user %s", watchlist_id, user_id)

    async def add_symbols(self, user_id: int, watchlist_id: int, symbols: list[str]) -> Watchlist:
        watchlist = await self.get_watchlist(user_id, watchlist_id)
        current = list(watchlist.symbols or [])
        for symbol in symbols:
            symbol = symbol.upper()
            if symbol not in current:
                current.append(symbol)
        # reassign so the JSON column is flagged dirty
        watchlist.symbols = current
        await self.db.commit()
        await self.db.refresh(watchlist)
        return watchlist

    async def remove_symbol(self, user_id: int, watchlist_id: int, symbol: str) -> Watchlist:
        watchlist = await self.get_watchlist(user_id, watchlist_id)
        symbol = symbol.upper()
        current = list(watchlist.symbols or [])
        if symbol not in current:
            raise ApiError(ErrorCode.NOT_FOUND, "Symbol not in watchlist", status_code=404)
        watchlist.symbols = [s for s in current if s != symbol]
        await self.db.commit()
        await self.db.refresh(watchlist)
        return watchlist


def get_watchlist_service(db: AsyncSession = Depends(get_db)) -> WatchlistService:
    return WatchlistService(db=db)
