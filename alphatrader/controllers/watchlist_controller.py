from fastapi import APIRouter, Depends, Path, status

from ..core import require_user_pk
from ..models import Watchlist
from ..schemas import WatchlistCreate, WatchlistOut, WatchlistSymbol
from ..services import WatchlistService, get_watchlist_service


def serialize_watchlist(watchlist: Watchlist) -> dict:
    return WatchlistOut.model_validate(watchlist).model_dump(by_alias=True, mode="json")


class WatchlistController:
    def __init__(self):
        self.router = APIRouter(prefix="/api/watchlist", tags=["watchlist"])
        self.register_routes()

    def register_routes(self):
        @self.router.get("", response_model=dict)
        async def get_watchlists(
            user_id: int = Depends(require_user_pk),
            watchlist_service: WatchlistService = Depends(get_watchlist_service),
        ):
            watchlists = await watchlist_service.get_watchlists(user_id)
            return {"watchlists": [serialize_watchlist(w) for w in watchlists]}

        @self.router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
        async def create_watchlist(
            data: WatchlistCreate,
            user_id: int = Depends(require_user_pk),
            watchlist_service: WatchlistService = Depends(get_watchlist_service),
        ):
            watchlist = await watchlist_service.create_watchlist(user_id, data.name, data.description)
            return {"watchlist": serialize_watchlist(watchlist)}

        @self.router.get("/{watchlist_id}", response_model=dict)
        async def get_watchlist(
            watchlist_id: int = Path(..., description="Watchlist id"),
            user_id: int = Depends(require_user_pk),
            watchlist_service: WatchlistService = Depends(get_watchlist_service),
        ):
            watchlist = await watchlist_service.get_watchlist(user_id, watchlist_id)
            return {"watchlist": serialize_watchlist(watchlist)}

        @self.router.delete("/{watchlist_id}", response_model=dict)
        async def delete_watchlist(
            watchlist_id: int = Path(..., description="Watchlist id"),
            user_id: int = Depends(require_user_pk),
            watchlist_service: WatchlistService = Depends(get_watchlist_service),
        ):
            await watchlist_service.delete_watchlist(user_id, watchlist_id)
            return {"message": "Watchlist deleted successfully"}

        @self.router.post("/{watchlist_id}/symbols", response_model=dict)
        async def add_symbol(
            data: WatchlistSymbol,
            watchlist_id: int = Path(..., description="Watchlist id"),
            user_id: int = Depends(require_user_pk),
            watchlist_service: WatchlistService = Depends(get_watchlist_service),
        ):
            await watchlist_service.add_symbols(user_id, watchlist_id, [data.symbol])
            return {"message": "Symbol added successfully"}

        @self.router.delete("/{watchlist_id}/symbols", response_model=dict)
        async def remove_symbol(
            data: WatchlistSymbol,
            watchlist_id: int = Path(..., description="Watchlist id"),
            user_id: int = Depends(require_user_pk),
            watchlist_service: WatchlistService = Depends(get_watchlist_service),
        ):
            await watchlist_service.remove_symbol(user_id, watchlist_id, data.symbol)
            return {"message": "Symbol removed successfully"}

    def get_router(self):
        return self.router
