"""Tests for the watchlist endpoints and WatchlistService."""

from __future__ import annotations

import datetime as _dt
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from alphatrader.core import ApiError, ErrorCode
from alphatrader.services import WatchlistService, get_watchlist_service
from conftest import auth_headers

CREATED = _dt.datetime(2025, 12, 4, 14, 11, 6, tzinfo=_dt.timezone.utc)


def _watchlist(wl_id: int = 1, name: str = "Tech", symbols=None, description=None) -> SimpleNamespace:
    return SimpleNamespace(
        id=wl_id,
        name=name,
        description=description,
        symbols=list(symbols or []),
        created_at=CREATED,
    )


@pytest.fixture
def watchlist_service(override):
    service = AsyncMock()
    service.get_watchlists.return_value = [_watchlist(2, "Energy", ["XOM"]), _watchlist(1, "Tech", ["AAPL"])]
    service.get_watchlist.return_value = _watchlist(1, "Tech", ["AAPL"])
    service.create_watchlist.side_effect = lambda user_id, name, description: _watchlist(3, name, [], description)
    return override(get_watchlist_service, service)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


def test_requires_authentication(client, watchlist_service):
    assert client.get("/api/watchlist").status_code == 401
    assert client.post("/api/watchlist", json={"name": "x"}).status_code == 401
    watchlist_service.get_watchlists.assert_not_awaited()


def test_non_numeric_subject_is_unauthorized(client, watchlist_service):
    assert client.get("/api/watchlist", headers=auth_headers("abc")).status_code == 401


def test_lists_watchlists_for_user(client, watchlist_service):
    resp = client.get("/api/watchlist", headers=auth_headers(5))
    assert resp.status_code == 200
    body = resp.json()["watchlists"]
    assert [w["name"] for w in body] == ["Energy", "Tech"]
    assert body[0]["createdAt"].startswith("2025-12-04T14:11:06")
    assert body[0]["symbols"] == ["XOM"]
    watchlist_service.get_watchlists.assert_awaited_once_with(5)


def test_creates_watchlist(client, watchlist_service):
    resp = client.post("/api/watchlist", json={"name": "  Dividends ", "description": "income"}, headers=auth_headers(5))
    assert resp.status_code == 201
    assert resp.json()["watchlist"]["name"] == "Dividends"
    watchlist_service.create_watchlist.assert_awaited_once_with(5, "Dividends", "income")


@pytest.mark.parametrize(
    "body",
    [{}, {"name": "   "}, {"name": "x" * 101}, {"name": "ok", "description": "d" * 501}],
)
def test_rejects_invalid_watchlist(client, watchlist_service, body):
    resp = client.post("/api/watchlist", json=body, headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_missing_watchlist_is_404(client, watchlist_service):
    watchlist_service.get_watchlist.side_effect = ApiError(ErrorCode.NOT_FOUND, "Watchlist not found", status_code=404)
    resp = client.get("/api/watchlist/99", headers=auth_headers())
    assert resp.status_code == 404


def test_add_symbol_is_upper_cased(client, watchlist_service):
    resp = client.post("/api/watchlist/1/symbols", json={"symbol": " nvda "}, headers=auth_headers(5))
    assert resp.status_code == 200
    watchlist_service.add_symbols.assert_awaited_once_with(5, 1, ["NVDA"])


def test_blank_symbol_is_rejected(client, watchlist_service):
    resp = client.post("/api/watchlist/1/symbols", json={"symbol": "  "}, headers=auth_headers())
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Symbol is required"


def test_remove_symbol(client, watchlist_service):
    resp = client.request("DELETE", "/api/watchlist/1/symbols", json={"symbol": "aapl"}, headers=auth_headers(5))
    assert resp.status_code == 200
    watchlist_service.remove_symbol.assert_awaited_once_with(5, 1, "AAPL")


def test_delete_watchlist(client, watchlist_service):
    resp = client.delete("/api/watchlist/1", headers=auth_headers(5))
    assert resp.status_code == 200
    watchlist_service.delete_watchlist.assert_awaited_once_with(5, 1)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


def _db_returning(watchlist) -> MagicMock:
    db = MagicMock()
    result = MagicMock()
    result.scalars.return_value.first.return_value = watchlist
    db.execute = AsyncMock(return_value=result)
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    return db


@pytest.mark.asyncio
async def test_add_symbols_never_duplicates():
    watchlist = _watchlist(symbols=["AAPL"])
    service = WatchlistService(_db_returning(watchlist))

    await service.add_symbols(1, 1, ["aapl", "MSFT", "msft"])

    assert watchlist.symbols == ["AAPL", "MSFT"]


@pytest.mark.asyncio
async def test_remove_symbol_not_present_is_404():
    service = WatchlistService(_db_returning(_watchlist(symbols=["AAPL"])))
    with pytest.raises(ApiError) as exc:
        await service.remove_symbol(1, 1, "TSLA")
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_get_watchlist_of_another_user_is_404():
    service = WatchlistService(_db_returning(None))
    with pytest.raises(ApiError) as exc:
        await service.get_watchlist(1, 42)
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_create_watchlist_commits():
    db = _db_returning(None)
    service = WatchlistService(db)
    watchlist = await service.create_watchlist(3, "Tech", None)
    db.add.assert_called_once_with(watchlist)
    db.commit.assert_awaited_once()
    assert watchlist.symbols == []
    assert watchlist.user_id == 3


@pytest.mark.asyncio
async def test_delete_watchlist_marks_it_deleted():
    watchlist = _watchlist()
    watchlist.is_deleted = False
    db = _db_returning(watchlist)

    await WatchlistService(db).delete_watchlist(1, 1)

    assert watchlist.is_deleted is True
    db.commit.assert_awaited_once()
    db.delete.assert_not_awaited()
