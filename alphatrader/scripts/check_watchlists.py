"""Print every watchlist in the database, newest first.

    python -m alphatrader.scripts.check_watchlists
"""
import json

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from alphatrader.core import logger
from alphatrader.models import Watchlist
from alphatrader.scripts import make_engine


def format_watchlist(watchlist: Watchlist, position: int) -> str:
    return "\n".join([
        f"--- Watchlist {position} ---",
        f"ID: {watchlist.id}",
        f"Name: {watchlist.name}",
        f"Description: {watchlist.description or '(none)'}",
        f"Symbols: {json.dumps(watchlist.symbols or [])}",
        f"Created: {watchlist.created_at}",
        "",
    ])


def check_watchlists(engine) -> int:
    print("\n=== CHECKING ALL WATCHLISTS ===\n")
    with Session(engine) as session:
        query = (
            select(Watchlist)
            .where(Watchlist.is_deleted == False)
            .order_by(Watchlist.created_at.desc())
        )
        watchlists = session.scalars(query).all()

    if not watchlists:
        print("No watchlists found in database.")
        return 0

    for idx, watchlist in enumerate(watchlists, start=1):
        print(format_watchlist(watchlist, idx))
    return len(watchlists)


def main():
    engine = make_engine()
    try:
        check_watchlists(engine)
    except SQLAlchemyError as e:
        logger.error("Error: %s", e)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
