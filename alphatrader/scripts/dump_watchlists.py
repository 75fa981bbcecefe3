"""Quick dump of the watchlist table.

    python -m alphatrader.scripts.dump_watchlists
"""
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from alphatrader.core import logger
from alphatrader.models import Watchlist
from alphatrader.scripts import make_engine


def dump_watchlists(engine) -> list[str]:
    with Session(engine) as session:
        watchlists = session.scalars(select(Watchlist).where(Watchlist.is_deleted == False)).all()

    lines = ["=== ALL WATCHLISTS ==="]
    for idx, wl in enumerate(watchlists, start=1):
        lines.append(f"\n--- Watchlist {idx} ---")
        lines.append(f"ID: {wl.id}")
        lines.append(f"Name: {wl.name}")
        lines.append(f"Symbols: {','.join(wl.symbols or [])}")
        lines.append(f"Created: {wl.created_at}")
    return lines


def main():
    engine = make_engine()
    try:
        print("\n".join(dump_watchlists(engine)))
    except SQLAlchemyError as e:
        logger.error("Error: %s", e)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
