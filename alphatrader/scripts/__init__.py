import os

from dotenv import load_dotenv
from sqlalchemy import create_engine

load_dotenv()


def sync_database_url(url: str) -> str:
    """The app's async URL with a blocking driver, for one-off scripts."""
    return url.replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")


def make_engine(url: str | None = None):
    url = url or os.getenv("DATABASE_URL")
    if not url:
        raise SystemExit("DATABASE_URL is not set")
    return create_engine(sync_database_url(url))
