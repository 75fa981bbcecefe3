from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from typing import AsyncGenerator
from fastapi import Depends
from ..core import ConfigService, get_config_service


class DBService:
    def __init__(self, config: ConfigService):
        database_url = config.get("DATABASE_URL")
        if not database_url:
            raise ValueError("DATABASE_URL is not set in config!")

        self.engine = create_async_engine(
            database_url,
            echo=False,
            pool_size=config.get_int("DB_POOL_SIZE", 10),
            max_overflow=20,
            pool_timeout=30,
            pool_pre_ping=True,
        )

        self.async_session_maker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def get_db(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.async_session_maker() as session:
            yield session

    async def init_db(self, base_model):
        async with self.engine.begin() as conn:
            await conn.run_sync(base_model.metadata.create_all)

    async def close(self):
        await self.engine.dispose()


_db_service_instance: DBService | None = None

def get_db_service(config_service: ConfigService = Depends(get_config_service)) -> DBService:
    global _db_service_instance
    if _db_service_instance is None:
        _db_service_instance = DBService(config_service)
    return _db_service_instance


async def close_db_service():
    global _db_service_instance
    if _db_service_instance is not None:
        await _db_service_instance.close()
        _db_service_instance = None
