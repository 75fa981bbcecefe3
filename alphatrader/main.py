from contextlib import asynccontextmanager
from pathlib import Path
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import FileResponse
import uvicorn

from .controllers import AIChatController, AuthController, PushController, QuotesController, WatchlistController
from .core import get_config_service, logger, setup_custom_openapi
from .database import close_db_service, get_db_service
from .middlewares import register_middlewares
from .models import Base
from .redis import close_redis_client

dotenv_path = os.path.join(os.path.dirname(__file__), '.env')
load_dotenv(dotenv_path)

SERVICE_WORKER_PATH = Path(__file__).parent / "static" / "sw.js"


@asynccontextmanager
async def lifespan(app: FastAPI):
    config_service = get_config_service()
    if config_service.get_bool("DB_CREATE_ALL", False):
        await get_db_service(config_service).init_db(Base)
        logger.info("Database tables created")
    logger.info("AlphaTrader API started")

    yield

    await close_redis_client()
    await close_db_service()
    logger.info("AlphaTrader API stopped")


app = FastAPI(title="AlphaTrader API", version="0.1.0", lifespan=lifespan)

register_middlewares(app)

quotes_controller = QuotesController()
app.include_router(quotes_controller.get_router())
ai_chat_controller = AIChatController()
app.include_router(ai_chat_controller.get_router())
watchlist_controller = WatchlistController()
app.include_router(watchlist_controller.get_router())
push_controller = PushController()
app.include_router(push_controller.get_router())
auth_controller = AuthController()
app.include_router(auth_controller.get_router())

setup_custom_openapi(app)


@app.get("/sw.js", include_in_schema=False)
async def service_worker():
    return FileResponse(
        SERVICE_WORKER_PATH,
        media_type="application/javascript",
        headers={"Service-Worker-Allowed": "/", "Cache-Control": "no-cache"},
    )


@app.get("/api/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("alphatrader.main:app", host="0.0.0.0", port=8000, reload=True)
