from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware

from ..core.config_service import get_config_service
from .auth_middleware import AuthMiddleware
from .error_handler import ExceptionMiddleware, register_exception_handlers

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def register_middlewares(app: FastAPI):
    config = get_config_service()
    secret_key = config.get("SECRET_KEY")
    if not secret_key:
        raise ValueError("SECRET_KEY is required")

    register_exception_handlers(app)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    app.add_middleware(AuthMiddleware, secret_key=secret_key)

    origins = [o.strip() for o in config.get("CORS_ORIGINS", "*").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # must stay the outermost middleware
    app.add_middleware(ExceptionMiddleware)
