from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

from ..core import logger
from ..core.security import decode_user_id


class AuthMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, secret_key: str):
        super().__init__(app)
        self.secret_key = secret_key

    async def dispatch(self, request: Request, call_next):
        request.state.user_id = None
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1]
            user_id = decode_user_id(token, self.secret_key)
            if user_id is None:
                # an invalid token is treated as anonymous
                logger.debug("Ignoring invalid bearer token on %s", request.url.path)
            request.state.user_id = user_id

        response = await call_next(request)
        return response
