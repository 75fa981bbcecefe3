from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..core import ApiError, ErrorCode, get_current_user_id, logger, validate_request
from ..schemas import QuoteRequest, QuoteResponse
from ..services import QUOTES_POLICY, QuoteService, RateLimiter, get_identifier, get_quote_service, get_rate_limiter


class QuotesController:
    def __init__(self):
        self.router = APIRouter(prefix="/api", tags=["quotes"])
        self.register_routes()

    def register_routes(self):
        @self.router.post("/quotes", response_model=QuoteResponse)
        async def get_quotes(
            request: Request,
            quote_service: QuoteService = Depends(get_quote_service),
            rate_limiter: RateLimiter = Depends(get_rate_limiter),
        ):
            user_id = get_current_user_id(request)
            body = await validate_request(request, QuoteRequest)

            result = await rate_limiter.check(QUOTES_POLICY, get_identifier(request, user_id))
            if not result.success:
                retry_after = result.retry_after()
                raise ApiError(
                    ErrorCode.RATE_LIMIT_EXCEEDED,
                    f"Too many requests. Please try again in {retry_after} seconds.",
                    status_code=429,
                    details={"retryAfter": retry_after},
                    headers={**result.headers(), "Retry-After": str(retry_after)},
                )

            try:
                quotes = await quote_service.get_quotes(body.symbols)
            except Exception:
                logger.exception("Failed to fetch quotes for %s", body.symbols)
                raise ApiError(ErrorCode.INTERNAL_ERROR, "Failed to fetch quotes", status_code=500)

            return JSONResponse(
                content=QuoteResponse(quotes=quotes).model_dump(mode="json"),
                headers=result.headers(),
            )

    def get_router(self):
        return self.router
