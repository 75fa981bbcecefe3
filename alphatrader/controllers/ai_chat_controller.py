from fastapi import APIRouter, Depends, Request

from ..core import ApiError, ErrorCode, logger, require_user, validate_request
from ..schemas import AIResponse, ChatRequest, ProvidersResponse
from ..services import AIServiceFactory, get_ai_service_factory, with_system_prompt


class AIChatController:
    def __init__(self):
        self.router = APIRouter(prefix="/api/ai", tags=["ai"])
        self.register_routes()

    def register_routes(self):
        @self.router.post("/chat", response_model=AIResponse)
        async def chat(
            request: Request,
            user_id: str = Depends(require_user),
            ai_service_factory: AIServiceFactory = Depends(get_ai_service_factory),
        ):
            # body is read only after the auth check so anonymous callers always get 401
            body = await validate_request(request, ChatRequest)
            ai_service = ai_service_factory(body.provider)

            try:
                response = await ai_service.chat(with_system_prompt(body.messages))
            except Exception:
                logger.exception("AI chat error for user %s", user_id)
                raise ApiError(ErrorCode.INTERNAL_ERROR, "AI service error", status_code=500)

            return response

        @self.router.get("/chat", response_model=ProvidersResponse)
        async def list_providers(
            user_id: str = Depends(require_user),
            ai_service_factory: AIServiceFactory = Depends(get_ai_service_factory),
        ):
            try:
                providers = await ai_service_factory().get_available_providers()
            except Exception:
                logger.exception("Error checking AI providers")
                providers = []
            return ProvidersResponse(providers=providers)

    def get_router(self):
        return self.router
