from fastapi import APIRouter, Depends, Request

from ..core import require_user_pk, validate_request
from ..schemas import PushSubscriptionIn
from ..services import PushService, get_push_service


class PushController:
    def __init__(self):
        self.router = APIRouter(prefix="/api/push", tags=["push"])
        self.register_routes()

    def register_routes(self):
        @self.router.post("/subscribe", response_model=dict)
        async def subscribe(
            request: Request,
            user_id: int = Depends(require_user_pk),
            push_service: PushService = Depends(get_push_service),
        ):
            subscription = await validate_request(request, PushSubscriptionIn)
            await push_service.save_subscription(user_id, subscription)
            return {"success": True, "message": "Push subscription saved successfully"}

        @self.router.post("/unsubscribe", response_model=dict)
        async def unsubscribe(
            request: Request,
            user_id: int = Depends(require_user_pk),
            push_service: PushService = Depends(get_push_service),
        ):
            subscription = await validate_request(request, PushSubscriptionIn)
            await push_service.remove_subscription(user_id, subscription.endpoint)
            return {"success": True, "message": "Push subscription removed successfully"}

    def get_router(self):
        return self.router
