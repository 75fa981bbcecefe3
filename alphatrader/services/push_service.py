from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ..core import ApiError, ErrorCode, logger
from ..database import get_db
from ..models import PushSubscription
from ..schemas import PushSubscriptionIn


class PushService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find(self, user_id: int, endpoint: str) -> PushSubscription | None:
        result = await self.db.execute(
            select(PushSubscription).where(
                PushSubscription.user_id == user_id,
                PushSubscription.endpoint == endpoint,
            )
        )
        return result.scalars().first()

    async def save_subscription(self, user_id: int, subscription: PushSubscriptionIn) -> PushSubscription:
        if subscription.keys is None:
            raise ApiError(ErrorCode.VALIDATION_ERROR, "Invalid subscription data", status_code=400)

        record = await self._find(user_id, subscription.endpoint)
        if record is None:
            record = PushSubscription(user_id=user_id, endpoint=subscription.endpoint)
            self.db.add(record)
        record.p256dh = subscription.keys.p256dh
        record.auth = subscription.keys.auth

        try:
            await self.db.commit()
        except IntegrityError:
            # the same endpoint was saved concurrently; update that row instead
            await self.db.rollback()
            record = await self._find(user_id, subscription.endpoint)
            if record is None:
                raise
            record.p256dh = subscription.keys.p256dh
            record.auth = subscription.keys.auth
            await self.db.commit()

        logger.info("Saved push subscription for user %s", user_id)
        return record

    async def remove_subscription(self, user_id: int, endpoint: str) -> None:
        existing = await self._find(user_id, endpoint)
        if not existing:
            raise ApiError(ErrorCode.NOT_FOUND, "Push subscription not found", status_code=404)
        await self.db.delete(existing)
        await self.db.commit()
        logger.info("Removed push subscription for user %s", user_id)


def get_push_service(db: AsyncSession = Depends(get_db)) -> PushService:
    return PushService(db=db)
