from typing import Any, Optional

from pydantic import BaseModel, model_validator

DEFAULT_TITLE = "AlphaTrader AI"
DEFAULT_BODY = "You have a new notification"
DEFAULT_ICON = "/icon-192x192.png"
DEFAULT_BADGE = "/icon-96x96.png"
DEFAULT_TAG = "default"


class PushKeys(BaseModel):
    p256dh: str
    auth: str


class PushSubscriptionIn(BaseModel):
    endpoint: str
    keys: Optional[PushKeys] = None

    @model_validator(mode="before")
    @classmethod
    def check_endpoint(cls, data: Any):
        if not isinstance(data, dict) or not data.get("endpoint"):
            raise ValueError("Invalid subscription data")
        return data


class NotificationAction(BaseModel):
    action: str
    title: str
    icon: Optional[str] = None


class PushPayload(BaseModel):
    """Payload delivered to the service worker's push handler."""

    title: Optional[str] = None
    body: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    tag: Optional[str] = None
    requireInteraction: Optional[bool] = None
    actions: Optional[list[NotificationAction]] = None

    def to_notification(self) -> tuple[str, dict[str, Any]]:
        """Title and options as the worker passes them to showNotification."""
        options = {
            "body": self.body or DEFAULT_BODY,
            "icon": DEFAULT_ICON,
            "badge": DEFAULT_BADGE,
            "data": self.data or {},
            "tag": self.tag or DEFAULT_TAG,
            "requireInteraction": self.requireInteraction or False,
            "actions": [a.model_dump(exclude_none=True) for a in self.actions or []],
        }
        return self.title or DEFAULT_TITLE, options

    def click_url(self) -> str:
        return (self.data or {}).get("url") or "/"
