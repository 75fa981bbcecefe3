from .base import Base, BaseModel
from .user import User
from .watchlist import Watchlist
from .push_subscription import PushSubscription
