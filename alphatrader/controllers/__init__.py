from .quotes_controller import QuotesController
from .ai_chat_controller import AIChatController
from .watchlist_controller import WatchlistController
from .push_controller import PushController
from .auth_controller import AuthController
