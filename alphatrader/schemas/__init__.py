from .quotes import QuoteRequest, Quote, QuoteResponse, MAX_SYMBOLS_PER_REQUEST
from .chat import AIMessage, AIResponse, ChatRequest, ProvidersResponse
from .watchlist import WatchlistCreate, WatchlistSymbol, WatchlistOut
from .push import PushKeys, PushSubscriptionIn, PushPayload, NotificationAction
from .user import UserCreate, LoginRequest, UserOut, Token
