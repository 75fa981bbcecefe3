from .rate_limiter import (
    RateLimiter, RateLimitPolicy, RateLimitResult, InMemoryRateLimitStore, RedisRateLimitStore,
    QUOTES_POLICY, get_identifier, get_rate_limiter,
)
from .quote_service import QuoteService, get_quote_service
from .ai_service import (
    AIService, AIServiceFactory, AIServiceError, NoProviderAvailableError, ChatOptions,
    OpenAIProvider, OllamaProvider, STOCK_ANALYSIS_SYSTEM_PROMPT, with_system_prompt, get_ai_service_factory,
)
from .watchlist_service import WatchlistService, get_watchlist_service
from .push_service import PushService, get_push_service
from .auth_service import AuthService, get_auth_service
