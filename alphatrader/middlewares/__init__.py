from .middlewares_registration import register_middlewares
from .auth_middleware import AuthMiddleware
from .error_handler import ExceptionMiddleware, register_exception_handlers
