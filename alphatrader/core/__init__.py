from .config_service import ConfigService, get_config_service
from .logger import logger
from .errors import ApiError, ErrorCode, error_response
from .openapi import setup_custom_openapi
from .security import create_access_token, decode_user_id, get_current_user_id, require_user, require_user_pk
from .validation import validate_request, validation_message, validation_details
