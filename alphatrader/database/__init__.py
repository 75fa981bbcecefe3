from .db_service import DBService, get_db_service, close_db_service
from .dependency import get_db
