import os
from starlette.config import Config


class ConfigService:
    def __init__(self):
        self.config = Config(environ=os.environ)

    def get(self, key: str, default=None):
        """Returns the value of a given config key."""
        return self.config(key, default=default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.config(key, default=None)
        if value is None:
            return default
        return str(value).strip().lower() in ("1", "true", "yes", "on")

    def get_int(self, key: str, default: int) -> int:
        return int(self.config(key, default=default))


_config_service_instance: ConfigService | None = None

def get_config_service() -> ConfigService:
    global _config_service_instance
    if _config_service_instance is None:
        _config_service_instance = ConfigService()
    return _config_service_instance
