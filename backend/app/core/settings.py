import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.app_name = "Leadbook CRM"
        self.api_version = "1.0.0"
        self.environment = os.getenv("LEADBOOK_ENVIRONMENT", "development")
        self.secret_key = os.getenv("LEADBOOK_SECRET_KEY", "change-me-leadbook-development-signing-key")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("LEADBOOK_ACCESS_TOKEN_EXPIRE_MINUTES", "720"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("LEADBOOK_DATABASE_URL", "sqlite:///./leadbook.db")
        self.log_level = os.getenv("LEADBOOK_LOG_LEVEL", "INFO")
        # When set, every mutating route needs a bearer token instead of the `user` header.
        self.require_verified_identity = _env_flag("LEADBOOK_REQUIRE_VERIFIED_IDENTITY")
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("LEADBOOK_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
            if origin.strip()
        ]
        self.lead_id_width = 7
        self.search_category_limit = 5
        self.upcoming_follow_up_limit = 5


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
