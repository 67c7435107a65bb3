"""Admin console configuration, read from MNP_* environment variables or .env"""
from functools import lru_cache
from typing import List, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration.
    
    Every field can be set as MNP_<FIELD>, e.g. MNP_MONGO_URI or
    MNP_FEED_MODE=poll.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="MNP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Request store
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "portability_admin_dev"
    requests_collection: str = "portability_requests"
    admin_roles_collection: str = "admin_roles"
    # Namespace segment of every document path: artifacts/{app_id}/users/...
    app_id: str = "1:547040634453:web:707ac2e44f60d4021556dc"
    
    # Live feed
    feed_enabled: bool = True
    feed_mode: Literal["change_stream", "poll"] = "change_stream"
    feed_poll_interval_seconds: int = 5
    
    # Session: chosen role and operator survive restarts in this file
    session_state_path: str = "./storage/session_state.json"
    
    # Sign-in
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    initial_auth_token: Optional[str] = None
    allow_role_selection: bool = True
    
    # When True a transition on a non-PENDING request is refused
    require_pending_for_transition: bool = False
    
    logs_path: str = "./logs"
    log_level: str = "INFO"
    
    # Comma separated; "*" allows any origin without credentials
    cors_origins: str = "*"
    
    environment: str = "development"
    debug: bool = True
    
    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
    
    @property
    def is_development(self) -> bool:
        """Unsigned tokens are only accepted in these environments"""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
