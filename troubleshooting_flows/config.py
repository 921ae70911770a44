from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Support backend (article store, session store, live chat)
    API_BASE_URL: str = "http://localhost:8000"
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Security: Read from .env, never hardcode values here
    ADMIN_API_KEY: Optional[str] = None
    USER_ID: Optional[str] = None

    # Polling interval shared by every view mirroring remote state
    POLL_INTERVAL_SECONDS: float = 2.0

    # Authoring
    # Strict flows require exactly one Yes and one No option per node
    STRICT_FLOWS: bool = True
    DRAFT_DEBOUNCE_SECONDS: float = 0.5

    # Local key-value storage for drafts and the admin key
    DATABASE_URL: str = "sqlite:///./troubleshooting_flows.db"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
