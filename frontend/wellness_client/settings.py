from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class ClientSettings(BaseSettings):
    API_BASE_URL: str = "http://localhost:8000/api"
    # seconds of inactivity before the editor auto-saves
    AUTOSAVE_DELAY: float = 5.0
    # how long the "saved" indicator stays before returning to idle
    SAVED_STATUS_RESET: float = 3.0
    TOKEN_FILE: str | None = None
    REQUEST_TIMEOUT: float = 30.0

    model_config = SettingsConfigDict(env_prefix="WELLNESS_", env_file=".env", extra="ignore")

@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
