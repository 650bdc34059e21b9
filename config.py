from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator
from typing import List, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upstream ESCT REST API (the backend this portal consumes)
    ESCT_API_BASE_URL: str = "http://34.131.221.81:10000/api"
    # None keeps the aiohttp default timeout
    REQUEST_TIMEOUT_SECONDS: Optional[float] = None

    # Token persistence (stand-in for the browser's local storage)
    TOKEN_STORE_PATH: str = ".esct_token.json"
    TOKEN_KEY: str = "token"

    # GET /users is not deployed everywhere; when off, users are deduced from claims
    USE_USERS_ENDPOINT: bool = False
    UPCOMING_CLAIMS_LIMIT: int = 10

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @model_validator(mode='after')
    def strip_base_url(self) -> 'Settings':
        if self.ESCT_API_BASE_URL:
            self.ESCT_API_BASE_URL = self.ESCT_API_BASE_URL.rstrip("/")
        return self

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

settings = Settings()
