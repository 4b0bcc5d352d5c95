from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    """Application settings - All values are loaded from .env file automatically"""

    # API Settings
    APP_NAME: str = "DermAssist API"
    APP_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # CORS Settings
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Server Settings (optional)
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # AI inference (any OpenAI-compatible chat completions endpoint)
    AI_API_KEY: Optional[str] = None
    NEBIUS_API_KEY: Optional[str] = None  # legacy name, used when AI_API_KEY is unset
    AI_BASE_URL: str = "https://api.studio.nebius.com/v1/"
    AI_MODEL: str = "google/gemma-3-27b-it"
    AI_TIMEOUT_SECONDS: float = 30.0
    AI_MAX_TOKENS: int = 1024
    AI_TEMPERATURE: float = 0.3
    AI_TOP_P: float = 0.9
    AI_TOP_K: int = 50

    # Upload Settings
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_SIZE: int = 10485760  # 10MB
    IMAGE_MAX_DIMENSION: int = 1024
    JPEG_QUALITY: int = 85

    # Monitoring (optional)
    SENTRY_DSN: Optional[str] = None
    SENTRY_ENVIRONMENT: str = "development"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"  # Ignore extra fields from .env
    }

    @property
    def ai_api_key(self) -> Optional[str]:
        return self.AI_API_KEY or self.NEBIUS_API_KEY

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

settings = Settings()
