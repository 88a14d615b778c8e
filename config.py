from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./reels.db"
    DATABASE_ECHO: bool = False

    # Runtime
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Session cookie
    SESSION_COOKIE_NAME: str = "userId"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7  # 7 days

    # Feed
    FEED_LIMIT: int = 50

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    MEDIA_FOLDER: str = "reels"
    MEDIA_MAX_WIDTH: int = 720
    MEDIA_MAX_UPLOAD_MB: int = 100
    MEDIA_HOST_TIMEOUT: float = 60.0

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra='ignore')

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

settings = Settings()
