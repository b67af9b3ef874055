from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr
from typing import List, Optional


class Settings(BaseSettings):
    PROJECT_NAME: str = "ChenYifaer Blog"
    DATABASE_URL: str = "sqlite+aiosqlite:///./cyf_blog.sqlite3"
    SECRET_KEY: SecretStr
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    LOG_LEVEL: str = "INFO"

    FRONTEND_URL: str = Field(default="http://localhost:3000", description="Base URL for the web front-end")
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    RESEND_API_KEY: SecretStr | None = None
    EMAIL_FROM_ADDRESS: str = "ChenYifaer <no-reply@chenyifaer.com>"

    GCS_BUCKET_NAME: str | None = None
    TARGET_SERVICE_ACCOUNT_EMAIL: str | None = Field(None, validation_alias='TARGET_SERVICE_ACCOUNT_EMAIL')
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None  # Path to service account key file
    STORAGE_PUBLIC_BASE_URL: str = "https://storage.googleapis.com"

    # Cache: in-process when unset
    REDIS_URL: str | None = None
    EMAIL_VERIFY_CACHE_SECONDS: int = 5 * 60
    HELLO_CACHE_SECONDS: int = 30

    VERIFICATION_TOKEN_EXPIRE_HOURS: int = 1

    DEFAULT_LANGUAGE: str = "en"
    LANGUAGES: List[str] = ["en", "zh"]

    AVATAR_MAX_BYTES: int = 5 * 1000 * 1000
    AVATAR_CONTENT_TYPES: List[str] = ["image/jpg", "image/jpeg", "image/png"]
    PAGE_SIZE: int = 15

    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

settings = Settings()

# Cookie names shared with the web client
COOKIE_ID_KEY = "__cyf_blog_id__"
COOKIE_TOKEN_KEY = "__cyf_blog_token__"
COOKIE_LANG_KEY = "__cyf_blog_lng__"
COOKIE_THEME_KEY = "__cyf_blog_theme__"
