from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Posts"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = """
    Minimal blog for signed-in users.

    ## Features
    * Cookie based authentication
    * Post creation, editing and deletion by their owner
    * Server rendered pages for every post view
    """
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"
    OPENAPI_URL: str = "/openapi.json"
    OPENAPI_TAGS: list[dict] = [
        {
            "name": "auth",
            "description": "Login, logout and account registration"
        },
        {
            "name": "posts",
            "description": "Post listing, creation, editing and deletion"
        },
    ]

    # CORS
    CORS_ALLOWED_ORIGINS: list[str] = ["http://localhost:8000", "http://localhost"]

    # Database
    DATABASE_URL: str = "sqlite:///./posts.db"
    DB_ECHO: bool = False

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Cookies
    COOKIE_SECURE: bool = True
    SESSION_COOKIE: str = "posts_session"
    LOGIN_URL: str = "/auth/login"

    # Posts
    TITLE_MAX_LENGTH: int = 255

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # console | json

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    # Get the current file's directory
    current_dir = Path(__file__).resolve().parent
    # Go up one level to the project root
    project_dir = current_dir.parent

    # Initialize settings with explicit .env path
    return Settings(_env_file=project_dir / ".env")
