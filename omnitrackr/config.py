from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    database_url: str
    SQL_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    # Sessions
    SESSION_LIFETIME: int = 86400  # seconds
    SESSION_COOKIE_NAME: str = "session_id"
    SESSION_COOKIE_SECURE: bool = False

    CORS_ORIGIN_REGEX: str = "https?://.*"

    # Logging / diagnostics
    LOG_LEVEL: str = "INFO"
    ERROR_LOG_FILE: str | None = "error.log"
    DEBUG: bool = False

    class Config:
        env_file = ".env"

settings = Settings()
