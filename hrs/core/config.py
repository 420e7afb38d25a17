"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "HRS"
    DEBUG: bool = True
    DEFAULT_COMPANY_NAME: str = "HRS"
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # MySQL
    MYSQL_URL: str = "mysql+pymysql://root:@localhost:3306/hrs"
    DATABASE_URL: str = "mysql+aiomysql://root:@localhost:3306/hrs"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Session cookies
    SESSION_SECRET: str = "super-secret-session-key-change-in-production"
    SESSION_ALGORITHM: str = "HS256"
    SESSION_MAX_AGE_DAYS: int = 30
    SESSION_COOKIE_SECURE: bool = False

    # Passwords
    PASSWORD_ITERATIONS: int = 1000
    PASSWORD_KEY_LENGTH: int = 64

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Super Administrator seed
    SUPER_ADMIN_USERNAME: str = "admin"
    SUPER_ADMIN_EMAIL: str = "admin@example.com"
    SUPER_ADMIN_PASSWORD: str = "changeme123"
    SUPER_ADMIN_FIRST_NAME: str = "Super"
    SUPER_ADMIN_LAST_NAME: str = "Administrator"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
