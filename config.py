from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./inventory.db"
    DATABASE_ECHO: bool = False

    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "0000"
    ADMIN_DISPLAY_NAME: str = "System Administrator"

    DEFAULT_CATEGORY: str = "General"
    DEFAULT_UNIT: str = "Unit"
    LOW_STOCK_THRESHOLD: int = 10
    FACILITY_NAME: str = "Medical Supply Store"

    # reject transactions whose item is missing instead of recording them unapplied
    REJECT_ORPHAN_TRANSACTIONS: bool = False

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    PORT: int = 8000

    class Config:
        env_file = ".env"

settings = Settings()
