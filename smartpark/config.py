"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

import os
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Storage ───────────────────────────────────────────────────────────
    DATA_DIR: str = "data"
    STATE_FILE: str = "parking_state.csv"
    TRANSACTIONS_FILE: str = "transactions.csv"

    # ── Facility layout ───────────────────────────────────────────────────
    FLOORS: int = 5
    SPOTS_PER_FLOOR: int = 20

    # ── Input limits ──────────────────────────────────────────────────────
    LICENSE_MAX_LENGTH: int = 32
    OWNER_MAX_LENGTH: int = 64

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @property
    def STATE_PATH(self) -> str:
        return os.path.join(self.DATA_DIR, self.STATE_FILE)

    @property
    def TRANSACTIONS_PATH(self) -> str:
        return os.path.join(self.DATA_DIR, self.TRANSACTIONS_FILE)

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
