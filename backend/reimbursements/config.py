import os
import tempfile
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # settle | refund | exclude
    EXCHANGE_TOTAL_POLICY: str = "settle"
    REFUND_REASON: str = "Return processing"

    LOCK_DIR: str = os.path.join(tempfile.gettempdir(), "reimbursement_locks")
    LOCK_TIMEOUT_SECONDS: int = 10
    NUMBER_MAX_ATTEMPTS: int = 20

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
