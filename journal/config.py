"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'trade_journal.db'}"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]  # Vite dev server

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440  # 24 hours

    # Ledger
    # When False, editing a DEPOSIT/WITHDRAW on the same account leaves the
    # balance untouched (historical behaviour).
    reconcile_cash_updates: bool = False
    reconcile_interval_minutes: int = 0  # 0 disables the periodic balance audit

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
