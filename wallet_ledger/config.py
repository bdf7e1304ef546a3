"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./wallet_ledger.db"

    # Service
    service_name: str = "wallet-ledger"
    log_level: str = "INFO"

    # Reporting
    first_weekday: int = 0  # 0 = Monday, 6 = Sunday
    recent_transactions_limit: int = 10
    trend_months: int = 7
    months_per_page: int = 4

    # Default wallet synthesized when the store is empty
    default_wallet_name: str = "My Wallet"
    default_currency: str = "$"


settings = Settings()
