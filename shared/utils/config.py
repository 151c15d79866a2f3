from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Supabase
    supabase_url: str
    supabase_key: str

    # Open States
    openstates_api_key: str
    openstates_base_url: str = "https://v3.openstates.org"

    # Trigger secrets (an unset secret rejects every request)
    webhook_secret: Optional[str] = None
    cron_secret: Optional[str] = None

    # Sync
    default_bill_limit: int = 50
    scheduled_bill_limit: int = 100
    store_min_request_interval: float = 0.2  # 5 req/sec soft limit
    source_min_request_interval: float = 0.1

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
