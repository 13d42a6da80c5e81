from functools import lru_cache
import json
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins(value: str) -> list[str]:
    if not value:
        return []

    parsed: list[str]
    raw = value.strip()
    if raw.startswith("["):
        try:
            items = json.loads(raw)
            parsed = [str(item).strip() for item in items if str(item).strip()]
        except (TypeError, ValueError):
            parsed = []
    else:
        parsed = [origin.strip() for origin in raw.split(",") if origin.strip()]

    # Preserve order and remove duplicates.
    return list(dict.fromkeys(parsed))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Roastery Storefront"
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Identity provider (Supabase-issued access tokens)
    supabase_jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"
    jwt_verify_audience: bool = False
    staff_role: str = "service_role"

    # Database
    database_url: str
    db_pool_size: int = 5
    db_max_overflow: int = 5
    db_pool_timeout: int = 15
    db_pool_recycle: int = 1200
    db_pool_pre_ping: bool = True

    # Wallet / gift cards / pickups
    currency: str = "USD"
    gift_card_validity_years: int = 1
    gift_card_code_attempts: int = 5
    refund_on_cancel: bool = False

    # Rate limiting
    rate_limit_enabled: bool = True
    wallet_deposit_rate_limit: str = "10/minute"
    gift_card_issue_rate_limit: str = "5/minute"
    gift_card_redeem_rate_limit: str = "5/minute"
    pickup_schedule_rate_limit: str = "10/minute"

    # Frontend URLs (used for email links)
    frontend_base_url: str = "http://localhost:5173"

    # Email (gift card delivery)
    email_provider: str = "console"  # console|resend|smtp|brevo
    email_from: str = "Roastery <no-reply@roastery.local>"

    # Resend
    resend_api_key: Optional[str] = None

    # Brevo
    brevo_api_key: Optional[str] = None

    # SMTP
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"
    auto_create_tables: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
