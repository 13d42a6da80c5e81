from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from storefront.core.config import get_settings
from storefront.core.errors import Unauthenticated

settings = get_settings()


def create_access_token(subject: str, role: str = "authenticated", expires_minutes: int = 60, **claims: Any) -> str:
    # Tokens are normally minted by the identity provider; this mirrors their
    # shape for local tooling and tests.
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "role": role,
        "aud": settings.jwt_audience,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
        **claims,
    }
    return jwt.encode(payload, settings.supabase_jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.supabase_jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        options={"verify_aud": settings.jwt_verify_audience},
    )


def require_identity(identity: str | None) -> str:
    value = str(identity or "").strip()
    if not value:
        raise Unauthenticated()
    return value
