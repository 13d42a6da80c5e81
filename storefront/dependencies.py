from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.core.config import get_settings
from storefront.core.database import get_db
from storefront.core.errors import Forbidden, Unauthenticated
from storefront.core.record_store import RecordStore
from storefront.core.security import decode_token
from storefront.schemas.identity import Identity

bearer = HTTPBearer(auto_error=False)


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    try:
        payload = decode_token(credentials.credentials)
        return Identity.model_validate(payload)
    except (JWTError, ValidationError):
        raise Unauthenticated("Could not validate credentials")


def require_staff(identity: Annotated[Identity, Depends(get_current_identity)]) -> Identity:
    if identity.role != get_settings().staff_role:
        raise Forbidden()
    return identity
