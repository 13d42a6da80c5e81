from sqlalchemy import Column, String
from storefront.core.database import Base
from storefront.models.base import TimestampMixin


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    # Same value as the identity provider's user id.
    id = Column(String(64), primary_key=True)
    first_name = Column(String(128), nullable=True)
    last_name = Column(String(128), nullable=True)
    phone_text = Column(String(32), nullable=True)
