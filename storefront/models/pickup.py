import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Date, CheckConstraint, Index
from sqlalchemy.orm import relationship
from storefront.core.database import Base
from storefront.models.base import CreatedAtMixin, TimestampMixin, new_id


class PickupStatus(str, enum.Enum):
    PENDING = "pending"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Pickup(Base, TimestampMixin):
    __tablename__ = "pickups"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False)
    pickup_date = Column(Date, nullable=False)
    pickup_time = Column(String(16), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    status = Column(String(16), nullable=False, default=PickupStatus.PENDING.value)

    items = relationship("PickupItem", back_populates="pickup", lazy="selectin", order_by="PickupItem.created_at")


class PickupItem(Base, CreatedAtMixin):
    """Line item; ``price`` is the unit price captured when the pickup was scheduled."""

    __tablename__ = "pickup_items"
    __table_args__ = (CheckConstraint("quantity > 0", name="ck_pickup_items_quantity_positive"),)

    id = Column(String(36), primary_key=True, default=new_id)
    pickup_id = Column(String(36), ForeignKey("pickups.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2), nullable=False)

    pickup = relationship("Pickup", back_populates="items")
    product = relationship("Product", lazy="joined")


Index("ix_pickups_user_status", Pickup.user_id, Pickup.status)
