import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from storefront.models.pickup import PickupStatus
from storefront.schemas.cart import ProductOut


class SchedulePickupRequest(BaseModel):
    date: dt.date
    time: str


class PickupItemOut(BaseModel):
    product: ProductOut
    quantity: int
    price: Decimal


class PickupOut(BaseModel):
    id: str
    date: dt.date
    time: str
    status: PickupStatus
    total: Decimal
    items: list[PickupItemOut] = []
    created_at: Optional[dt.datetime] = None


class PickupStatusUpdate(BaseModel):
    status: PickupStatus


class TimeSlotsOut(BaseModel):
    slots: list[str]


class ScheduledPickupOut(PickupOut):
    cart_cleared: bool = True
