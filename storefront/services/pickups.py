from datetime import date, datetime
from decimal import Decimal
import logging
from typing import Iterable

from storefront.core.config import get_settings
from storefront.core.errors import (
    EmptyCart,
    InvalidPickupDate,
    InvalidPickupTime,
    InvalidQuantity,
    InvalidStatusTransition,
    PickupNotFound,
    StorefrontError,
)
from storefront.core.record_store import RecordStore
from storefront.core.security import require_identity
from storefront.models import Pickup, PickupItem, PickupStatus
from storefront.services.wallet import deposit, ledger_lock, pay
from storefront.utils.clock import today
from storefront.utils.money import to_money

logger = logging.getLogger(__name__)

PICKUP_PAYMENT_DESCRIPTION = "Pickup order"
PICKUP_REFUND_DESCRIPTION = "Refund for cancelled pickup"

OPENING_MINUTE = 8 * 60
CLOSING_MINUTE = 17 * 60
SLOT_MINUTES = 30

ALLOWED_TRANSITIONS: dict[PickupStatus, set[PickupStatus]] = {
    PickupStatus.PENDING: {PickupStatus.READY, PickupStatus.CANCELLED},
    PickupStatus.READY: {PickupStatus.COMPLETED, PickupStatus.CANCELLED},
    PickupStatus.COMPLETED: set(),
    PickupStatus.CANCELLED: set(),
}


def _format_slot(minute_of_day: int) -> str:
    hour, minute = divmod(minute_of_day, 60)
    suffix = "AM" if hour < 12 else "PM"
    return f"{(hour % 12) or 12}:{minute:02d} {suffix}"


PICKUP_TIME_SLOTS: tuple[str, ...] = tuple(
    _format_slot(m) for m in range(OPENING_MINUTE, CLOSING_MINUTE + 1, SLOT_MINUTES)
)


def normalize_time_slot(value: str | None) -> str:
    raw = " ".join(str(value or "").split()).upper()
    try:
        parsed = datetime.strptime(raw, "%I:%M %p")
    except ValueError:
        raise InvalidPickupTime()
    slot = _format_slot(parsed.hour * 60 + parsed.minute)
    if slot not in PICKUP_TIME_SLOTS:
        raise InvalidPickupTime()
    return slot


def _line_items(cart_items) -> list[tuple]:
    lines = []
    for item in cart_items:
        quantity = int(item.quantity)
        if quantity <= 0:
            raise InvalidQuantity()
        # Price is frozen here; later catalog changes never touch the pickup.
        lines.append((item.product, quantity, to_money(item.product.price)))
    return lines


def list_pickups(store: RecordStore, identity: str) -> list[Pickup]:
    identity = require_identity(identity)
    return store.find(Pickup, user_id=identity, order_by=Pickup.created_at.desc())


def schedule_pickup(store: RecordStore, identity: str, pickup_date: date, pickup_time: str, cart_items: Iterable) -> Pickup:
    """
    Charge the wallet for the cart and book a pickup slot.

    ``cart_items`` are objects exposing ``product`` (with ``id`` and ``price``)
    and ``quantity``. The wallet payment, pickup row and line items are
    committed together; an ``InsufficientFunds`` rejection writes nothing.
    Clearing the cart is left to the caller.
    """
    identity = require_identity(identity)
    items = list(cart_items)
    if not items:
        raise EmptyCart()
    if pickup_date < today():
        raise InvalidPickupDate()
    slot = normalize_time_slot(pickup_time)

    lines = _line_items(items)
    total = to_money(sum((price * quantity for _, quantity, price in lines), Decimal("0")))

    try:
        with ledger_lock(store, identity):
            # Ledger rows are strictly positive; an all-free order books without a payment.
            if total > 0:
                pay(store, identity, total, PICKUP_PAYMENT_DESCRIPTION, commit=False)
            pickup = store.insert(
                Pickup(
                    user_id=identity,
                    pickup_date=pickup_date,
                    pickup_time=slot,
                    total=total,
                    status=PickupStatus.PENDING.value,
                )
            )
            for product, quantity, price in lines:
                store.insert(PickupItem(pickup_id=pickup.id, product_id=product.id, quantity=quantity, price=price))
            store.commit()
    except StorefrontError:
        store.rollback()
        raise

    logger.info("Scheduled pickup %s user=%s date=%s time=%s total=%s", pickup.id, identity, pickup_date, slot, total)
    return pickup


def _transition(store: RecordStore, pickup: Pickup, target: PickupStatus) -> None:
    current = PickupStatus(pickup.status)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransition(f"Pickup cannot move from {current.value} to {target.value}")
    store.update(pickup, {"status": target.value})


def cancel_pickup(store: RecordStore, identity: str, pickup_id: str) -> Pickup:
    identity = require_identity(identity)
    pickup = store.find_one(Pickup, id=pickup_id, user_id=identity)
    if not pickup:
        raise PickupNotFound()

    refund = get_settings().refund_on_cancel
    try:
        with ledger_lock(store, identity):
            _transition(store, pickup, PickupStatus.CANCELLED)
            if refund and to_money(pickup.total) > 0:
                deposit(store, identity, pickup.total, PICKUP_REFUND_DESCRIPTION, commit=False)
            store.commit()
    except StorefrontError:
        store.rollback()
        raise

    logger.info("Cancelled pickup %s user=%s refunded=%s", pickup.id, identity, refund)
    return pickup


def update_pickup_status(store: RecordStore, pickup_id: str, status: PickupStatus | str) -> Pickup:
    target = PickupStatus(status)
    pickup = store.find_one(Pickup, id=pickup_id)
    if not pickup:
        raise PickupNotFound()
    if target == PickupStatus.CANCELLED:
        return cancel_pickup(store, pickup.user_id, pickup.id)

    try:
        _transition(store, pickup, target)
        store.commit()
    except StorefrontError:
        store.rollback()
        raise

    logger.info("Pickup %s moved to %s", pickup.id, target.value)
    return pickup
