import logging

from fastapi import APIRouter, Depends, Request

from storefront.core.config import get_settings
from storefront.core.errors import StorageFailure
from storefront.core.record_store import RecordStore
from storefront.dependencies import get_current_identity, get_store, require_staff
from storefront.middlewares.rate_limit import limiter
from storefront.api.v1.endpoints._helpers import pickup_out
from storefront.schemas.identity import Identity
from storefront.schemas.pickup import PickupOut, PickupStatusUpdate, SchedulePickupRequest, ScheduledPickupOut, TimeSlotsOut
from storefront.services.cart import clear_cart, get_cart
from storefront.services.pickups import (
    PICKUP_TIME_SLOTS,
    cancel_pickup,
    list_pickups,
    schedule_pickup,
    update_pickup_status,
)

settings = get_settings()
router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/slots", response_model=TimeSlotsOut)
def time_slots():
    return TimeSlotsOut(slots=list(PICKUP_TIME_SLOTS))


@router.get("/me", response_model=list[PickupOut])
def my_pickups(identity: Identity = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    return [pickup_out(p) for p in list_pickups(store, identity.user_id)]


@router.post("", response_model=ScheduledPickupOut, status_code=201)
@limiter.limit(settings.pickup_schedule_rate_limit)
def create_pickup(
    request: Request,
    payload: SchedulePickupRequest,
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    items = get_cart(store, identity.user_id)
    pickup = schedule_pickup(store, identity.user_id, payload.date, payload.time, items)

    # Separate step: the pickup is already paid for even if clearing fails.
    cart_cleared = True
    try:
        clear_cart(store, identity.user_id)
    except StorageFailure as exc:
        cart_cleared = False
        logger.warning("Pickup %s scheduled but cart clear failed: %s", pickup.id, exc)

    return ScheduledPickupOut(**pickup_out(pickup).model_dump(), cart_cleared=cart_cleared)


@router.post("/{pickup_id}/cancel", response_model=PickupOut)
def cancel(pickup_id: str, identity: Identity = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    return pickup_out(cancel_pickup(store, identity.user_id, pickup_id))


@router.post("/{pickup_id}/status", response_model=PickupOut)
def set_status(
    pickup_id: str,
    payload: PickupStatusUpdate,
    staff: Identity = Depends(require_staff),
    store: RecordStore = Depends(get_store),
):
    logger.info("Staff %s updating pickup %s to %s", staff.user_id, pickup_id, payload.status.value)
    return pickup_out(update_pickup_status(store, pickup_id, payload.status))
