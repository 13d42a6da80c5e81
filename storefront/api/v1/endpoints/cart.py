from fastapi import APIRouter, Depends

from storefront.core.record_store import RecordStore
from storefront.dependencies import get_current_identity, get_store
from storefront.api.v1.endpoints._helpers import cart_out
from storefront.schemas.cart import AddToCartRequest, CartOut, ReplaceCartRequest, UpdateQuantityRequest
from storefront.schemas.identity import Identity
from storefront.services import cart as cart_service

router = APIRouter()


@router.get("", response_model=CartOut)
def get_cart(identity: Identity = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    return cart_out(cart_service.get_cart(store, identity.user_id))


@router.put("", response_model=CartOut)
def replace_cart(
    payload: ReplaceCartRequest,
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    lines = [(line.product_id, line.quantity) for line in payload.items]
    return cart_out(cart_service.replace_cart(store, identity.user_id, lines))


@router.post("/items", response_model=CartOut)
def add_item(
    payload: AddToCartRequest,
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    return cart_out(cart_service.add_to_cart(store, identity.user_id, payload.product_id, payload.quantity))


@router.patch("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: str,
    payload: UpdateQuantityRequest,
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    return cart_out(cart_service.update_quantity(store, identity.user_id, product_id, payload.quantity))


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(product_id: str, identity: Identity = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    return cart_out(cart_service.remove_from_cart(store, identity.user_id, product_id))


@router.delete("", response_model=CartOut)
def clear(identity: Identity = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    return cart_out(cart_service.clear_cart(store, identity.user_id))
