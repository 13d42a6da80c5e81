from decimal import Decimal, InvalidOperation
import logging
from typing import Iterable

from storefront.core.errors import InvalidQuantity, ProductNotFound
from storefront.core.record_store import RecordStore
from storefront.core.security import require_identity
from storefront.models import CartItem, Product
from storefront.utils.money import to_money

logger = logging.getLogger(__name__)


def cart_total(items: Iterable[CartItem]) -> Decimal:
    return to_money(sum((Decimal(item.product.price) * item.quantity for item in items), Decimal("0")))


def item_count(items: Iterable[CartItem]) -> int:
    return sum(int(item.quantity) for item in items)


def _get_product(store: RecordStore, product_id: str) -> Product:
    product = store.find_one(Product, id=product_id)
    if not product:
        raise ProductNotFound()
    return product


def _whole_quantity(quantity) -> int:
    # 1.5 or "abc" must fail rather than be truncated by int().
    try:
        value = Decimal(str(quantity).strip())
    except InvalidOperation:
        raise InvalidQuantity()
    if not value.is_finite() or value != value.to_integral_value():
        raise InvalidQuantity()
    return int(value)


def _validated_quantity(quantity) -> int:
    value = _whole_quantity(quantity)
    if value <= 0:
        raise InvalidQuantity()
    return value


def get_cart(store: RecordStore, identity: str) -> list[CartItem]:
    identity = require_identity(identity)
    return store.find(CartItem, user_id=identity, order_by=CartItem.created_at)


def add_to_cart(store: RecordStore, identity: str, product_id: str, quantity: int = 1) -> list[CartItem]:
    identity = require_identity(identity)
    quantity = _validated_quantity(quantity)
    _get_product(store, product_id)

    existing = store.find_one(CartItem, user_id=identity, product_id=product_id)
    if existing:
        store.update(existing, {"quantity": existing.quantity + quantity}, commit=True)
    else:
        store.insert(CartItem(user_id=identity, product_id=product_id, quantity=quantity), commit=True)
    return get_cart(store, identity)


def update_quantity(store: RecordStore, identity: str, product_id: str, quantity: int) -> list[CartItem]:
    identity = require_identity(identity)
    quantity = _whole_quantity(quantity)
    if quantity <= 0:
        return remove_from_cart(store, identity, product_id)

    existing = store.find_one(CartItem, user_id=identity, product_id=product_id)
    if existing:
        store.update(existing, {"quantity": quantity}, commit=True)
    return get_cart(store, identity)


def remove_from_cart(store: RecordStore, identity: str, product_id: str) -> list[CartItem]:
    identity = require_identity(identity)
    store.delete(CartItem, user_id=identity, product_id=product_id, commit=True)
    return get_cart(store, identity)


def replace_cart(store: RecordStore, identity: str, lines: Iterable[tuple[str, int]]) -> list[CartItem]:
    """Overwrite the whole cart, e.g. when a guest cart is carried over after sign-in."""
    identity = require_identity(identity)
    merged: dict[str, int] = {}
    for product_id, quantity in lines:
        merged[product_id] = merged.get(product_id, 0) + _validated_quantity(quantity)
    for product_id in merged:
        _get_product(store, product_id)

    store.delete(CartItem, user_id=identity)
    for product_id, quantity in merged.items():
        store.insert(CartItem(user_id=identity, product_id=product_id, quantity=quantity))
    store.commit()
    return get_cart(store, identity)


def clear_cart(store: RecordStore, identity: str) -> list[CartItem]:
    identity = require_identity(identity)
    removed = store.delete(CartItem, user_id=identity, commit=True)
    logger.info("Cleared cart user=%s lines=%s", identity, removed)
    return []
