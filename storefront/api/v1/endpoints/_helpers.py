from decimal import Decimal

from storefront.models import CartItem, Pickup, Product
from storefront.schemas.cart import CartItemOut, CartOut, ProductOut
from storefront.schemas.pickup import PickupItemOut, PickupOut
from storefront.services.cart import cart_total, item_count
from storefront.utils.money import to_money


def product_out(product: Product, price: Decimal | None = None) -> ProductOut:
    # Pickup lines pass their captured price instead of the live catalog price.
    return ProductOut(
        id=product.id,
        name=product.name,
        price=to_money(product.price if price is None else price),
        image=product.image or "",
        description=product.description or "",
        category=product.category.name if product.category else "Unknown",
        long_description=product.long_description,
        roast_level=product.roast_level,
        origin=product.origin,
        flavor_notes=product.flavor_notes,
        weight=product.weight,
    )


def cart_out(items: list[CartItem]) -> CartOut:
    return CartOut(
        items=[CartItemOut(product=product_out(item.product), quantity=item.quantity) for item in items],
        total=cart_total(items),
        item_count=item_count(items),
    )


def pickup_out(pickup: Pickup) -> PickupOut:
    return PickupOut(
        id=pickup.id,
        date=pickup.pickup_date,
        time=pickup.pickup_time,
        status=pickup.status,
        total=to_money(pickup.total),
        items=[
            PickupItemOut(product=product_out(item.product, item.price), quantity=item.quantity, price=to_money(item.price))
            for item in pickup.items
        ],
        created_at=pickup.created_at,
    )
