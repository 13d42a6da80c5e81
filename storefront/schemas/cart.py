from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel

RawQuantity = Union[int, float, str]


class ProductOut(BaseModel):
    id: str
    name: str
    price: Decimal
    image: str = ""
    description: str = ""
    category: str = "Unknown"
    long_description: Optional[str] = None
    roast_level: Optional[str] = None
    origin: Optional[str] = None
    flavor_notes: Optional[list[str]] = None
    weight: Optional[str] = None


class CartItemOut(BaseModel):
    product: ProductOut
    quantity: int


class CartOut(BaseModel):
    items: list[CartItemOut]
    total: Decimal
    item_count: int


class AddToCartRequest(BaseModel):
    product_id: str
    # Validated by the cart service so bad values get the invalid_quantity code.
    quantity: RawQuantity = 1


class UpdateQuantityRequest(BaseModel):
    quantity: RawQuantity


class CartLineIn(BaseModel):
    product_id: str
    quantity: RawQuantity = 1


class ReplaceCartRequest(BaseModel):
    items: list[CartLineIn]
