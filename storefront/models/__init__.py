from storefront.models.product import Product, Category
from storefront.models.cart_item import CartItem
from storefront.models.wallet_transaction import WalletTransaction, WalletTransactionType
from storefront.models.gift_card import GiftCard
from storefront.models.pickup import Pickup, PickupItem, PickupStatus
from storefront.models.profile import Profile

__all__ = [
    "Product",
    "Category",
    "CartItem",
    "WalletTransaction",
    "WalletTransactionType",
    "GiftCard",
    "Pickup",
    "PickupItem",
    "PickupStatus",
    "Profile",
]
