"""
Domain errors raised by the storefront services.

Each error carries the HTTP status it maps to, a stable machine-readable code
and a human-readable detail. The API renders them as
``{"detail": ..., "code": ...}``.
"""


class StorefrontError(Exception):
    status_code = 400
    code = "storefront_error"
    detail = "Request could not be completed"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class Unauthenticated(StorefrontError):
    status_code = 401
    code = "unauthenticated"
    detail = "User not authenticated"


class Forbidden(StorefrontError):
    status_code = 403
    code = "forbidden"
    detail = "Staff access required"


class InvalidAmount(StorefrontError):
    code = "invalid_amount"
    detail = "Amount must be greater than zero"


class InvalidQuantity(StorefrontError):
    code = "invalid_quantity"
    detail = "Quantity must be a positive whole number"


class InsufficientFunds(StorefrontError):
    code = "insufficient_funds"
    detail = "Insufficient funds in your wallet"


class EmptyCart(StorefrontError):
    code = "empty_cart"
    detail = "No items in pickup"


class GiftCardNotFound(StorefrontError):
    status_code = 404
    code = "gift_card_not_found"
    detail = "Gift card not found"


class SelfRedemption(StorefrontError):
    code = "self_redemption"
    detail = "You cannot redeem your own gift card"


class NoBalance(StorefrontError):
    code = "no_balance"
    detail = "Gift card has no remaining balance"


class Expired(StorefrontError):
    code = "expired"
    detail = "Gift card has expired"


class ProductNotFound(StorefrontError):
    status_code = 404
    code = "product_not_found"
    detail = "Product not found"


class PickupNotFound(StorefrontError):
    status_code = 404
    code = "pickup_not_found"
    detail = "Pickup not found"


class InvalidPickupDate(StorefrontError):
    code = "invalid_pickup_date"
    detail = "Pickup date cannot be in the past"


class InvalidPickupTime(StorefrontError):
    code = "invalid_pickup_time"
    detail = "Pickup time is not an available time slot"


class InvalidStatusTransition(StorefrontError):
    status_code = 409
    code = "invalid_status_transition"
    detail = "Pickup status cannot be changed"


class StorageFailure(StorefrontError):
    status_code = 503
    code = "storage_failure"
    detail = "Storage is unavailable. Please retry in a moment."
