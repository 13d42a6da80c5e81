from fastapi import APIRouter
from storefront.api.v1.endpoints import cart, gift_cards, pickups, profile, wallet

router = APIRouter()

router.include_router(wallet.router, prefix="/wallet", tags=["wallet"])
router.include_router(gift_cards.router, prefix="/gift-cards", tags=["gift-cards"])
router.include_router(pickups.router, prefix="/pickups", tags=["pickups"])
router.include_router(cart.router, prefix="/cart", tags=["cart"])
router.include_router(profile.router, prefix="/profile", tags=["profile"])
