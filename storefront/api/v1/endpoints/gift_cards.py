import logging

from fastapi import APIRouter, Depends, Request

from storefront.core.config import get_settings
from storefront.core.record_store import RecordStore
from storefront.dependencies import get_current_identity, get_store
from storefront.middlewares.rate_limit import limiter
from storefront.schemas.gift_card import GiftCardOut, IssueGiftCardRequest, RedeemGiftCardRequest, RedemptionOut
from storefront.schemas.identity import Identity
from storefront.services.email import send_gift_card_email
from storefront.services.gift_cards import issue_gift_card, list_gift_cards, redeem_gift_card
from storefront.services.wallet import get_balance

settings = get_settings()
router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/me", response_model=list[GiftCardOut])
def my_gift_cards(identity: Identity = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    return list_gift_cards(store, identity.user_id)


@router.post("", response_model=GiftCardOut, status_code=201)
@limiter.limit(settings.gift_card_issue_rate_limit)
def purchase_gift_card(
    request: Request,
    payload: IssueGiftCardRequest,
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    card = issue_gift_card(
        store,
        identity.user_id,
        str(payload.recipient_email),
        payload.amount,
        message=payload.message,
        design=payload.design,
    )
    try:
        send_gift_card_email(card.recipient_email, code=card.code, amount=card.amount, message=card.message)
    except Exception as exc:
        # The card is already paid for and stored; the purchaser can still share the code.
        logger.warning(
            "Gift card email send failed card=%s provider=%s error=%s",
            card.id,
            settings.email_provider,
            exc,
        )
    return card


@router.post("/redeem", response_model=RedemptionOut)
@limiter.limit(settings.gift_card_redeem_rate_limit)
def redeem(
    request: Request,
    payload: RedeemGiftCardRequest,
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    snapshot = redeem_gift_card(store, identity.user_id, payload.code)
    return RedemptionOut(
        gift_card=GiftCardOut.model_validate(snapshot),
        credited=snapshot.balance,
        wallet_balance=get_balance(store, identity.user_id),
    )
