from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
import logging
import re
import secrets
import string

from storefront.core.config import get_settings
from storefront.core.errors import (
    Expired,
    GiftCardNotFound,
    NoBalance,
    SelfRedemption,
    StorageFailure,
    StorefrontError,
)
from storefront.core.record_store import RecordStore
from storefront.core.security import require_identity
from storefront.models import GiftCard
from storefront.services.wallet import deposit, ledger_lock, pay
from storefront.utils.clock import as_utc, utcnow
from storefront.utils.money import to_money

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.digits + string.ascii_uppercase
CODE_BLOCKS = 4
CODE_BLOCK_SIZE = 4
CODE_PATTERN = re.compile(r"^[0-9A-Z]{4}(?:-[0-9A-Z]{4}){3}$")


@dataclass
class GiftCardSnapshot:
    id: str
    code: str
    amount: Decimal
    balance: Decimal
    user_id: str
    expires_at: datetime
    created_at: datetime | None = None
    recipient_email: str | None = None
    message: str | None = None
    design: str | None = None

    @classmethod
    def from_card(cls, card: GiftCard) -> "GiftCardSnapshot":
        return cls(
            id=card.id,
            code=card.code,
            amount=to_money(card.amount),
            balance=to_money(card.balance),
            user_id=card.user_id,
            expires_at=card.expires_at,
            created_at=card.created_at,
            recipient_email=card.recipient_email,
            message=card.message,
            design=card.design,
        )


def generate_code() -> str:
    return "-".join(
        "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_BLOCK_SIZE))
        for _ in range(CODE_BLOCKS)
    )


def normalize_code(code: str | None) -> str:
    return str(code or "").strip().upper()


def add_years(value: datetime, years: int) -> datetime:
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year.
        return value.replace(year=value.year + years, day=28)


def _allocate_code(store: RecordStore) -> str:
    attempts = max(1, get_settings().gift_card_code_attempts)
    for _ in range(attempts):
        code = generate_code()
        if store.find_one(GiftCard, code=code) is None:
            return code
        logger.warning("Gift card code collision on %s, regenerating", code)
    raise StorageFailure("Could not allocate a unique gift card code. Please retry.")


def list_gift_cards(store: RecordStore, identity: str) -> list[GiftCard]:
    identity = require_identity(identity)
    return store.find(GiftCard, user_id=identity, order_by=GiftCard.created_at.desc())


def issue_gift_card(
    store: RecordStore,
    purchaser: str,
    recipient_email: str,
    amount,
    message: str | None = None,
    design: str | None = None,
) -> GiftCard:
    """
    Sell a gift card funded from the purchaser's wallet.

    The wallet payment and the card row are committed together, so a rejected
    payment leaves no card behind and a failed insert leaves no payment.
    """
    purchaser = require_identity(purchaser)
    settings = get_settings()
    try:
        with ledger_lock(store, purchaser):
            payment = pay(store, purchaser, amount, f"Gift Card Purchase for {recipient_email}", commit=False)
            now = utcnow()
            card = GiftCard(
                code=_allocate_code(store),
                amount=payment.amount,
                balance=payment.amount,
                user_id=purchaser,
                created_at=now,
                expires_at=add_years(now, settings.gift_card_validity_years),
                recipient_email=recipient_email,
                message=message or "",
                design=design or "",
            )
            store.insert(card)
            store.commit()
    except StorefrontError:
        store.rollback()
        raise

    logger.info("Issued gift card %s amount=%s purchaser=%s", card.id, card.amount, purchaser)
    return card


def redeem_gift_card(store: RecordStore, redeemer: str, code: str) -> GiftCardSnapshot:
    """
    Move a card's whole remaining balance into the redeemer's wallet.

    Checks run in a fixed order: existence, self-redemption, balance, expiry.
    Ownership transfer, balance zeroing and the wallet deposit commit as one
    unit; the card update only applies while the balance is still positive,
    so a racing second redemption credits nothing.
    """
    redeemer = require_identity(redeemer)
    normalized = normalize_code(code)
    card = store.find_one(GiftCard, code=normalized) if normalized else None
    if card is None:
        raise GiftCardNotFound()
    if card.user_id == redeemer:
        raise SelfRedemption()
    if to_money(card.balance) <= 0:
        raise NoBalance()
    if utcnow() > as_utc(card.expires_at):
        raise Expired()

    snapshot = GiftCardSnapshot.from_card(card)
    try:
        with ledger_lock(store, redeemer):
            claimed = store.update_where(
                GiftCard,
                [GiftCard.id == card.id, GiftCard.user_id == snapshot.user_id, GiftCard.balance > 0],
                {"user_id": redeemer, "balance": Decimal("0")},
            )
            if not claimed:
                raise NoBalance()
            deposit(store, redeemer, snapshot.balance, f"Gift Card Redemption: {snapshot.code}", commit=False)
            store.commit()
    except StorefrontError:
        store.rollback()
        raise

    logger.info("Redeemed gift card %s amount=%s redeemer=%s previous_owner=%s", card.id, snapshot.balance, redeemer, snapshot.user_id)
    return snapshot
