from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.core.errors import (
    Expired,
    GiftCardNotFound,
    InsufficientFunds,
    NoBalance,
    SelfRedemption,
    StorageFailure,
)
from storefront.models import GiftCard, WalletTransaction
from storefront.services import gift_cards as gift_card_service
from storefront.services.gift_cards import (
    CODE_PATTERN,
    add_years,
    generate_code,
    issue_gift_card,
    list_gift_cards,
    normalize_code,
    redeem_gift_card,
)
from storefront.services.wallet import deposit, get_balance


def _funded(store, identity: str = "buyer", amount: str = "25.00") -> str:
    deposit(store, identity, amount)
    return identity


def test_generated_codes_match_format():
    for _ in range(50):
        assert CODE_PATTERN.match(generate_code())


def test_normalize_code_trims_and_uppercases():
    assert normalize_code("  abcd-efgh-1234-5678 \n") == "ABCD-EFGH-1234-5678"
    assert normalize_code(None) == ""


def test_add_years_handles_leap_day():
    assert add_years(datetime(2028, 2, 29, tzinfo=timezone.utc), 1) == datetime(2029, 2, 28, tzinfo=timezone.utc)
    assert add_years(datetime(2026, 10, 19, tzinfo=timezone.utc), 1) == datetime(2027, 10, 19, tzinfo=timezone.utc)


def test_issue_spends_whole_balance(store):
    _funded(store)

    card = issue_gift_card(store, "buyer", "friend@example.com", "25.00", message="Enjoy", design="classic")

    assert CODE_PATTERN.match(card.code)
    assert Decimal(card.amount) == Decimal("25.00")
    assert Decimal(card.balance) == Decimal("25.00")
    assert card.user_id == "buyer"
    assert get_balance(store, "buyer") == Decimal("0.00")

    payment = store.find_one(WalletTransaction, user_id="buyer", type="payment")
    assert payment.description == "Gift Card Purchase for friend@example.com"


def test_issue_expires_one_year_out(store):
    _funded(store)

    card = issue_gift_card(store, "buyer", "friend@example.com", "10.00")

    created = card.created_at.replace(tzinfo=None)
    expires = card.expires_at.replace(tzinfo=None)
    assert expires.year == created.year + 1


def test_issue_with_insufficient_funds_creates_no_card(store):
    _funded(store, amount="24.99")

    with pytest.raises(InsufficientFunds):
        issue_gift_card(store, "buyer", "friend@example.com", "25.00")

    assert store.find(GiftCard) == []
    assert get_balance(store, "buyer") == Decimal("24.99")


def test_issue_gives_up_after_repeated_code_collisions(store, monkeypatch):
    _funded(store, amount="50.00")
    first = issue_gift_card(store, "buyer", "a@example.com", "10.00")
    monkeypatch.setattr(gift_card_service, "generate_code", lambda: first.code)

    with pytest.raises(StorageFailure):
        issue_gift_card(store, "buyer", "b@example.com", "10.00")

    assert len(store.find(GiftCard)) == 1
    assert get_balance(store, "buyer") == Decimal("40.00")


def test_redeem_moves_balance_and_ownership(store):
    _funded(store)
    card = issue_gift_card(store, "buyer", "friend@example.com", "25.00")

    snapshot = redeem_gift_card(store, "friend", f"  {card.code.lower()} ")

    assert snapshot.balance == Decimal("25.00")
    assert snapshot.user_id == "buyer"
    assert get_balance(store, "friend") == Decimal("25.00")

    stored = store.find_one(GiftCard, code=card.code)
    assert stored.user_id == "friend"
    assert Decimal(stored.balance) == Decimal("0")

    reload = store.find_one(WalletTransaction, user_id="friend")
    assert reload.description == f"Gift Card Redemption: {card.code}"
    assert list_gift_cards(store, "friend")[0].id == card.id
    assert list_gift_cards(store, "buyer") == []


def test_redeem_unknown_code(store):
    with pytest.raises(GiftCardNotFound):
        redeem_gift_card(store, "friend", "ZZZZ-ZZZZ-ZZZZ-ZZZZ")
    with pytest.raises(GiftCardNotFound):
        redeem_gift_card(store, "friend", "   ")


def test_redeem_own_card_is_rejected(store):
    _funded(store)
    card = issue_gift_card(store, "buyer", "friend@example.com", "25.00")

    with pytest.raises(SelfRedemption):
        redeem_gift_card(store, "buyer", card.code)

    assert get_balance(store, "buyer") == Decimal("0.00")


def test_second_redemption_never_double_credits(store):
    _funded(store)
    card = issue_gift_card(store, "buyer", "friend@example.com", "25.00")
    redeem_gift_card(store, "friend", card.code)

    # The card now belongs to the first redeemer.
    with pytest.raises(SelfRedemption):
        redeem_gift_card(store, "friend", card.code)
    with pytest.raises(NoBalance):
        redeem_gift_card(store, "someone-else", card.code)

    assert get_balance(store, "friend") == Decimal("25.00")
    assert get_balance(store, "someone-else") == Decimal("0.00")


def test_expired_card_is_rejected(store):
    _funded(store)
    card = issue_gift_card(store, "buyer", "friend@example.com", "25.00")
    store.update(card, {"expires_at": datetime.now(timezone.utc) - timedelta(seconds=1)}, commit=True)

    with pytest.raises(Expired):
        redeem_gift_card(store, "friend", card.code)

    assert get_balance(store, "friend") == Decimal("0.00")


def test_zero_balance_is_checked_before_expiry(store):
    _funded(store)
    card = issue_gift_card(store, "buyer", "friend@example.com", "25.00")
    store.update(
        card,
        {"balance": Decimal("0"), "expires_at": datetime.now(timezone.utc) - timedelta(days=1)},
        commit=True,
    )

    with pytest.raises(NoBalance):
        redeem_gift_card(store, "friend", card.code)


def test_lost_race_credits_nothing(store, monkeypatch):
    _funded(store)
    card = issue_gift_card(store, "buyer", "friend@example.com", "25.00")

    # Another worker claims the card between the checks and the conditional update.
    original_update_where = store.update_where

    def _racing_update_where(model, conditions, patch):
        store.db.query(GiftCard).filter(GiftCard.id == card.id).update({"balance": Decimal("0")})
        return original_update_where(model, conditions, patch)

    monkeypatch.setattr(store, "update_where", _racing_update_where)

    with pytest.raises(NoBalance):
        redeem_gift_card(store, "friend", card.code)

    assert get_balance(store, "friend") == Decimal("0.00")
