from decimal import Decimal
import gc
import threading
from types import SimpleNamespace

import pytest

from storefront.core.errors import InsufficientFunds, InvalidAmount, Unauthenticated
from storefront.core.database import SessionLocal
from storefront.core.record_store import RecordStore
from storefront.models import WalletTransaction, WalletTransactionType
from storefront.services import wallet as wallet_service
from storefront.services.wallet import (
    DEFAULT_DEPOSIT_DESCRIPTION,
    MAX_AMOUNT,
    calculate_balance,
    deposit,
    get_balance,
    list_transactions,
    pay,
)


def _entry(amount: str, tx_type: WalletTransactionType):
    return SimpleNamespace(amount=Decimal(amount), type=tx_type.value)


def test_calculate_balance_empty_log_is_zero():
    assert calculate_balance([]) == Decimal("0.00")


def test_calculate_balance_ignores_entry_order():
    entries = [
        _entry("30.00", WalletTransactionType.RELOAD),
        _entry("12.50", WalletTransactionType.PAYMENT),
        _entry("5.25", WalletTransactionType.RELOAD),
        _entry("0.75", WalletTransactionType.PAYMENT),
    ]
    expected = Decimal("22.00")
    assert calculate_balance(entries) == expected
    assert calculate_balance(reversed(entries)) == expected
    assert calculate_balance(entries[2:] + entries[:2]) == expected


def test_deposit_appends_reload_and_updates_balance(store):
    entry = deposit(store, "user-1", "30")

    assert entry.type == WalletTransactionType.RELOAD.value
    assert entry.description == DEFAULT_DEPOSIT_DESCRIPTION
    assert get_balance(store, "user-1") == Decimal("30.00")


def test_balance_is_scoped_to_identity(store):
    deposit(store, "user-1", "10.00")
    deposit(store, "user-2", "4.00")

    assert get_balance(store, "user-1") == Decimal("10.00")
    assert get_balance(store, "user-2") == Decimal("4.00")
    assert get_balance(store, "user-3") == Decimal("0.00")


@pytest.mark.parametrize("amount", ["0", "-5", "abc", "NaN", None])
def test_deposit_rejects_non_positive_or_invalid_amount(store, amount):
    with pytest.raises(InvalidAmount):
        deposit(store, "user-1", amount)

    assert store.find(WalletTransaction) == []


def test_pay_debits_when_funds_are_sufficient(store):
    deposit(store, "user-1", "20.00")

    entry = pay(store, "user-1", "20.00", "Pickup order")

    assert entry.type == WalletTransactionType.PAYMENT.value
    assert get_balance(store, "user-1") == Decimal("0.00")


def test_pay_rejects_insufficient_funds_and_writes_nothing(store):
    deposit(store, "user-1", "5.00")

    with pytest.raises(InsufficientFunds) as exc:
        pay(store, "user-1", "5.01", "Pickup order")

    assert "Current balance: $5.00" in exc.value.detail
    assert get_balance(store, "user-1") == Decimal("5.00")
    assert len(store.find(WalletTransaction, user_id="user-1")) == 1


def test_pay_rejects_non_positive_amount(store):
    deposit(store, "user-1", "5.00")

    with pytest.raises(InvalidAmount):
        pay(store, "user-1", "0", "Pickup order")


@pytest.mark.parametrize("identity", ["", "   ", None])
def test_ledger_requires_identity(store, identity):
    with pytest.raises(Unauthenticated):
        get_balance(store, identity)
    with pytest.raises(Unauthenticated):
        deposit(store, identity, "5.00")


def test_list_transactions_is_newest_first_and_limited(store):
    deposit(store, "user-1", "10.00", "first")
    deposit(store, "user-1", "3.00", "second")
    pay(store, "user-1", "2.00", "third")

    entries = list_transactions(store, "user-1")
    assert len(entries) == 3
    stamps = [entry.created_at for entry in entries]
    assert stamps == sorted(stamps, reverse=True)
    assert len(list_transactions(store, "user-1", limit=2)) == 2


def test_amounts_are_rounded_to_cents(store):
    deposit(store, "user-1", "10.005")

    assert get_balance(store, "user-1") == Decimal("10.01")


def test_amount_above_column_limit_is_rejected(store):
    deposit(store, "user-1", MAX_AMOUNT)

    with pytest.raises(InvalidAmount):
        deposit(store, "user-1", MAX_AMOUNT + Decimal("0.01"))
    with pytest.raises(InvalidAmount):
        deposit(store, "user-1", "1e40")

    assert get_balance(store, "user-1") == MAX_AMOUNT


def test_concurrent_payments_are_serialized(db, store):
    deposit(store, "user-1", "10.00")
    barrier = threading.Barrier(2)
    outcomes = []

    def _pay():
        session = SessionLocal()
        try:
            barrier.wait()
            pay(RecordStore(session), "user-1", "10.00", "Pickup order")
            outcomes.append("ok")
        except InsufficientFunds:
            outcomes.append("insufficient")
        finally:
            session.close()

    workers = [threading.Thread(target=_pay) for _ in range(2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=10)

    assert sorted(outcomes) == ["insufficient", "ok"]
    db.expire_all()
    assert get_balance(store, "user-1") == Decimal("0.00")
    assert len(store.find(WalletTransaction, user_id="user-1", type="payment")) == 1


def test_identity_locks_are_released_when_unused():
    lock = wallet_service._identity_lock("transient-user")
    assert wallet_service._identity_lock("transient-user") is lock

    del lock
    gc.collect()

    assert "transient-user" not in wallet_service._identity_locks
