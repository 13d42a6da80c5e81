from contextlib import contextmanager
from decimal import Decimal
import logging
import threading
import weakref
from typing import Iterable

from sqlalchemy import text

from storefront.core.config import get_settings
from storefront.core.errors import InsufficientFunds, InvalidAmount
from storefront.core.record_store import RecordStore
from storefront.core.security import require_identity
from storefront.models import WalletTransaction, WalletTransactionType
from storefront.utils.money import format_money, to_money

logger = logging.getLogger(__name__)

DEFAULT_DEPOSIT_DESCRIPTION = "Wallet Reload"

# Largest value the Numeric(12, 2) amount column holds.
MAX_AMOUNT = Decimal("9999999999.99")

# Entries disappear once no caller holds the lock.
_identity_locks: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()
_identity_locks_guard = threading.Lock()


def _identity_lock(identity: str) -> threading.RLock:
    with _identity_locks_guard:
        lock = _identity_locks.get(identity)
        if lock is None:
            lock = threading.RLock()
            _identity_locks[identity] = lock
        return lock


@contextmanager
def ledger_lock(store: RecordStore, identity: str):
    """
    Serialize read-balance-then-append for one identity.

    Callers keep the block open until they commit. The in-process lock is
    re-entrant so a flow that holds it can still call ``pay``; on PostgreSQL a
    transaction-scoped advisory lock covers other workers as well.
    """
    with _identity_lock(identity):
        if store.dialect == "postgresql":
            store.execute(text("SELECT pg_advisory_xact_lock(hashtext(:identity))"), {"identity": identity})
        yield


def calculate_balance(transactions: Iterable[WalletTransaction]) -> Decimal:
    total = Decimal("0")
    for tx in transactions:
        if tx.type == WalletTransactionType.RELOAD.value:
            total += Decimal(tx.amount)
        else:
            total -= Decimal(tx.amount)
    return to_money(total)


def _validated_amount(amount) -> Decimal:
    try:
        value = to_money(amount)
    except ValueError:
        raise InvalidAmount()
    if value <= 0:
        raise InvalidAmount()
    if value > MAX_AMOUNT:
        raise InvalidAmount(f"Amount cannot exceed {format_money(MAX_AMOUNT, get_settings().currency)}")
    return value


def get_balance(store: RecordStore, identity: str) -> Decimal:
    identity = require_identity(identity)
    return calculate_balance(store.find(WalletTransaction, user_id=identity))


def list_transactions(store: RecordStore, identity: str, limit: int | None = None) -> list[WalletTransaction]:
    identity = require_identity(identity)
    entries = store.find(WalletTransaction, user_id=identity, order_by=WalletTransaction.created_at.desc())
    return entries[:limit] if limit else entries


def _append(store: RecordStore, identity: str, amount: Decimal, tx_type: WalletTransactionType, description: str, commit: bool) -> WalletTransaction:
    entry = WalletTransaction(
        user_id=identity,
        amount=amount,
        type=tx_type.value,
        description=description,
    )
    store.insert(entry, commit=commit)
    logger.info("Wallet %s user=%s amount=%s description=%r", tx_type.value, identity, amount, description)
    return entry


def deposit(
    store: RecordStore,
    identity: str,
    amount,
    description: str = DEFAULT_DEPOSIT_DESCRIPTION,
    *,
    commit: bool = True,
) -> WalletTransaction:
    identity = require_identity(identity)
    value = _validated_amount(amount)
    return _append(store, identity, value, WalletTransactionType.RELOAD, description, commit)


def pay(store: RecordStore, identity: str, amount, description: str, *, commit: bool = True) -> WalletTransaction:
    identity = require_identity(identity)
    value = _validated_amount(amount)
    with ledger_lock(store, identity):
        # Re-read inside the lock; the balance seen by the caller may be stale.
        balance = get_balance(store, identity)
        if balance < value:
            logger.warning("Payment rejected user=%s amount=%s balance=%s", identity, value, balance)
            currency = get_settings().currency
            raise InsufficientFunds(
                f"Insufficient funds in your wallet. Current balance: {format_money(balance, currency)}"
            )
        return _append(store, identity, value, WalletTransactionType.PAYMENT, description, commit)
