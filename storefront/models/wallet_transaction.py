import enum
from sqlalchemy import Column, String, Numeric, CheckConstraint, Index
from storefront.core.database import Base
from storefront.models.base import CreatedAtMixin, new_id


class WalletTransactionType(str, enum.Enum):
    # "reload" is the stored name for a deposit.
    RELOAD = "reload"
    PAYMENT = "payment"


class WalletTransaction(Base, CreatedAtMixin):
    """
    One append-only ledger entry.

    ``amount`` is always positive; ``type`` carries the direction. Rows are
    never updated or deleted, and the wallet balance is derived from them.
    """

    __tablename__ = "wallet_transactions"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_wallet_transactions_amount_positive"),)

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    # Plain string keeps the stored vocabulary ("reload"/"payment") without a Postgres ENUM type.
    type = Column(String(16), nullable=False)
    description = Column(String(255), nullable=False)


Index("ix_wallet_transactions_user_created", WalletTransaction.user_id, WalletTransaction.created_at)
