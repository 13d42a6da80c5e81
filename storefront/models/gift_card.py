from sqlalchemy import Column, String, Numeric, DateTime, Text, CheckConstraint, Index
from storefront.core.database import Base
from storefront.models.base import CreatedAtMixin, new_id


class GiftCard(Base, CreatedAtMixin):
    __tablename__ = "gift_cards"
    __table_args__ = (
        CheckConstraint("balance >= 0 AND balance <= amount", name="ck_gift_cards_balance_range"),
        CheckConstraint("amount > 0", name="ck_gift_cards_amount_positive"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    code = Column(String(19), nullable=False, unique=True)
    amount = Column(Numeric(12, 2), nullable=False)
    balance = Column(Numeric(12, 2), nullable=False)
    # Purchaser until redeemed, then the redeemer.
    user_id = Column(String(64), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    recipient_email = Column(String(255), nullable=True)
    message = Column(Text, nullable=True)
    design = Column(String(64), nullable=True)


Index("ix_gift_cards_user_id", GiftCard.user_id)
