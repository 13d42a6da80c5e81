from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class IssueGiftCardRequest(BaseModel):
    recipient_email: EmailStr
    amount: Decimal
    message: Optional[str] = Field(default=None, max_length=500)
    design: Optional[str] = Field(default=None, max_length=64)


class RedeemGiftCardRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)


class GiftCardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    amount: Decimal
    balance: Decimal
    expires_at: datetime
    created_at: Optional[datetime] = None
    recipient_email: Optional[str] = None
    message: Optional[str] = None
    design: Optional[str] = None


class RedemptionOut(BaseModel):
    gift_card: GiftCardOut
    credited: Decimal
    wallet_balance: Decimal
