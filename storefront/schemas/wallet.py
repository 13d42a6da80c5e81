from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict


class WalletOut(BaseModel):
    balance: Decimal
    currency: str


class DepositRequest(BaseModel):
    amount: Decimal


class WalletTransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    amount: Decimal
    type: Literal["reload", "payment"]
    description: str
    created_at: datetime | None = None


class DepositOut(BaseModel):
    transaction: WalletTransactionOut
    balance: Decimal
