from fastapi import APIRouter, Depends, Query, Request

from storefront.core.config import get_settings
from storefront.core.record_store import RecordStore
from storefront.dependencies import get_current_identity, get_store
from storefront.middlewares.rate_limit import limiter
from storefront.schemas.identity import Identity
from storefront.schemas.wallet import DepositOut, DepositRequest, WalletOut, WalletTransactionOut
from storefront.services.wallet import deposit, get_balance, list_transactions

settings = get_settings()
router = APIRouter()


@router.get("/me", response_model=WalletOut)
def get_wallet(identity: Identity = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    return WalletOut(balance=get_balance(store, identity.user_id), currency=settings.currency)


@router.get("/transactions", response_model=list[WalletTransactionOut])
def get_transactions(
    limit: int = Query(50, ge=1, le=500),
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    return list_transactions(store, identity.user_id, limit=limit)


@router.post("/deposit", response_model=DepositOut)
@limiter.limit(settings.wallet_deposit_rate_limit)
def deposit_funds(
    request: Request,
    payload: DepositRequest,
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    entry = deposit(store, identity.user_id, payload.amount)
    return DepositOut(
        transaction=WalletTransactionOut.model_validate(entry),
        balance=get_balance(store, identity.user_id),
    )
