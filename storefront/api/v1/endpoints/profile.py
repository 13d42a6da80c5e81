from fastapi import APIRouter, Depends

from storefront.core.record_store import RecordStore
from storefront.dependencies import get_current_identity, get_store
from storefront.schemas.identity import Identity
from storefront.schemas.profile import ProfileOut, UpdateProfileRequest
from storefront.services.profiles import get_profile, update_profile

router = APIRouter()


@router.get("/me", response_model=ProfileOut)
def me(identity: Identity = Depends(get_current_identity), store: RecordStore = Depends(get_store)):
    return get_profile(store, identity.user_id)


@router.patch("/me", response_model=ProfileOut)
def update_me(
    payload: UpdateProfileRequest,
    identity: Identity = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    return update_profile(store, identity.user_id, **payload.model_dump(exclude_unset=True))
