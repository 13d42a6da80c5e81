from storefront.core.record_store import RecordStore
from storefront.core.security import require_identity
from storefront.models import Profile

PROFILE_FIELDS = ("first_name", "last_name", "phone_text")


def get_profile(store: RecordStore, identity: str) -> Profile:
    identity = require_identity(identity)
    profile = store.find_one(Profile, id=identity)
    if not profile:
        profile = store.insert(Profile(id=identity), commit=True)
    return profile


def update_profile(store: RecordStore, identity: str, **changes) -> Profile:
    profile = get_profile(store, identity)
    patch = {}
    for field in PROFILE_FIELDS:
        if field in changes and changes[field] is not None:
            value = str(changes[field]).strip()
            patch[field] = value or None
    if patch:
        store.update(profile, patch, commit=True)
    return profile
