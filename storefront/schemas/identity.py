from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Identity(BaseModel):
    """Authenticated caller, as asserted by the identity provider's access token."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="sub", min_length=1)
    email: Optional[str] = None
    role: str = "authenticated"
