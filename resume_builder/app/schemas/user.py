import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

log = logging.getLogger(__name__)


class UserResponse(BaseModel):
    """Schema for returning the authenticated account.

    The password hash is never included.

    Attributes:
        id (str): Opaque account identifier.
        email (str | None): Email address.
        first_name (str | None): Given name.
        last_name (str | None): Family name.
        profile_image_url (str | None): Avatar URL.
        created_at (datetime | None): Account creation time.

    Notes:
        1. The model uses ConfigDict(from_attributes=True) to support ORM attribute mapping.
        2. Field names are serialized in camelCase.

    """

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UserUpsert(BaseModel):
    """Identity claims used to create or refresh an account.

    Attributes:
        id (str): Subject id issued by the identity provider.
        email (str | None): Email claim.
        first_name (str | None): Given name claim.
        last_name (str | None): Family name claim.
        profile_image_url (str | None): Picture claim.

    """

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
