import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship, validates

from resume_builder.app.models import Base

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    Account that owns resumes.

    The id is an opaque string. Accounts provisioned by an external identity
    provider carry the provider's subject id and no password hash; locally
    created accounts get a random UUID and a bcrypt hash.

    Attributes:
        id (str): Opaque unique identifier of the account.
        email (str | None): Unique email address, used as the login name.
        first_name (str | None): Given name.
        last_name (str | None): Family name.
        profile_image_url (str | None): Avatar URL.
        hashed_password (str | None): bcrypt hash, or None for externally managed accounts.
        created_at (datetime): Timestamp when the account was created.
        updated_at (datetime): Timestamp when the account was last updated.
        resumes (list[Resume]): Resumes owned by the account.

    """

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, index=True, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    hashed_password = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    resumes = relationship(
        "Resume",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __init__(
        self,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        profile_image_url: str | None = None,
        hashed_password: str | None = None,
        id: str | None = None,
    ):
        """
        Initialize a User instance.

        Args:
            email (str | None): Email address of the user.
            first_name (str | None): Given name.
            last_name (str | None): Family name.
            profile_image_url (str | None): Avatar URL.
            hashed_password (str | None): bcrypt hash of the password, if any.
            id (str | None): Identifier to use; a random UUID is generated when omitted.

        Notes:
            1. Generate an id when none is supplied.
            2. Assign the remaining values; field validators normalize email.

        """
        self.id = id or str(uuid.uuid4())
        _msg = f"Initializing User with id: {self.id}"
        log.debug(_msg)

        self.email = email
        self.first_name = first_name
        self.last_name = last_name
        self.profile_image_url = profile_image_url
        self.hashed_password = hashed_password

    @validates("email")
    def validate_email(self, key, email):
        """
        Validate the email field.

        Args:
            key (str): The field name being validated.
            email (str | None): The email value, or None.

        Returns:
            str | None: The email stripped of surrounding whitespace, or None.

        """
        if email is None:
            return None
        if not isinstance(email, str):
            raise ValueError("Email must be a string")
        if not email.strip():
            raise ValueError("Email cannot be empty")
        return email.strip()

    @property
    def display_name(self) -> str:
        """Full name built from first and last name, or an empty string."""
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts)
