import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Optional

import bcrypt
from jose import jwt
from sqlalchemy.orm import Session

from resume_builder.app.core.config import Settings

if TYPE_CHECKING:
    from resume_builder.app.models.user import User

log = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "access_token"


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Args:
        data (dict): The claims to encode; `sub` carries the account id.
        settings (Settings): The application settings object.
        expires_delta (timedelta | None): Custom lifetime. Defaults to the configured lifetime.

    Returns:
        str: The encoded JWT.

    Notes:
        1. Copy the data to avoid modifying the original.
        2. Set the expiration from expires_delta or the configured default.
        3. Encode with the secret key and algorithm.

    """
    _msg = "Creating access token"
    log.debug(_msg)
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes,
        )
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.algorithm,
    )


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a bcrypt hash.

    Args:
        plain_password (str): The plain text password to verify.
        hashed_password (str): The stored hash.

    Returns:
        bool: True if the password matches.

    """
    _msg = "Verifying password"
    log.debug(_msg)
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def get_password_hash(password: str) -> str:
    """Hash a plain password with bcrypt.

    Args:
        password (str): The plain text password to hash.

    Returns:
        str: The hashed password.

    """
    _msg = "Hashing password"
    log.debug(_msg)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def authenticate_user(db: Session, email: str, password: str) -> Optional["User"]:
    """Authenticate a local account by email and password.

    Args:
        db (Session): Database session used to query for user records.
        email (str): Login email.
        password (str): Password to verify.

    Returns:
        Optional[User]: The authenticated user if successful, None otherwise.

    Notes:
        1. Query the database for a user with the given email.
        2. Accounts without a password hash (externally managed) cannot log in here.
        3. Return the user only when the password verifies.

    """
    _msg = f"Authenticating user: {email}"
    log.debug(_msg)

    from resume_builder.app.models.user import User

    user = db.query(User).filter(User.email == email).first()
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
