import logging

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from resume_builder.app.core.config import get_settings
from resume_builder.app.core.security import SESSION_COOKIE_NAME
from resume_builder.app.database.database import get_db
from resume_builder.app.models.user import User

log = logging.getLogger(__name__)


def get_current_user_from_cookie(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """Retrieve the authenticated user from the session cookie.

    Args:
        request: The request object, used to read the session cookie.
        db: Database session dependency.

    Returns:
        User: The authenticated account.

    Raises:
        HTTPException: 401 "Unauthorized" when the cookie is missing, the JWT is
            invalid or expired, the `sub` claim is missing, or no account has that id.

    Notes:
        1. Read the `access_token` cookie.
        2. Decode the JWT with the configured secret and algorithm.
        3. Load the account named by the `sub` claim.
        4. Any failure raises the same 401 so callers learn nothing about the cause.

    Database Access:
        - Queries the User table by id.

    """
    settings = get_settings()
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
    )

    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise credentials_exception

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except JWTError:
        _msg = "Rejected session cookie: invalid token"
        log.debug(_msg)
        raise credentials_exception

    user_id: str | None = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        _msg = f"Rejected session cookie: unknown user {user_id}"
        log.warning(_msg)
        raise credentials_exception

    return user
