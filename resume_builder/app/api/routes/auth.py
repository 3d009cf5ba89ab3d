import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from resume_builder.app.core.auth import get_current_user_from_cookie
from resume_builder.app.core.config import Settings, get_settings
from resume_builder.app.core.security import (
    SESSION_COOKIE_NAME,
    authenticate_user,
    create_access_token,
)
from resume_builder.app.database.database import get_db
from resume_builder.app.middleware import set_session_cookie
from resume_builder.app.models.user import User
from resume_builder.app.schemas.user import UserResponse

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=UserResponse)
async def login(
    username: Annotated[str, Form()],
    password: Annotated[str, Form()],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    """Authenticate a local account and start a cookie session.

    Args:
        username (str): Login email from the form.
        password (str): Password from the form.
        db (Session): The database session.
        settings (Settings): The application settings.

    Returns:
        JSONResponse: The account, with the session cookie set.

    Raises:
        HTTPException: 401 if the credentials do not match an account.

    Notes:
        1. Authenticate the user with email and password.
        2. Issue a JWT whose `sub` claim is the account id.
        3. Set it in an HTTP-only cookie.

    """
    user = authenticate_user(db=db, email=username, password=password)
    if not user:
        _msg = f"Failed login attempt for {username}"
        log.warning(_msg)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    access_token = create_access_token(data={"sub": user.id}, settings=settings)
    response = JSONResponse(
        content=UserResponse.model_validate(user).model_dump(mode="json", by_alias=True),
    )
    set_session_cookie(response, access_token)

    _msg = f"User {user.id} logged in"
    log.info(_msg)
    return response


@router.get("/logout")
async def logout() -> JSONResponse:
    """End the cookie session.

    Returns:
        JSONResponse: A confirmation message with the session cookie cleared.

    """
    response = JSONResponse(content={"message": "Logged out"})
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return response


@router.get("/auth/user", response_model=UserResponse)
async def current_user(
    user: Annotated[User, Depends(get_current_user_from_cookie)],
):
    """Return the account behind the session cookie.

    Args:
        user (User): The authenticated account.

    Returns:
        UserResponse: The account profile.

    Raises:
        HTTPException: 401 when not authenticated.

    """
    return UserResponse.model_validate(user)
