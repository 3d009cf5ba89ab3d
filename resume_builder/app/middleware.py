import logging
from collections.abc import Awaitable, Callable

import jwt
from fastapi import Request
from fastapi.responses import Response

from resume_builder.app.core.config import Settings, get_settings
from resume_builder.app.core.security import SESSION_COOKIE_NAME, create_access_token

log = logging.getLogger(__name__)


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token to a response.

    Login and the refresh middleware both go through here so the cookie
    attributes stay identical.
    """
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        path="/",
        secure=False,  # Should be True in production & depend on settings
    )


async def refresh_session_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Refreshes the session token on each request.

    If a valid, unexpired access token is found in the cookies, a new token
    with a renewed expiration time is set on the response, giving active
    users a sliding session.

    Args:
        request (Request): The incoming request object.
        call_next: The next middleware or route handler.

    Returns:
        Response: The downstream response, possibly carrying a new session cookie.

    Notes:
        1. Read the `access_token` cookie; pass through if absent.
        2. Decode it; on failure pass through and let the auth dependency reject the request.
        3. Issue a new token carrying the same `sub` claim.
        4. Leave the cookie alone if the handler already set or cleared it (login, logout).

    """
    new_token: str | None = None
    access_token: str | None = request.cookies.get(SESSION_COOKIE_NAME)

    if not access_token:
        return await call_next(request)

    settings: Settings = get_settings()

    try:
        payload = jwt.decode(
            access_token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        subject = payload.get("sub")
        if subject:
            new_token = create_access_token(data={"sub": subject}, settings=settings)
            _msg = "Token refreshed."
            log.debug(_msg)
    except jwt.PyJWTError as e:
        _msg = f"Token decoding failed: {e}. Letting auth dependency handle it."
        log.debug(_msg)

    response = await call_next(request)

    cookie_set_downstream = any(
        header.startswith(f"{SESSION_COOKIE_NAME}=")
        for header in response.headers.getlist("set-cookie")
    )
    if new_token and not cookie_set_downstream:
        set_session_cookie(response, new_token)
        _msg = "New session token set in response cookie."
        log.debug(_msg)

    return response
