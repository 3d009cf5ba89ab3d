from datetime import datetime, timezone

import jwt
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient
from starlette.middleware.base import BaseHTTPMiddleware

from resume_builder.app.core.config import get_settings
from resume_builder.app.core.security import create_access_token
from resume_builder.app.middleware import refresh_session_middleware, set_session_cookie


def create_test_app() -> FastAPI:
    """Create a test FastAPI app with the middleware."""
    app = FastAPI()
    app.add_middleware(BaseHTTPMiddleware, dispatch=refresh_session_middleware)

    @app.get("/")
    async def read_root(request: Request):
        return Response("Hello World")

    @app.get("/sets-cookie")
    async def sets_cookie(request: Request):
        response = Response("Logged in")
        set_session_cookie(response, "downstream-token")
        return response

    return app


def test_refresh_on_valid_token():
    """A valid token is re-issued with the same subject and a new expiry."""
    client = TestClient(create_test_app())
    settings = get_settings()
    token = create_access_token(data={"sub": "user-1"}, settings=settings)

    client.cookies.set("access_token", token)
    response = client.get("/")

    assert response.status_code == 200
    assert "access_token" in response.cookies
    payload = jwt.decode(
        response.cookies["access_token"],
        settings.secret_key,
        algorithms=[settings.algorithm],
    )
    assert payload["sub"] == "user-1"
    assert payload["exp"] > datetime.now(timezone.utc).timestamp()


def test_no_refresh_on_missing_token():
    client = TestClient(create_test_app())

    response = client.get("/")

    assert response.status_code == 200
    assert "access_token" not in response.cookies


def test_no_refresh_on_invalid_token():
    client = TestClient(create_test_app())

    client.cookies.set("access_token", "invalidtoken")
    response = client.get("/")

    assert response.status_code == 200
    assert "set-cookie" not in response.headers


def test_downstream_cookie_wins():
    """A handler that sets the session cookie itself is not overridden."""
    client = TestClient(create_test_app())
    token = create_access_token(data={"sub": "user-1"}, settings=get_settings())

    client.cookies.set("access_token", token)
    response = client.get("/sets-cookie")

    cookies = response.headers.get_list("set-cookie")
    assert len(cookies) == 1
    assert cookies[0].startswith("access_token=downstream-token")
