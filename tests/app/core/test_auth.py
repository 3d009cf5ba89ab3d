from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

from resume_builder.app.core.auth import get_current_user_from_cookie
from resume_builder.app.core.config import get_settings
from resume_builder.app.core.security import SESSION_COOKIE_NAME, create_access_token
from resume_builder.app.models.user import User


def _request(cookies: dict) -> MagicMock:
    request = MagicMock()
    request.cookies = cookies
    return request


def _token(sub: str | None = "user-1", **kwargs) -> str:
    data = {"sub": sub} if sub is not None else {"scope": "none"}
    return create_access_token(data=data, settings=get_settings(), **kwargs)


def test_get_current_user_from_cookie_success():
    mock_db = MagicMock(spec=Session)
    expected_user = User(email="test@example.com", id="user-1")
    mock_db.query.return_value.filter.return_value.first.return_value = expected_user

    user = get_current_user_from_cookie(
        request=_request({SESSION_COOKIE_NAME: _token()}), db=mock_db
    )

    assert user is expected_user
    mock_db.query.assert_called_once_with(User)


@pytest.mark.parametrize(
    "cookies",
    [
        {},
        {SESSION_COOKIE_NAME: "garbage"},
        {SESSION_COOKIE_NAME: _token(sub=None)},
        {SESSION_COOKIE_NAME: _token(expires_delta=timedelta(minutes=-5))},
    ],
    ids=["missing", "malformed", "no-subject", "expired"],
)
def test_get_current_user_from_cookie_rejects(cookies):
    mock_db = MagicMock(spec=Session)

    with pytest.raises(HTTPException) as exc_info:
        get_current_user_from_cookie(request=_request(cookies), db=mock_db)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Unauthorized"
    mock_db.query.assert_not_called()


def test_get_current_user_from_cookie_unknown_user():
    mock_db = MagicMock(spec=Session)
    mock_db.query.return_value.filter.return_value.first.return_value = None

    with pytest.raises(HTTPException) as exc_info:
        get_current_user_from_cookie(
            request=_request({SESSION_COOKIE_NAME: _token()}), db=mock_db
        )

    assert exc_info.value.status_code == 401
