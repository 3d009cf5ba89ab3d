import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from resume_builder.app.core.config import get_settings
from resume_builder.app.core.security import SESSION_COOKIE_NAME, create_access_token
from resume_builder.app.database.database import get_db
from resume_builder.app.main import create_app
from resume_builder.app.models import Base
from resume_builder.app.models.user import User


def _sample_resume_payload(title: str = "Software Engineer") -> dict:
    """A valid create payload with one entry in every list."""
    return {
        "title": title,
        "personalInfo": {
            "fullName": "Ada Lovelace",
            "email": "ada@example.com",
            "phone": "555-0100",
            "location": "London",
            "summary": "Analyst of engines.",
        },
        "experience": [
            {
                "id": "exp-1",
                "company": "Analytical Engines Ltd",
                "position": "Programmer",
                "startDate": "2020-01",
                "endDate": "",
                "description": "Wrote the first program.",
            }
        ],
        "education": [
            {
                "id": "edu-1",
                "institution": "University of London",
                "degree": "Mathematics",
                "startDate": "2015-09",
                "endDate": "2019-06",
                "description": "",
            }
        ],
        "skills": ["Python", "Mathematics"],
        "isPublished": False,
    }


@pytest.fixture
def sample_payload() -> dict:
    return _sample_resume_payload()


@pytest.fixture
def engine():
    """In-memory SQLite database shared by every connection of one test."""
    _engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=_engine)
    yield _engine
    Base.metadata.drop_all(bind=_engine)
    _engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """A session for arranging and inspecting data directly."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(session_factory) -> FastAPI:
    """Fixture to create a new app for each test, backed by the SQLite database."""
    get_settings.cache_clear()
    _app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    _app.dependency_overrides[get_db] = override_get_db
    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Fixture to create an anonymous test client."""
    with TestClient(app) as c:
        yield c


def _make_user(db, email: str, first_name: str = "Test", last_name: str = "User") -> User:
    user = User(email=email, first_name=first_name, last_name=last_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(db_session) -> User:
    return _make_user(db_session, "owner@example.com", "Ada", "Lovelace")


@pytest.fixture
def other_user(db_session) -> User:
    return _make_user(db_session, "other@example.com", "Charles", "Babbage")


def _sign_in(client: TestClient, user: User) -> TestClient:
    """Put a session cookie for `user` on `client`, replacing any previous one."""
    token = create_access_token(data={"sub": user.id}, settings=get_settings())
    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE_NAME, token)
    return client


@pytest.fixture
def auth_client(app: FastAPI, test_user: User) -> TestClient:
    """A client signed in as `test_user`."""
    with TestClient(app) as c:
        yield _sign_in(c, test_user)


@pytest.fixture
def other_client(app: FastAPI, other_user: User) -> TestClient:
    """A second client signed in as `other_user`."""
    with TestClient(app) as c:
        yield _sign_in(c, other_user)


@pytest.fixture
def user_factory(db_session):
    """Create extra accounts: `user_factory(email, first_name, last_name)`."""

    def factory(email: str, first_name: str = "Test", last_name: str = "User") -> User:
        return _make_user(db_session, email, first_name, last_name)

    return factory


@pytest.fixture
def sign_in():
    """Switch a client's session to another account: `sign_in(client, user)`."""
    return _sign_in
