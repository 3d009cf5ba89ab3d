import logging

from sqlalchemy.orm import Session

from resume_builder.app.core.security import get_password_hash
from resume_builder.app.models.user import User
from resume_builder.app.schemas.user import UserUpsert

log = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> User | None:
    """Retrieve a user by id.

    Args:
        db (Session): The database session.
        user_id (str): The opaque account id.

    Returns:
        User | None: The user, or None if no account has that id.

    """
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Retrieve a user by email address.

    Args:
        db (Session): The database session.
        email (str): The email address to look up.

    Returns:
        User | None: The user, or None if no account has that email.

    Notes:
        1. Query the User table filtered by email and return the first match.
        2. Database access: Performs a read operation on the User table.

    """
    _msg = f"Querying database for email: {email}"
    log.debug(_msg)
    return db.query(User).filter(User.email == email).first()


def upsert_user(db: Session, claims: UserUpsert) -> User:
    """Create an account from identity claims, or refresh an existing one.

    Args:
        db (Session): The database session.
        claims (UserUpsert): Claims issued by the identity provider.

    Returns:
        User: The created or updated account.

    Notes:
        1. Look up the account by the claim's subject id.
        2. If it exists, overwrite its profile fields with the claims.
        3. Otherwise create it with the subject id as primary key.
        4. Commit and refresh.

    """
    user = get_user(db, claims.id)
    if user is None:
        _msg = f"Creating user from identity claims: {claims.id}"
        log.info(_msg)
        user = User(
            id=claims.id,
            email=claims.email,
            first_name=claims.first_name,
            last_name=claims.last_name,
            profile_image_url=claims.profile_image_url,
        )
        db.add(user)
    else:
        _msg = f"Refreshing user from identity claims: {claims.id}"
        log.debug(_msg)
        user.email = claims.email
        user.first_name = claims.first_name
        user.last_name = claims.last_name
        user.profile_image_url = claims.profile_image_url

    db.commit()
    db.refresh(user)
    return user


def create_user(
    db: Session,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    """Create a local account with a password.

    Args:
        db (Session): The database session.
        email (str): Login email; must not already be registered.
        password (str): Plain text password, hashed before storage.
        first_name (str | None): Given name.
        last_name (str | None): Family name.

    Returns:
        User: The created account.

    Raises:
        ValueError: If the email is already registered.

    """
    if get_user_by_email(db, email) is not None:
        raise ValueError(f"A user with email {email} already exists")

    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        hashed_password=get_password_hash(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    _msg = f"Created user {user.id} ({email})"
    log.info(_msg)
    return user
