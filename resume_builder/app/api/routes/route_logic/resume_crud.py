import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from resume_builder.app.core.exceptions import ResumeNotFoundOrUnauthorizedError
from resume_builder.app.models.resume_model import Resume as DatabaseResume
from resume_builder.app.models.resume_model import ResumeData
from resume_builder.app.schemas.resume import ResumeCreate, ResumeUpdate

log = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("title", "created_at", "updated_at")

# Range of the 64-bit integer primary key column
MIN_RESUME_ID = -(2**63)
MAX_RESUME_ID = 2**63 - 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _storable_id(resume_id: int) -> bool:
    """True if `resume_id` fits the id column; anything else cannot match a row."""
    return MIN_RESUME_ID <= resume_id <= MAX_RESUME_ID


def get_user_resumes(
    db: Session,
    user_id: str,
    sort_by: str | None = None,
) -> list[DatabaseResume]:
    """Retrieve all resumes owned by a user.

    Args:
        db (Session): The SQLAlchemy database session.
        user_id (str): The owning account id.
        sort_by (str | None): Optional `<column>_asc` / `<column>_desc` key. Columns are
            title, created_at and updated_at.

    Returns:
        list[DatabaseResume]: The user's resumes.

    Raises:
        ValueError: If `sort_by` names an unknown column or direction.

    Notes:
        1. Filter the resumes table by user_id.
        2. Without `sort_by`, order by primary key so the store default is stable.
        3. With `sort_by`, order by the requested column and direction.
        4. This function performs a single database query.

    """
    query = db.query(DatabaseResume).filter(DatabaseResume.user_id == user_id)

    if sort_by is None:
        return query.order_by(DatabaseResume.id.asc()).all()

    if sort_by.endswith("_asc"):
        sort_key, descending = sort_by[:-4], False
    elif sort_by.endswith("_desc"):
        sort_key, descending = sort_by[:-5], True
    else:
        raise ValueError(f"Unknown sort order: {sort_by}")

    if sort_key not in SORTABLE_COLUMNS:
        raise ValueError(f"Unknown sort order: {sort_by}")

    column = getattr(DatabaseResume, sort_key)
    order_func = column.desc() if descending else column.asc()
    return query.order_by(order_func).all()


def get_resume(db: Session, resume_id: int) -> DatabaseResume | None:
    """Retrieve a resume by id, whoever owns it.

    Args:
        db (Session): The SQLAlchemy database session.
        resume_id (int): The resume id.

    Returns:
        DatabaseResume | None: The resume, or None if no row has that id.

    Notes:
        1. Ownership is not checked here; callers compare `user_id` themselves.
        2. An id outside the column range is a miss, not a database error.

    """
    if not _storable_id(resume_id):
        return None
    return db.query(DatabaseResume).filter(DatabaseResume.id == resume_id).first()


def create_resume(
    db: Session,
    user_id: str,
    data: ResumeCreate,
) -> DatabaseResume:
    """Create and save a new resume.

    Args:
        db (Session): The database session.
        user_id (str): The owning account id, taken from the caller's identity.
        data (ResumeCreate): The validated resume document.

    Returns:
        DatabaseResume: The persisted resume with its generated id.

    Notes:
        1. Build a DatabaseResume from the validated document.
        2. Stamp created_at and updated_at with the same instant.
        3. Add, commit and refresh to pick up the generated id.
        4. This function performs a database write operation.

    """
    values = data.column_values()
    resume = DatabaseResume(data=ResumeData(user_id=user_id, **values))
    now = _utcnow()
    resume.created_at = now
    resume.updated_at = now
    db.add(resume)
    db.commit()
    db.refresh(resume)

    _msg = f"Created resume {resume.id} for user {user_id}"
    log.info(_msg)
    return resume


def update_resume(
    db: Session,
    resume_id: int,
    user_id: str,
    data: ResumeUpdate,
) -> DatabaseResume:
    """Apply a partial update to a resume owned by the given user.

    Args:
        db (Session): The database session.
        resume_id (int): The resume id.
        user_id (str): The caller's account id.
        data (ResumeUpdate): The validated partial document.

    Returns:
        DatabaseResume: The updated resume.

    Raises:
        ResumeNotFoundOrUnauthorizedError: If no resume matches both id and user_id.

    Notes:
        1. Look up the row by id AND user_id; a miss is reported the same way
           whether the id is unknown or owned by someone else.
           An id outside the column range is reported the same way.
        2. Replace each field present in `data`; absent fields are untouched.
        3. Refresh updated_at even when no field was supplied.
        4. Commit and refresh.

    """
    resume = None
    if _storable_id(resume_id):
        resume = (
            db.query(DatabaseResume)
            .filter(
                DatabaseResume.id == resume_id,
                DatabaseResume.user_id == user_id,
            )
            .first()
        )
    if resume is None:
        _msg = f"Update matched no resume (id={resume_id}, user={user_id})"
        log.warning(_msg)
        raise ResumeNotFoundOrUnauthorizedError(resume_id)

    for name, value in data.column_values(exclude_unset=True).items():
        setattr(resume, name, value)
    resume.updated_at = _utcnow()

    db.commit()
    db.refresh(resume)
    return resume


def delete_resume(db: Session, resume_id: int, user_id: str) -> None:
    """Delete a resume owned by the given user.

    Args:
        db (Session): The database session.
        resume_id (int): The resume id.
        user_id (str): The caller's account id.

    Returns:
        None

    Notes:
        1. Delete rows matching both id and user_id.
        2. Deleting an unknown or foreign id is a silent no-op.

    """
    if not _storable_id(resume_id):
        _msg = f"Delete skipped, id {resume_id} is outside the id range"
        log.debug(_msg)
        return

    deleted = (
        db.query(DatabaseResume)
        .filter(
            DatabaseResume.id == resume_id,
            DatabaseResume.user_id == user_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()

    _msg = f"Deleted {deleted} resume(s) for id={resume_id}, user={user_id}"
    log.debug(_msg)
