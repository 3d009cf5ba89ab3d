import logging

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from resume_builder.app.api.routes.route_logic.resume_crud import get_resume
from resume_builder.app.core.auth import get_current_user_from_cookie
from resume_builder.app.database.database import get_db
from resume_builder.app.models.resume_model import Resume as DatabaseResume
from resume_builder.app.models.user import User

log = logging.getLogger(__name__)


async def get_resume_for_user(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_from_cookie),
) -> DatabaseResume:
    """
    Dependency to get a specific resume for the current user.

    Args:
        resume_id (int): The unique identifier of the resume to retrieve.
        db (Session): The database session dependency.
        current_user (User): The current authenticated user.

    Returns:
        DatabaseResume: The resume, if it exists and belongs to the user.

    Raises:
        HTTPException: 404 "Resume not found" if the resume is missing or owned by someone else.

    Notes:
        1. Fetch the resume by id without an owner filter.
        2. Compare its owner with the caller.
        3. A foreign resume is reported exactly like a missing one, so callers
           cannot probe for other users' ids.

    """
    resume = get_resume(db, resume_id)
    if resume is None or resume.user_id != current_user.id:
        if resume is not None:
            _msg = f"User {current_user.id} requested resume {resume_id} owned by another user"
            log.warning(_msg)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resume not found",
        )
    return resume
