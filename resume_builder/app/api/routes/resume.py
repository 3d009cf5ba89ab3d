import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from resume_builder.app.api.dependencies import get_resume_for_user
from resume_builder.app.api.routes.html_fragments import _generate_resume_print_html
from resume_builder.app.api.routes.route_logic.resume_crud import (
    create_resume as create_resume_db,
)
from resume_builder.app.api.routes.route_logic.resume_crud import (
    delete_resume as delete_resume_db,
)
from resume_builder.app.api.routes.route_logic.resume_crud import (
    get_user_resumes,
)
from resume_builder.app.api.routes.route_logic.resume_crud import (
    update_resume as update_resume_db,
)
from resume_builder.app.core.auth import get_current_user_from_cookie
from resume_builder.app.core.exceptions import (
    ResumeNotFoundOrUnauthorizedError,
    ResumeValidationError,
)
from resume_builder.app.database.database import get_db
from resume_builder.app.models.resume_model import Resume as DatabaseResume
from resume_builder.app.models.user import User
from resume_builder.app.schemas.resume import (
    ResumeResponse,
    validate_resume_create,
    validate_resume_update,
)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resumes", tags=["resumes"])


async def _read_json_body(request: Request) -> Any:
    """Decode the request body as JSON.

    Handlers call this after their dependencies have resolved, so an
    unauthenticated request is rejected with 401 before its body is looked at.

    Raises:
        ResumeValidationError: If the body is not valid JSON.

    """
    try:
        return await request.json()
    except ValueError as e:
        _msg = f"Rejected request body on {request.method} {request.url.path}: {e}"
        log.debug(_msg)
        raise ResumeValidationError(message="Invalid JSON body") from e


@router.get("", response_model=list[ResumeResponse])
async def list_resumes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_from_cookie),
    sort_by: str | None = None,
):
    """
    List all resumes owned by the current user.

    Args:
        db (Session): The database session dependency.
        current_user (User): The current authenticated user.
        sort_by (str | None): Optional `<column>_asc|_desc` ordering.

    Returns:
        list[ResumeResponse]: The caller's resumes.

    Raises:
        HTTPException: 400 if `sort_by` is not a recognized ordering.

    """
    try:
        resumes = get_user_resumes(db, current_user.id, sort_by=sort_by)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [ResumeResponse.model_validate(resume) for resume in resumes]


@router.get("/{resume_id}", response_model=ResumeResponse)
async def get_resume(
    resume: DatabaseResume = Depends(get_resume_for_user),
):
    """
    Retrieve one resume owned by the current user.

    Args:
        resume (DatabaseResume): The resume, resolved and ownership-checked by the dependency.

    Returns:
        ResumeResponse: The full resume document.

    Raises:
        HTTPException: 404 if the resume does not exist or is not the caller's.

    """
    return ResumeResponse.model_validate(resume)


@router.post("", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def create_resume(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_from_cookie),
):
    """
    Create a resume owned by the current user.

    Args:
        request (Request): Carries the JSON body with every resume field except id,
            userId and timestamps.
        db (Session): The database session dependency.
        current_user (User): The current authenticated user.

    Returns:
        ResumeResponse: The persisted resume, with status 201.

    Raises:
        ResumeValidationError: If the body is not JSON or fails the full-document
            validator (400).

    Notes:
        1. Validate the whole body before anything is written.
        2. The owner is always the caller; a userId in the body is rejected as an unknown field.

    """
    data = validate_resume_create(await _read_json_body(request))
    resume = create_resume_db(db=db, user_id=current_user.id, data=data)
    return ResumeResponse.model_validate(resume)


@router.patch("/{resume_id}", response_model=ResumeResponse)
async def update_resume(
    resume_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_from_cookie),
):
    """
    Apply a partial update to a resume owned by the current user.

    Args:
        resume_id (int): The resume id.
        request (Request): Carries the JSON body with any subset of the resume fields.
        db (Session): The database session dependency.
        current_user (User): The current authenticated user.

    Returns:
        ResumeResponse: The updated resume.

    Raises:
        ResumeValidationError: If the body is not JSON or fails the partial validator (400).
        HTTPException: 404 if no resume with this id belongs to the caller.

    Notes:
        1. Ownership is part of the update query; a foreign id and an unknown id
           produce the same 404 body.

    """
    data = validate_resume_update(await _read_json_body(request))
    try:
        resume = update_resume_db(
            db=db,
            resume_id=resume_id,
            user_id=current_user.id,
            data=data,
        )
    except ResumeNotFoundOrUnauthorizedError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ResumeResponse.model_validate(resume)


@router.delete("/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_from_cookie),
) -> Response:
    """
    Delete a resume owned by the current user.

    Args:
        resume_id (int): The resume id.
        db (Session): The database session dependency.
        current_user (User): The current authenticated user.

    Returns:
        Response: Empty 204, whether or not anything was deleted.

    """
    delete_resume_db(db=db, resume_id=resume_id, user_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{resume_id}/print", response_class=HTMLResponse)
async def print_resume(
    resume: DatabaseResume = Depends(get_resume_for_user),
) -> HTMLResponse:
    """
    Serve a print-ready page of the resume for PDF export.

    Args:
        resume (DatabaseResume): The resume, resolved and ownership-checked by the dependency.

    Returns:
        HTMLResponse: A standalone A4 page that opens the browser print dialog.

    """
    document = ResumeResponse.model_validate(resume).model_dump(by_alias=True)
    return HTMLResponse(content=_generate_resume_print_html(document))
