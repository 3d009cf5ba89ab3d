import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from resume_builder.app.core.exceptions import ResumeValidationError

log = logging.getLogger(__name__)


class ResumeSchema(BaseModel):
    """Base for all resume payload models.

    Fields are snake_case in Python and camelCase on the wire. Either spelling
    is accepted on input; unknown fields are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def column_values(self, exclude_unset: bool = False) -> dict[str, Any]:
        """Map field names to JSON-ready values for the resume table.

        Top-level keys are column (snake_case) names; nested documents are
        dumped with their camelCase wire keys, which is how they are stored.

        Args:
            exclude_unset (bool): Only include fields present in the input payload.

        Returns:
            dict[str, Any]: Column name to value.

        """
        names = self.model_fields_set if exclude_unset else type(self).model_fields
        return {name: _document_value(getattr(self, name)) for name in names}


def _document_value(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, list):
        return [_document_value(item) for item in value]
    return value


class PersonalInfo(ResumeSchema):
    """Contact block shown at the top of a resume.

    Attributes:
        full_name (str): The person's full name.
        email (str): Contact email.
        phone (str): Contact phone number.
        location (str): City / region.
        summary (str): Professional summary paragraph.

    """

    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    summary: str = ""


class ExperienceEntry(ResumeSchema):
    """One position in the work history.

    Attributes:
        id (str): Client-generated identifier, unique within the experience list.
        company (str): Employer name.
        position (str): Job title.
        start_date (str): Start date as entered (typically YYYY-MM or YYYY-MM-DD).
        end_date (str): End date as entered; empty means current position.
        description (str): Free-text description of the role.

    """

    id: str
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Reject blank entry ids."""
        if not v.strip():
            raise ValueError("id must not be empty")
        return v


class EducationEntry(ResumeSchema):
    """One degree or course of study.

    Attributes:
        id (str): Client-generated identifier, unique within the education list.
        institution (str): School or university name.
        degree (str): Degree or certificate earned.
        start_date (str): Start date as entered.
        end_date (str): End date as entered; empty means ongoing.
        description (str): Honors, coursework or other notes.

    """

    id: str
    institution: str = ""
    degree: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Reject blank entry ids."""
        if not v.strip():
            raise ValueError("id must not be empty")
        return v


def _check_unique_ids(entries: list[ExperienceEntry] | list[EducationEntry] | None):
    if entries is None:
        return entries
    seen: set[str] = set()
    for entry in entries:
        if entry.id in seen:
            raise ValueError(f"duplicate entry id: {entry.id}")
        seen.add(entry.id)
    return entries


class ResumeCreate(ResumeSchema):
    """Full resume document accepted on create.

    Attributes:
        title (str): Resume title, must be non-empty.
        personal_info (PersonalInfo): Contact block.
        experience (list[ExperienceEntry]): Work history in display order.
        education (list[EducationEntry]): Education in display order.
        skills (list[str]): Skills in display order.
        is_published (bool): Publication flag, false by default.

    """

    title: str
    personal_info: PersonalInfo
    experience: list[ExperienceEntry]
    education: list[EducationEntry]
    skills: list[str]
    is_published: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate the title field.

        Args:
            v (str): The title value to validate.

        Returns:
            str: The title stripped of leading/trailing whitespace.

        Raises:
            ValueError: If the title is empty after stripping whitespace.

        """
        if not v.strip():
            raise ValueError("title must not be empty")
        return v.strip()

    @field_validator("experience", "education")
    @classmethod
    def validate_unique_ids(cls, v):
        """Entry ids must be unique within their own list."""
        return _check_unique_ids(v)


class ResumeUpdate(ResumeSchema):
    """Partial resume document accepted on update.

    Every field is optional. A field that is absent keeps its stored value; a
    field that is present replaces the stored value entirely. Explicit nulls
    are rejected.

    """

    title: str | None = None
    personal_info: PersonalInfo | None = None
    experience: list[ExperienceEntry] | None = None
    education: list[EducationEntry] | None = None
    skills: list[str] | None = None
    is_published: bool | None = None

    @field_validator(
        "title",
        "personal_info",
        "experience",
        "education",
        "skills",
        "is_published",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v):
        """Only runs for fields present in the payload; None there is an error."""
        if v is None:
            raise ValueError("field may be omitted but must not be null")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Apply the same non-empty rule as on create."""
        if v is None:
            return v
        if not v.strip():
            raise ValueError("title must not be empty")
        return v.strip()

    @field_validator("experience", "education")
    @classmethod
    def validate_unique_ids(cls, v):
        """Entry ids must be unique within their own list."""
        return _check_unique_ids(v)


class ResumeResponse(ResumeSchema):
    """A persisted resume as returned by the API.

    Attributes:
        id (int): Resume identifier.
        user_id (str): Owning account id.
        title (str): Resume title.
        personal_info (PersonalInfo): Contact block.
        experience (list[ExperienceEntry]): Work history.
        education (list[EducationEntry]): Education.
        skills (list[str]): Skills.
        is_published (bool): Publication flag.
        created_at (datetime): Creation timestamp.
        updated_at (datetime): Last update timestamp.

    Notes:
        1. Uses from_attributes so it can be built directly from the ORM model.
        2. Timestamps are always serialized with a UTC offset.

    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        from_attributes=True,
    )

    id: int
    user_id: str
    title: str
    personal_info: PersonalInfo
    experience: list[ExperienceEntry]
    education: list[EducationEntry]
    skills: list[str]
    is_published: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Stored timestamps are UTC; backends without time zone support return them naive."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


def _first_error(exc: ValidationError) -> ResumeValidationError:
    """Convert the first pydantic error into a ResumeValidationError."""
    error = exc.errors()[0]
    message = error.get("msg", "Invalid input")
    if message.startswith("Value error, "):
        message = message[len("Value error, ") :]
    field = ".".join(str(part) for part in error.get("loc", ())) or None
    return ResumeValidationError(message=message, field=field)


def validate_resume_create(payload: Any) -> ResumeCreate:
    """Validate a full resume document.

    Args:
        payload (Any): Decoded JSON body of a create request.

    Returns:
        ResumeCreate: The validated document.

    Raises:
        ResumeValidationError: With the path and message of the first failing field.

    """
    try:
        return ResumeCreate.model_validate(payload)
    except ValidationError as e:
        error = _first_error(e)
        _msg = f"Resume create payload rejected: {error}"
        log.debug(_msg)
        raise error from e


def validate_resume_update(payload: Any) -> ResumeUpdate:
    """Validate a partial resume document.

    Args:
        payload (Any): Decoded JSON body of an update request.

    Returns:
        ResumeUpdate: The validated partial document.

    Raises:
        ResumeValidationError: With the path and message of the first failing field.

    """
    try:
        return ResumeUpdate.model_validate(payload)
    except ValidationError as e:
        error = _first_error(e)
        _msg = f"Resume update payload rejected: {error}"
        log.debug(_msg)
        raise error from e
