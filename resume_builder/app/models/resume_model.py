import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from resume_builder.app.models import Base

log = logging.getLogger(__name__)

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JsonDocument = JSONB().with_variant(JSON, "sqlite")
# 64-bit ids on PostgreSQL; SQLite only autoincrements a plain INTEGER primary key
ResumeId = BigInteger().with_variant(Integer, "sqlite")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ResumeData:
    """Dataclass to hold data for Resume initialization."""

    user_id: str
    title: str
    personal_info: dict[str, Any] = field(default_factory=dict)
    experience: list[dict[str, Any]] = field(default_factory=list)
    education: list[dict[str, Any]] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    is_published: bool = False


class Resume(Base):
    """Resume model storing one structured resume document.

    Attributes:
        id (int): Unique identifier for the resume.
        user_id (str): Foreign key to the owning User. Never changes after creation.
        title (str): User-assigned title, non-empty.
        personal_info (dict): fullName, email, phone, location and summary strings.
        experience (list[dict]): Ordered work history entries, each with a client-generated id.
        education (list[dict]): Ordered education entries, each with a client-generated id.
        skills (list[str]): Ordered skill labels; duplicates allowed.
        is_published (bool): Whether the resume is published.
        created_at (datetime): Timestamp when the resume was created.
        updated_at (datetime): Timestamp when the resume was last updated.

    """

    __tablename__ = "resumes"

    id = Column(ResumeId, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    personal_info = Column(JsonDocument, nullable=False)
    experience = Column(JsonDocument, nullable=False)
    education = Column(JsonDocument, nullable=False)
    skills = Column(JsonDocument, nullable=False)
    is_published = Column(
        Boolean,
        default=False,
        server_default=sa.false(),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    # Relationship to User
    user = relationship("User", back_populates="resumes")

    def __init__(self, data: ResumeData):
        """Initialize a Resume instance.

        Args:
            data (ResumeData): An object containing the data for the new resume.

        Returns:
            None

        Notes:
            1. Assigns attributes from the `data` object to the `Resume` instance.
            2. Does not validate; callers pass data that already went through the resume schemas.
            3. Timestamps are left to the caller or the column defaults.

        """
        _msg = f"Initializing Resume with title: {data.title}"
        log.debug(_msg)

        self.user_id = data.user_id
        self.title = data.title
        self.personal_info = data.personal_info
        self.experience = data.experience
        self.education = data.education
        self.skills = data.skills
        self.is_published = data.is_published
