"""Application error types raised below the HTTP layer.

The route layer and the exception handlers registered in `main.create_app`
translate these into `{"message": ..., "field": ...}` response bodies.
"""


class ResumeValidationError(Exception):
    """
    Raised when a resume payload fails validation.

    Attributes:
        message: Human-readable description of the first failing check.
        field: Dotted path of the offending field (e.g. "experience.0.id"), or None
            when the failure is not tied to a single field.
    """

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)

    def to_dict(self) -> dict[str, str]:
        """Return the error body sent to clients."""
        body = {"message": self.message}
        if self.field:
            body["field"] = self.field
        return body


class ResumeNotFoundOrUnauthorizedError(Exception):
    """
    Raised when an owner-scoped write matches no row.

    A missing resume and a resume owned by someone else produce the same error.
    """

    def __init__(self, resume_id: int):
        self.resume_id = resume_id
        super().__init__("Resume not found or unauthorized")
