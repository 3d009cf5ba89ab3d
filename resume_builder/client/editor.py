import copy
import logging
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel

from resume_builder.app.api.routes.html_fragments import _generate_resume_preview_html
from resume_builder.client.resume_hooks import (
    NEW_RESUME_TITLE,
    RESUME_PRINT_PATH,
    ResumeHooks,
    ResumeMutationError,
    build_url,
)

log = logging.getLogger(__name__)

FORM_FIELDS = ("title", "personalInfo", "experience", "education", "skills", "isPublished")

Subscriber = Callable[[dict[str, Any]], None]


def default_document() -> dict[str, Any]:
    """Return the values an empty editor form starts with."""
    return {
        "title": NEW_RESUME_TITLE,
        "personalInfo": {
            "fullName": "",
            "email": "",
            "phone": "",
            "location": "",
            "summary": "",
        },
        "experience": [],
        "education": [],
        "skills": [],
        "isPublished": False,
    }


def blank_experience() -> dict[str, str]:
    return {
        "id": str(uuid.uuid4()),
        "company": "",
        "position": "",
        "startDate": "",
        "endDate": "",
        "description": "",
    }


def blank_education() -> dict[str, str]:
    return {
        "id": str(uuid.uuid4()),
        "institution": "",
        "degree": "",
        "startDate": "",
        "endDate": "",
        "description": "",
    }


class ResumeDraft:
    """
    The editor form state.

    The draft is a camelCase document with the same shape as a create payload.
    It is the only copy of unsaved edits; the preview is derived from it.

    Args:
        document (Mapping[str, Any] | None): Initial values; defaults to an empty form.

    Notes:
        1. Every change notifies subscribers with a copy of the new values.
        2. `values` returns a deep copy so callers cannot mutate the draft in place.

    """

    def __init__(self, document: Mapping[str, Any] | None = None):
        self._document = default_document()
        self._subscribers: list[Subscriber] = []
        if document is not None:
            self._load(document)

    @property
    def values(self) -> dict[str, Any]:
        return copy.deepcopy(self._document)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` for change events; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _changed(self) -> None:
        snapshot = self.values
        for callback in list(self._subscribers):
            callback(snapshot)

    def _load(self, resume: Mapping[str, Any] | BaseModel) -> None:
        if isinstance(resume, BaseModel):
            resume = resume.model_dump(mode="json", by_alias=True)
        document = default_document()
        for name in FORM_FIELDS:
            if name in resume and resume[name] is not None:
                document[name] = copy.deepcopy(resume[name])
        self._document = document

    def reset(self, resume: Mapping[str, Any] | BaseModel | None = None) -> None:
        """
        Replace the whole draft.

        Args:
            resume (Mapping[str, Any] | BaseModel | None): A server resume
                (model or camelCase dict). None restores the empty form.

        Notes:
            1. Server-only fields such as id, userId and timestamps are dropped.

        """
        if resume is None:
            self._document = default_document()
        else:
            self._load(resume)
        _msg = "Draft reset"
        log.debug(_msg)
        self._changed()

    def _walk(self, path: str) -> tuple[Any, str | int]:
        """Resolve `path` to its parent container and final key."""
        parts: list[str | int] = [
            int(part) if part.isdigit() else part for part in path.split(".")
        ]
        if not parts or parts[0] not in FORM_FIELDS:
            raise KeyError(path)
        container: Any = self._document
        try:
            for part in parts[:-1]:
                container = container[part]
            last = parts[-1]
            container[last]
        except (KeyError, IndexError, TypeError) as e:
            raise KeyError(path) from e
        return container, last

    def get_value(self, path: str) -> Any:
        """Read a value by dotted path, e.g. "experience.0.company"."""
        container, last = self._walk(path)
        return copy.deepcopy(container[last])

    def set_value(self, path: str, value: Any) -> None:
        """
        Write a value by dotted path.

        Args:
            path (str): Dotted path such as "personalInfo.fullName" or
                "experience.0.company". Numeric parts index lists.
            value (Any): The new value.

        Raises:
            KeyError: If the path does not name an existing field.

        """
        container, last = self._walk(path)
        container[last] = value
        self._changed()

    def append_experience(self) -> str:
        """Add a blank experience entry and return its id."""
        entry = blank_experience()
        self._document["experience"].append(entry)
        self._changed()
        return entry["id"]

    def remove_experience(self, index: int) -> None:
        del self._document["experience"][index]
        self._changed()

    def append_education(self) -> str:
        """Add a blank education entry and return its id."""
        entry = blank_education()
        self._document["education"].append(entry)
        self._changed()
        return entry["id"]

    def remove_education(self, index: int) -> None:
        del self._document["education"][index]
        self._changed()

    def add_skill(self, text: str) -> bool:
        """Append `text` as a skill after trimming; empty input is ignored."""
        skill = text.strip()
        if not skill:
            return False
        self._document["skills"].append(skill)
        self._changed()
        return True

    def handle_skill_key(self, key: str, text: str) -> bool:
        """
        Handle a key press in the skill input.

        Args:
            key (str): The key name, as reported by the input widget.
            text (str): The current input text.

        Returns:
            bool: True if a skill was committed; the caller then clears the input.

        """
        if key != "Enter":
            return False
        return self.add_skill(text)

    def remove_skill(self, index: int) -> None:
        del self._document["skills"][index]
        self._changed()


class EditorBinder:
    """
    Binds a draft to one stored resume.

    Args:
        draft (ResumeDraft): The form state.
        hooks (ResumeHooks): Data access used to load and save.
        resume_id (int): The resume being edited.

    Notes:
        1. Saving is explicit; edits are never written automatically.
        2. The preview holds no state of its own.

    """

    def __init__(self, draft: ResumeDraft, hooks: ResumeHooks, resume_id: int):
        self.draft = draft
        self.hooks = hooks
        self.resume_id = resume_id

    def load(self) -> bool:
        """Fill the draft from the server; False when the resume is unavailable."""
        resume = self.hooks.get_resume(self.resume_id)
        if resume is None:
            return False
        self.draft.reset(resume)
        return True

    @property
    def preview_html(self) -> str:
        return _generate_resume_preview_html(self.draft.values)

    @property
    def print_url(self) -> str:
        """Path of the print page used for PDF export."""
        return build_url(RESUME_PRINT_PATH, self.resume_id)

    def save(self) -> Any:
        """
        Submit the whole draft as an update.

        Returns:
            Any: The saved resume, or None if the update failed.

        Notes:
            1. A failed save has already raised a notification; it is not re-raised.
            2. The draft keeps its values either way.

        """
        try:
            return self.hooks.update_resume(self.resume_id, self.draft.values)
        except ResumeMutationError as e:
            _msg = f"Save of resume {self.resume_id} failed: {e}"
            log.info(_msg)
            return None
