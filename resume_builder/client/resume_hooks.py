import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel

from resume_builder.app.schemas.resume import ResumeResponse
from resume_builder.client.decoding import decode_best_effort, decode_strict
from resume_builder.client.notifications import Notifier
from resume_builder.client.query_cache import QueryCache, QueryKey

log = logging.getLogger(__name__)

RESUMES_PATH = "/api/resumes"
RESUME_PATH = "/api/resumes/{id}"
RESUME_PRINT_PATH = "/api/resumes/{id}/print"
CURRENT_USER_PATH = "/api/auth/user"

NEW_RESUME_TITLE = "Untitled Resume"


class ResumeApiError(Exception):
    """Raised when a resume query gets an unexpected response.

    Attributes:
        status_code (int): HTTP status of the response.
        message (str): Server-provided message, or a generic description.

    """

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class ResumeMutationError(Exception):
    """Raised when a create, update or delete request fails.

    The user has already been notified by the time this is raised.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class _NoData(Exception):
    """A query resolved to "no data"; nothing is cached."""


def build_url(path: str, resume_id: int | None = None) -> str:
    """Fill the `{id}` placeholder of a route path."""
    if resume_id is None:
        return path
    return path.format(id=resume_id)


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Pull the `message` out of an error body, or return `fallback`."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    return fallback


def _payload(data: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
    """Turn a mutation argument into a JSON body with camelCase keys."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return dict(data)


def new_resume_payload(user: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Build the body the dashboard submits for a brand new resume.

    Args:
        user (Mapping[str, Any] | None): The signed-in account as returned by
            `/api/auth/user`, with camelCase keys.

    Returns:
        dict[str, Any]: A create payload prefilled from the account.

    """
    user = user or {}
    full_name = " ".join(
        part for part in (user.get("firstName"), user.get("lastName")) if part
    )
    return {
        "title": NEW_RESUME_TITLE,
        "personalInfo": {
            "fullName": full_name,
            "email": user.get("email") or "",
            "phone": "",
            "location": "",
            "summary": "",
        },
        "experience": [],
        "education": [],
        "skills": [],
        "isPublished": False,
    }


class ResumeHooks:
    """
    Cached queries and notifying mutations over the resume routes.

    Args:
        http (httpx.Client): Client bound to the API base URL, carrying the session cookie.
        cache (QueryCache): Query cache shared with the rest of the client.
        notifier (Notifier): Receives success and failure notifications.
        strict (bool): Raise `ResponseDecodeError` on drifted responses instead of
            logging and passing the raw data through.

    Notes:
        1. Query results are cached under `QueryKey(path, id)`.
        2. Mutations never write to the cache; they invalidate the affected
           entries so the next query reloads from the server.
        3. A failed mutation leaves every cache entry untouched.

    """

    def __init__(
        self,
        http: httpx.Client,
        cache: QueryCache,
        notifier: Notifier,
        strict: bool = False,
    ):
        self.http = http
        self.cache = cache
        self.notifier = notifier
        self.strict = strict

    def _decode(self, model: Any, data: Any) -> Any:
        if self.strict:
            return decode_strict(model, data)
        return decode_best_effort(model, data)

    def _query(self, key: QueryKey, model: Any, no_data_statuses: tuple[int, ...]):
        url = build_url(key.resource, key.resource_id)

        def loader():
            response = self.http.get(url)
            if response.status_code in no_data_statuses:
                _msg = f"GET {url} returned {response.status_code}, resolving to no data"
                log.debug(_msg)
                raise _NoData()
            if not response.is_success:
                raise ResumeApiError(
                    response.status_code,
                    _error_message(response, f"Request to {url} failed"),
                )
            return self._decode(model, response.json())

        try:
            return self.cache.fetch(key, loader)
        except _NoData:
            return None

    def list_resumes(self) -> list[ResumeResponse] | None:
        """
        Query the caller's resumes.

        Returns:
            list[ResumeResponse] | None: The resumes, or None when not signed in.

        Raises:
            ResumeApiError: For any other non-success response.

        """
        return self._query(
            QueryKey(RESUMES_PATH),
            list[ResumeResponse],
            no_data_statuses=(401,),
        )

    def get_resume(self, resume_id: int) -> ResumeResponse | None:
        """
        Query one resume.

        Args:
            resume_id (int): The resume id.

        Returns:
            ResumeResponse | None: The resume, or None when it is not found or
            the caller is not signed in.

        Raises:
            ResumeApiError: For any other non-success response.

        """
        return self._query(
            QueryKey(RESUME_PATH, resume_id),
            ResumeResponse,
            no_data_statuses=(401, 404),
        )

    def current_user(self) -> dict[str, Any] | None:
        """Return the signed-in account, or None when there is no session."""
        response = self.http.get(CURRENT_USER_PATH)
        if response.status_code == 401:
            return None
        if not response.is_success:
            raise ResumeApiError(
                response.status_code,
                _error_message(response, "Failed to load the current user"),
            )
        return response.json()

    def _mutate(
        self,
        method: str,
        url: str,
        fallback: str,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a mutation request; notify and raise on any failure."""
        try:
            response = self.http.request(method, url, json=body)
        except httpx.HTTPError as e:
            _msg = f"{method} {url} failed: {e}"
            log.warning(_msg)
            self.notifier.error(fallback)
            raise ResumeMutationError(fallback) from e

        if not response.is_success:
            message = _error_message(response, fallback)
            _msg = f"{method} {url} returned {response.status_code}: {message}"
            log.warning(_msg)
            self.notifier.error(message)
            raise ResumeMutationError(message, status_code=response.status_code)
        return response

    def create_resume(self, data: Mapping[str, Any] | BaseModel) -> ResumeResponse:
        """
        Create a resume.

        Args:
            data (Mapping[str, Any] | BaseModel): The full resume document.

        Returns:
            ResumeResponse: The created resume.

        Raises:
            ResumeMutationError: If the server rejects the request.

        Notes:
            1. On success the resume list is invalidated.

        """
        response = self._mutate(
            "POST", RESUMES_PATH, "Failed to create resume", body=_payload(data)
        )
        self.cache.invalidate(QueryKey(RESUMES_PATH))
        self.notifier.success("Resume created successfully")
        return self._decode(ResumeResponse, response.json())

    def update_resume(
        self, resume_id: int, data: Mapping[str, Any] | BaseModel
    ) -> ResumeResponse:
        """
        Apply a partial update to a resume.

        Args:
            resume_id (int): The resume id.
            data (Mapping[str, Any] | BaseModel): The fields to replace.

        Returns:
            ResumeResponse: The updated resume.

        Raises:
            ResumeMutationError: If the server rejects the request.

        Notes:
            1. On success the resume list and this resume's entry are invalidated.

        """
        response = self._mutate(
            "PATCH",
            build_url(RESUME_PATH, resume_id),
            "Failed to update resume",
            body=_payload(data),
        )
        self.cache.invalidate(QueryKey(RESUMES_PATH))
        self.cache.invalidate(QueryKey(RESUME_PATH, resume_id))
        self.notifier.success("Resume updated successfully")
        return self._decode(ResumeResponse, response.json())

    def delete_resume(self, resume_id: int) -> None:
        """Delete a resume and invalidate the resume list."""
        self._mutate(
            "DELETE", build_url(RESUME_PATH, resume_id), "Failed to delete resume"
        )
        self.cache.invalidate(QueryKey(RESUMES_PATH))
        self.notifier.success("Resume has been deleted")
