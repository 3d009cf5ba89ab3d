import httpx
import pytest

from resume_builder.app.schemas.resume import ResumeResponse
from resume_builder.client.decoding import ResponseDecodeError
from resume_builder.client.notifications import Notifier
from resume_builder.client.query_cache import QueryCache, QueryKey
from resume_builder.client.resume_hooks import (
    RESUME_PATH,
    RESUMES_PATH,
    ResumeApiError,
    ResumeHooks,
    ResumeMutationError,
    build_url,
    new_resume_payload,
)

LIST_KEY = QueryKey(RESUMES_PATH)


def _mock_hooks(handler, strict=False) -> ResumeHooks:
    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://testserver")
    return ResumeHooks(http, QueryCache(), Notifier(), strict=strict)


def test_build_url():
    assert build_url(RESUMES_PATH) == "/api/resumes"
    assert build_url(RESUME_PATH, 7) == "/api/resumes/7"


def test_list_resumes_unauthenticated_is_no_data(anonymous_hooks, cache, notifier):
    assert anonymous_hooks.list_resumes() is None
    assert cache.get_data(LIST_KEY) is None
    assert notifier.notifications == []


def test_current_user(hooks, anonymous_hooks, test_user):
    assert hooks.current_user()["id"] == test_user.id
    assert anonymous_hooks.current_user() is None


def test_create_invalidates_list(hooks, cache, notifier, sample_payload):
    assert hooks.list_resumes() == []
    assert not cache.is_stale(LIST_KEY)

    created = hooks.create_resume(sample_payload)

    assert isinstance(created, ResumeResponse)
    assert created.title == "Software Engineer"
    assert cache.is_stale(LIST_KEY)
    assert notifier.last.title == "Success"
    assert notifier.last.description == "Resume created successfully"
    assert [r.id for r in hooks.list_resumes()] == [created.id]


def test_get_resume_is_cached(hooks, cache, sample_payload):
    created = hooks.create_resume(sample_payload)

    first = hooks.get_resume(created.id)
    assert first.id == created.id
    assert cache.get_data(QueryKey(RESUME_PATH, created.id)) is first
    assert hooks.get_resume(created.id) is first


def test_get_resume_missing_or_foreign_is_no_data(
    hooks, auth_client, other_user, sign_in, sample_payload
):
    created = hooks.create_resume(sample_payload)
    assert hooks.get_resume(9999) is None

    sign_in(auth_client, other_user)
    assert hooks.get_resume(created.id) is None


def test_update_invalidates_list_and_item(hooks, cache, notifier, sample_payload):
    created = hooks.create_resume(sample_payload)
    hooks.list_resumes()
    hooks.get_resume(created.id)

    updated = hooks.update_resume(created.id, {"title": "Renamed"})

    assert updated.title == "Renamed"
    assert cache.is_stale(LIST_KEY)
    assert cache.is_stale(QueryKey(RESUME_PATH, created.id))
    assert notifier.last.description == "Resume updated successfully"
    assert hooks.get_resume(created.id).title == "Renamed"


def test_update_failure_notifies_and_keeps_cache(hooks, cache, notifier, sample_payload):
    created = hooks.create_resume(sample_payload)
    listed = hooks.list_resumes()
    item = hooks.get_resume(created.id)

    with pytest.raises(ResumeMutationError) as exc_info:
        hooks.update_resume(created.id, {"title": ""})

    assert exc_info.value.status_code == 400
    assert notifier.last.variant == "destructive"
    assert notifier.last.description == "title must not be empty"
    assert not cache.is_stale(LIST_KEY)
    assert cache.get_data(LIST_KEY) is listed
    assert cache.get_data(QueryKey(RESUME_PATH, created.id)) is item


def test_update_foreign_resume_uses_server_message(
    hooks, auth_client, other_user, sign_in, notifier, sample_payload
):
    created = hooks.create_resume(sample_payload)
    sign_in(auth_client, other_user)

    with pytest.raises(ResumeMutationError) as exc_info:
        hooks.update_resume(created.id, {"title": "Mine now"})

    assert exc_info.value.status_code == 404
    assert notifier.last.description == "Resume not found or unauthorized"


def test_delete_invalidates_list(hooks, cache, notifier, sample_payload):
    created = hooks.create_resume(sample_payload)
    hooks.list_resumes()

    hooks.delete_resume(created.id)

    assert cache.is_stale(LIST_KEY)
    assert notifier.last.description == "Resume has been deleted"
    assert hooks.list_resumes() == []


def test_create_failure_keeps_cache(hooks, cache, notifier, sample_payload):
    hooks.list_resumes()
    sample_payload["title"] = " "

    with pytest.raises(ResumeMutationError):
        hooks.create_resume(sample_payload)

    assert not cache.is_stale(LIST_KEY)
    assert notifier.last.variant == "destructive"


@pytest.mark.parametrize(
    "call, fallback",
    [
        (lambda hooks: hooks.create_resume({}), "Failed to create resume"),
        (lambda hooks: hooks.update_resume(1, {}), "Failed to update resume"),
        (lambda hooks: hooks.delete_resume(1), "Failed to delete resume"),
    ],
)
def test_mutation_fallback_message(call, fallback):
    hooks = _mock_hooks(lambda request: httpx.Response(502, text="Bad Gateway"))

    with pytest.raises(ResumeMutationError) as exc_info:
        call(hooks)

    assert exc_info.value.message == fallback
    assert hooks.notifier.last.description == fallback
    assert hooks.notifier.last.variant == "destructive"


def test_mutation_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    hooks = _mock_hooks(handler)

    with pytest.raises(ResumeMutationError) as exc_info:
        hooks.delete_resume(1)

    assert exc_info.value.status_code is None
    assert hooks.notifier.last.description == "Failed to delete resume"


def test_query_server_error_raises():
    hooks = _mock_hooks(
        lambda request: httpx.Response(500, json={"message": "Internal Server Error"})
    )

    with pytest.raises(ResumeApiError) as exc_info:
        hooks.list_resumes()

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Internal Server Error"
    assert hooks.cache.get_data(LIST_KEY) is None


@pytest.mark.parametrize("strict", [False, True])
def test_drifted_list_response(strict):
    drifted = [{"id": 1, "title": "Only a title"}]
    hooks = _mock_hooks(lambda request: httpx.Response(200, json=drifted), strict=strict)

    if strict:
        with pytest.raises(ResponseDecodeError):
            hooks.list_resumes()
        assert hooks.cache.get_data(LIST_KEY) is None
    else:
        assert hooks.list_resumes() == drifted
        assert hooks.cache.get_data(LIST_KEY) == drifted


def test_new_resume_payload():
    payload = new_resume_payload(
        {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"}
    )

    assert payload["title"] == "Untitled Resume"
    assert payload["personalInfo"]["fullName"] == "Ada Lovelace"
    assert payload["personalInfo"]["email"] == "ada@example.com"
    assert payload["experience"] == payload["education"] == payload["skills"] == []


def test_new_resume_payload_without_user(hooks):
    payload = new_resume_payload(None)
    assert payload["personalInfo"]["fullName"] == ""

    created = hooks.create_resume(payload)
    assert created.title == "Untitled Resume"
