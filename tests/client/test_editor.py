from unittest.mock import Mock

import pytest
from bs4 import BeautifulSoup

from resume_builder.client.editor import EditorBinder, ResumeDraft, default_document


def test_draft_defaults():
    draft = ResumeDraft()
    assert draft.values == default_document()
    assert draft.values["title"] == "Untitled Resume"
    assert draft.values["isPublished"] is False


def test_values_is_a_copy():
    draft = ResumeDraft()
    draft.values["skills"].append("Sneaky")
    assert draft.values["skills"] == []


def test_set_value_by_path_notifies_subscribers():
    draft = ResumeDraft()
    seen = []
    unsubscribe = draft.subscribe(seen.append)

    draft.set_value("personalInfo.fullName", "Ada Lovelace")
    draft.append_experience()
    draft.set_value("experience.0.company", "Engines Ltd")

    assert draft.get_value("personalInfo.fullName") == "Ada Lovelace"
    assert draft.get_value("experience.0.company") == "Engines Ltd"
    assert len(seen) == 3
    assert seen[-1]["experience"][0]["company"] == "Engines Ltd"

    unsubscribe()
    draft.set_value("title", "Quiet")
    assert len(seen) == 3


@pytest.mark.parametrize(
    "path", ["nope", "personalInfo.website", "experience.3.company", "title.length"]
)
def test_set_value_rejects_unknown_path(path):
    with pytest.raises(KeyError):
        ResumeDraft().set_value(path, "x")


def test_remove_entry_preserves_other_ids():
    draft = ResumeDraft()
    ids = [draft.append_experience() for _ in range(3)]
    edu_ids = [draft.append_education() for _ in range(2)]

    assert len(set(ids)) == 3
    draft.remove_experience(1)
    draft.remove_education(0)

    assert [e["id"] for e in draft.values["experience"]] == [ids[0], ids[2]]
    assert [e["id"] for e in draft.values["education"]] == [edu_ids[1]]


def test_handle_skill_key_commits_on_enter_only():
    draft = ResumeDraft()

    assert draft.handle_skill_key("a", "Python") is False
    assert draft.handle_skill_key("Enter", "  Python  ") is True
    assert draft.handle_skill_key("Enter", "   ") is False
    assert draft.handle_skill_key("Enter", "SQL") is True

    assert draft.values["skills"] == ["Python", "SQL"]
    draft.remove_skill(0)
    assert draft.values["skills"] == ["SQL"]


def test_reset_drops_server_fields(sample_payload):
    record = {**sample_payload, "id": 5, "userId": "u", "createdAt": "2024-01-01T00:00:00"}
    draft = ResumeDraft()
    listener = Mock()
    draft.subscribe(listener)

    draft.reset(record)

    assert draft.values == sample_payload
    listener.assert_called_once()

    draft.reset()
    assert draft.values == default_document()


def test_preview_follows_draft():
    hooks = Mock()
    binder = EditorBinder(ResumeDraft(), hooks, resume_id=3)

    assert "Your Name" in binder.preview_html

    binder.draft.set_value("personalInfo.fullName", "Grace Hopper")
    binder.draft.handle_skill_key("Enter", "COBOL")

    soup = BeautifulSoup(binder.preview_html, "html.parser")
    assert soup.select_one(".resume-name").get_text(strip=True) == "Grace Hopper"
    assert [s.get_text() for s in soup.select(".skill")] == ["COBOL"]
    assert binder.print_url == "/api/resumes/3/print"
    hooks.assert_not_called()


def test_load_and_save_round_trip(hooks, sample_payload):
    created = hooks.create_resume(sample_payload)
    binder = EditorBinder(ResumeDraft(), hooks, created.id)

    assert binder.load() is True
    assert binder.draft.values["experience"] == sample_payload["experience"]

    binder.draft.set_value("experience.0.position", "Lead Programmer")
    saved = binder.save()

    assert saved.experience[0].position == "Lead Programmer"
    assert hooks.notifier.last.description == "Resume updated successfully"
    assert hooks.get_resume(created.id).experience[0].position == "Lead Programmer"


def test_load_missing_resume(hooks):
    binder = EditorBinder(ResumeDraft(), hooks, 9999)
    assert binder.load() is False
    assert binder.draft.values == default_document()


def test_failed_save_returns_none(hooks, sample_payload):
    created = hooks.create_resume(sample_payload)
    binder = EditorBinder(ResumeDraft(), hooks, created.id)
    binder.load()
    binder.draft.set_value("title", "")

    assert binder.save() is None
    assert hooks.notifier.last.variant == "destructive"
    assert hooks.notifier.last.description == "title must not be empty"
    assert binder.draft.values["title"] == ""
