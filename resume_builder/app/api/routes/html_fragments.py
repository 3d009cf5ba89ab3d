import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

log = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"
env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=True)

EMPTY_PERSONAL_INFO = {
    "fullName": "",
    "email": "",
    "phone": "",
    "location": "",
    "summary": "",
}


def _month_year_filter(value: str | None) -> str:
    """Jinja2 filter rendering a stored date string as e.g. "Jan 2020".

    Accepts YYYY-MM-DD, YYYY-MM and full ISO timestamps. Anything that does
    not parse is returned unchanged.
    """
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        try:
            parsed = datetime.strptime(value, "%Y-%m")
        except ValueError:
            return value
    return parsed.strftime("%b %Y")


env.filters["month_year"] = _month_year_filter


def _preview_context(document: Mapping[str, Any]) -> dict[str, Any]:
    """Fill in empty defaults so partially edited drafts still lay out."""
    personal_info = {**EMPTY_PERSONAL_INFO, **(document.get("personalInfo") or {})}
    return {
        "title": document.get("title") or "Resume",
        "personal_info": personal_info,
        "experience": document.get("experience") or [],
        "education": document.get("education") or [],
        "skills": document.get("skills") or [],
    }


def _generate_resume_preview_html(document: Mapping[str, Any]) -> str:
    """
    Generate the read-only preview of a resume document.

    Args:
        document (Mapping[str, Any]): Resume fields keyed by their camelCase wire
            names. May be a partially edited draft.

    Returns:
        str: HTML string for the A4 preview sheet.

    Notes:
        1. Missing sections fall back to empty values.
        2. Renders the `partials/resume/_resume_preview.html` template.
        3. The output depends only on `document`.

    """
    template = env.get_template("partials/resume/_resume_preview.html")
    return template.render(**_preview_context(document))


def _generate_resume_print_html(document: Mapping[str, Any]) -> str:
    """
    Generate a standalone print page wrapping the preview.

    The page opens the browser print dialog on load; saving that as PDF is
    the export path.

    Args:
        document (Mapping[str, Any]): Resume fields keyed by camelCase wire names.

    Returns:
        str: A complete HTML document.

    """
    template = env.get_template("resume_print.html")
    context = _preview_context(document)
    return template.render(
        document_title=context["title"],
        preview_html=_generate_resume_preview_html(document),
    )
