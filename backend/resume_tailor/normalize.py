"""
Resume normalization: maps the document parser's loosely-typed payload onto
the canonical ResumeData shape.

Every mapper here is parse-with-defaults: a missing or malformed field turns
into "", [] or {} and never raises.
"""
import json
import logging
from typing import Any, Dict, List

from .schemas import ResumeData

logger = logging.getLogger(__name__)

CONTACT_FIELDS = {
    "full_name": "name",
    "address": "location",
    "email": "email",
    "phone": "phone",
    "linkedin": "linkedin",
    "github": "github",
}

# Raw payload keys handled explicitly; everything else is a residual section.
KNOWN_SECTIONS = [
    "contact_info", "summary", "experience", "work_experience",
    "education", "skills", "technical_skills", "projects",
    "additional_sections",
    # flat skill categories, folded into skills
    "programming_languages", "frameworks", "tools", "concepts",
]

# Canonical keys a residual section may not overwrite.
CANONICAL_KEYS = {
    "contact", "summary", "experience", "workExperience", "education",
    "skills", "technical_skills", "projects", "additionalSections",
}

SKILL_CATEGORIES = {
    "languages": "programming_languages",
    "frameworks": "frameworks",
    "tools": "tools",
    "concepts": "concepts",
}


def default_resume() -> Dict[str, Any]:
    return ResumeData().to_dict()


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _text_list(value: Any) -> List[str]:
    """List of strings from a list, a lone string, or nothing."""
    if not value:
        return []
    if isinstance(value, list):
        return [_text(v) for v in value if v is not None]
    return [_text(value)]


def _records(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def split_skill_list(value: Any) -> List[str]:
    """Normalize a skills category that may be a list or a comma-separated string."""
    if not value:
        return []
    if isinstance(value, list):
        return [_text(v) for v in value]
    if isinstance(value, str):
        return [item.strip() for item in value.split(",")]
    return []


def normalize_contact(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raw = {}
    contact = {target: _text(raw.get(source)) for source, target in CONTACT_FIELDS.items()}
    for key, value in raw.items():
        if key in CONTACT_FIELDS or not value:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        contact.setdefault(key, value)
    return contact


def normalize_experience(raw: Any) -> List[Dict[str, Any]]:
    return [
        {
            "title": _text(exp.get("title")),
            "company": _text(exp.get("company")),
            "location": _text(exp.get("location")),
            "startDate": _text(exp.get("start_date")),
            "endDate": _text(exp.get("end_date")),
            "responsibilities": _text_list(exp.get("description") or exp.get("responsibilities")),
        }
        for exp in _records(raw)
    ]


def normalize_work_experience(raw: Any) -> List[Dict[str, Any]]:
    return [
        {
            "company": _text(exp.get("company")),
            "position": _text(exp.get("position")),
            "startDate": _text(exp.get("start_date")),
            "endDate": _text(exp.get("end_date")),
            "isCurrent": bool(exp.get("is_current", False)),
            "responsibilities": _text_list(exp.get("responsibilities"))
            if isinstance(exp.get("responsibilities"), list) else [],
            "technologies": _text_list(exp.get("technologies")),
        }
        for exp in _records(raw)
    ]


def normalize_education(raw: Any) -> List[Dict[str, str]]:
    return [
        {
            "degree": _text(edu.get("degree")),
            "institution": _text(edu.get("institution")),
            "years": f"{_text(edu.get('start_date'))} - {_text(edu.get('end_date'))}",
            "gpa": _text(edu.get("gpa")),
        }
        for edu in _records(raw)
    ]


def normalize_skills(payload: Dict[str, Any]) -> Dict[str, List[str]]:
    nested = payload.get("skills")
    has_skills = nested or any(payload.get(flat) for flat in SKILL_CATEGORIES.values())
    if not has_skills:
        return {category: [] for category in SKILL_CATEGORIES}
    if isinstance(nested, list):
        # an uncategorized skills list is kept as languages
        nested = {"programming_languages": nested}
    elif not isinstance(nested, dict):
        nested = {}
    return {
        category: split_skill_list(nested.get(source) or payload.get(source))
        for category, source in SKILL_CATEGORIES.items()
    }


def normalize_projects(raw: Any) -> List[Dict[str, Any]]:
    return [
        {
            "name": _text(proj.get("name") or proj.get("title")),
            "description": _text_list(proj.get("description")),
        }
        for proj in _records(raw)
    ]


def normalize_additional_sections(raw: Any) -> Dict[str, List[str]]:
    sections: Dict[str, List[str]] = {}
    for name, value in raw.items():
        if isinstance(value, list):
            sections[name] = _text_list(value)
        elif isinstance(value, str):
            sections[name] = [value]
    return sections


def normalize_resume(envelope: Any) -> Dict[str, Any]:
    """Map a parser prediction envelope ({"response": {...}}) onto ResumeData."""
    payload = envelope.get("response") if isinstance(envelope, dict) else None
    if not payload or not isinstance(payload, dict):
        logger.warning("Empty parser response, returning default resume")
        return default_resume()

    logger.debug(f"Parser payload sections: {', '.join(payload.keys())}")

    data: Dict[str, Any] = {
        "contact": normalize_contact(payload.get("contact_info")),
        "summary": _text(payload.get("summary")),
        "experience": normalize_experience(payload.get("experience")),
        "skills": normalize_skills(payload),
        "projects": normalize_projects(payload.get("projects")),
    }
    if isinstance(payload.get("work_experience"), list):
        data["workExperience"] = normalize_work_experience(payload["work_experience"])
    if isinstance(payload.get("education"), list):
        data["education"] = normalize_education(payload["education"])
    if payload.get("technical_skills"):
        data["technical_skills"] = payload["technical_skills"]
    if isinstance(payload.get("additional_sections"), dict):
        data["additionalSections"] = normalize_additional_sections(payload["additional_sections"])

    for key, value in payload.items():
        if key in KNOWN_SECTIONS or key in CANONICAL_KEYS:
            continue
        if isinstance(value, (list, dict)) and len(value) > 0:
            data[key] = value

    return ResumeData.model_validate(data).to_dict()
