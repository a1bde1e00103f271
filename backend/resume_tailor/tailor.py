"""
Resume tailoring pipeline.

One generation call per resume section (and per entry for list sections).
Each call is isolated: when it fails or comes back empty the original
content of that unit is kept, so the tailored resume is never less complete
than the input.
"""
import copy
import json
import logging
import re
from typing import Any, Dict, List, Optional, Protocol

from . import prompts
from .errors import MalformedResponseError

logger = logging.getLogger(__name__)

SKILL_CATEGORIES = ["languages", "frameworks", "tools", "concepts"]

# Sections with a dedicated step; education is never touched.
TAILORED_SECTIONS = {
    "contact", "summary", "experience", "workExperience",
    "education", "skills", "projects", "additionalSections",
}

# For entries of an unrecognized list section, the first of these fields
# holding a non-empty list of strings is the one that gets tailored.
CONTENT_FIELD_PRIORITY = ["description", "responsibilities", "achievements", "details", "bullets"]

NO_ANSWER = "No answer could be generated for this question."

_BULLET_RX = re.compile(r"^[•\-\*]\s*")
_JSON_OBJECT_RX = re.compile(r"\{[\s\S]*\}")


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


def parse_bullets(text: str) -> List[str]:
    """Split a newline-delimited bullet list, dropping blanks and bullet markers."""
    lines = [line.strip() for line in (text or "").split("\n")]
    return [_BULLET_RX.sub("", line) for line in lines if line]


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the first {...} block of a model response."""
    m = _JSON_OBJECT_RX.search(text or "")
    if not m:
        raise MalformedResponseError("no JSON object in response")
    try:
        data = json.loads(m.group(0))
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"invalid JSON in response: {e}") from e
    if not isinstance(data, dict):
        raise MalformedResponseError("response JSON is not an object")
    return data


def find_content_field(entry: Dict[str, Any]) -> Optional[str]:
    for name in CONTENT_FIELD_PRIORITY:
        value = entry.get(name)
        if isinstance(value, list) and value and isinstance(value[0], str):
            return name
    return None


def _string_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0 and all(isinstance(v, str) for v in value)


def _join(items: List[Any]) -> str:
    return "\n".join(str(i) for i in items)


class ResumeTailor:
    """Runs the tailoring steps against one job description."""

    def __init__(self, ai: TextGenerator, job_details: str):
        self.ai = ai
        self.job_details = job_details

    async def _bullets(self, prompt: str, label: str) -> Optional[List[str]]:
        """Generate and parse a bullet list; None when the call fails or yields nothing."""
        try:
            text = await self.ai.generate(prompt)
        except Exception as e:
            logger.error(f"Error tailoring {label}: {e}")
            return None
        bullets = parse_bullets(text)
        return bullets or None

    async def run(self, resume: Dict[str, Any]) -> Dict[str, Any]:
        tailored = copy.deepcopy(resume)

        await self.tailor_summary(tailored)
        await self.tailor_experience(tailored)
        await self.tailor_skills(tailored)
        await self.tailor_projects(tailored)
        await self.tailor_work_experience(tailored)
        await self.tailor_additional_sections(tailored)
        await self.tailor_dynamic_sections(tailored)

        return tailored

    async def tailor_summary(self, resume: Dict[str, Any]) -> None:
        summary = resume.get("summary")
        if not isinstance(summary, str):
            return
        logger.info("Tailoring professional summary...")
        prompt = prompts.SUMMARY_PROMPT.format(summary=summary, job_details=self.job_details)
        try:
            text = (await self.ai.generate(prompt) or "").strip()
        except Exception as e:
            logger.error(f"Error tailoring summary: {e}")
            return
        if text:
            resume["summary"] = text

    async def tailor_experience(self, resume: Dict[str, Any]) -> None:
        entries = resume.get("experience")
        if not isinstance(entries, list) or not entries:
            return
        logger.info("Tailoring experience...")
        result = []
        for exp in entries:
            if not isinstance(exp, dict) or not _string_list(exp.get("responsibilities")):
                result.append(exp)
                continue
            prompt = prompts.EXPERIENCE_PROMPT.format(
                title=exp.get("title", ""),
                company=exp.get("company", ""),
                responsibilities=_join(exp["responsibilities"]),
                job_details=self.job_details,
            )
            bullets = await self._bullets(prompt, f"experience for {exp.get('title')}")
            result.append({**exp, "responsibilities": bullets} if bullets else exp)
        resume["experience"] = result

    async def tailor_skills(self, resume: Dict[str, Any]) -> None:
        skills = resume.get("skills")
        if not isinstance(skills, dict):
            return
        logger.info("Tailoring skills...")
        listed = {
            cat: ", ".join(str(s) for s in skills.get(cat) or []) for cat in SKILL_CATEGORIES
        }
        prompt = prompts.SKILLS_PROMPT.format(job_details=self.job_details, **listed)
        try:
            parsed = extract_json_object(await self.ai.generate(prompt))
        except MalformedResponseError as e:
            logger.warning(f"Could not read skills response, keeping original skills: {e}")
            return
        except Exception as e:
            logger.error(f"Error tailoring skills: {e}")
            return
        for cat in SKILL_CATEGORIES:
            if _string_list(parsed.get(cat)):
                skills[cat] = parsed[cat]

    async def tailor_projects(self, resume: Dict[str, Any]) -> None:
        entries = resume.get("projects")
        if not isinstance(entries, list) or not entries:
            return
        logger.info("Tailoring projects...")
        result = []
        for project in entries:
            if not isinstance(project, dict) or not _string_list(project.get("description")):
                result.append(project)
                continue
            prompt = prompts.PROJECT_PROMPT.format(
                name=project.get("name", ""),
                description=_join(project["description"]),
                job_details=self.job_details,
            )
            bullets = await self._bullets(prompt, f"project {project.get('name')}")
            result.append({**project, "description": bullets} if bullets else project)
        resume["projects"] = result

    async def tailor_work_experience(self, resume: Dict[str, Any]) -> None:
        entries = resume.get("workExperience")
        if not isinstance(entries, list) or not entries:
            return
        logger.info("Tailoring work experience...")
        result = []
        for exp in entries:
            if not isinstance(exp, dict) or not _string_list(exp.get("responsibilities")):
                result.append(exp)
                continue
            prompt = prompts.WORK_EXPERIENCE_PROMPT.format(
                position=exp.get("position") or "Not specified",
                company=exp.get("company") or "Not specified",
                status="Current position" if exp.get("isCurrent") else "Past position",
                responsibilities=_join(exp["responsibilities"]),
                job_details=self.job_details,
            )
            bullets = await self._bullets(prompt, f"work experience for {exp.get('position') or 'position'}")
            result.append({**exp, "responsibilities": bullets} if bullets else exp)
        resume["workExperience"] = result

    async def tailor_additional_sections(self, resume: Dict[str, Any]) -> None:
        sections = resume.get("additionalSections")
        if not isinstance(sections, dict) or not sections:
            return
        logger.info("Tailoring additional sections...")
        result = {}
        for name, items in sections.items():
            if not _string_list(items):
                result[name] = items
                continue
            prompt = prompts.SECTION_ITEMS_PROMPT.format(
                section=name, items=_join(items), job_details=self.job_details
            )
            result[name] = await self._bullets(prompt, f"additional section {name}") or items
        resume["additionalSections"] = result

    async def tailor_dynamic_sections(self, resume: Dict[str, Any]) -> None:
        """Tailor any other non-empty list section the parser produced."""
        for key in list(resume.keys()):
            value = resume[key]
            if key in TAILORED_SECTIONS or not isinstance(value, list) or not value:
                continue
            logger.info(f"Tailoring additional section: {key}...")
            section = key.replace("_", " ")
            try:
                if isinstance(value[0], str):
                    prompt = prompts.SECTION_ITEMS_PROMPT.format(
                        section=section, items=_join(value), job_details=self.job_details
                    )
                    bullets = await self._bullets(prompt, f"{key} section")
                    if bullets:
                        resume[key] = bullets
                elif isinstance(value[0], dict):
                    resume[key] = [await self._tailor_entry(section, entry) for entry in value]
            except Exception as e:
                logger.error(f"Error tailoring {key} section: {e}")

    async def _tailor_entry(self, section: str, entry: Any) -> Any:
        if not isinstance(entry, dict):
            return entry
        field = find_content_field(entry)
        if field is None:
            return entry
        context = "\n".join(
            f"{k[:1].upper()}{k[1:]}: {v}"
            for k, v in entry.items()
            if k != field and isinstance(v, str) and v.strip()
        )
        prompt = prompts.SECTION_ENTRY_PROMPT.format(
            section=section,
            context=context,
            field=field,
            content=_join(entry[field]),
            job_details=self.job_details,
        )
        bullets = await self._bullets(prompt, f"{section} item")
        return {**entry, field: bullets} if bullets else entry


async def tailor_resume(resume: Dict[str, Any], job_details: str, ai: TextGenerator) -> Dict[str, Any]:
    """Tailor every section of a resume to a job description.

    Falls back to the untailored resume if the pipeline itself breaks.
    """
    logger.info("Starting resume tailoring")
    try:
        tailored = await ResumeTailor(ai, job_details).run(resume)
    except Exception:
        logger.exception("Error in overall tailoring process, returning original resume")
        return resume
    logger.info("Resume tailoring completed")
    return tailored


async def answer_question(resume: Dict[str, Any], question: str, ai: TextGenerator) -> str:
    """Answer a free-text question about a resume. Errors propagate."""
    prompt = prompts.QUESTION_PROMPT.format(
        resume_json=json.dumps(resume, indent=2), question=question
    )
    text = await ai.generate(prompt)
    return (text or "").strip() or NO_ANSWER
