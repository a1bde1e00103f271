import asyncio
import copy

import pytest

from conftest import FakeGenerator
from resume_tailor.errors import GeneratorError, MalformedResponseError
from resume_tailor.tailor import (
    NO_ANSWER,
    answer_question,
    extract_json_object,
    find_content_field,
    parse_bullets,
    tailor_resume,
)

JOB = "Seeking a Go backend engineer"


def run(resume, ai, job=JOB):
    return asyncio.run(tailor_resume(resume, job, ai))


def test_example_end_to_end():
    resume = {
        "summary": "Built web apps",
        "skills": {"languages": ["Go"], "frameworks": [], "tools": [], "concepts": []},
        "experience": [{"title": "Eng", "company": "X", "responsibilities": ["Wrote code"]}],
    }
    ai = FakeGenerator(
        {
            "professional summary": "Experienced backend engineer skilled in Go",
            "job responsibilities": "• Wrote scalable Go services",
        },
        default=GeneratorError("quota exceeded"),
    )

    tailored = run(resume, ai)

    assert tailored["summary"] == "Experienced backend engineer skilled in Go"
    assert tailored["experience"][0]["responsibilities"] == ["Wrote scalable Go services"]
    assert tailored["experience"][0]["title"] == "Eng"
    assert tailored["skills"] == resume["skills"]
    # source resume is not mutated
    assert resume["summary"] == "Built web apps"


def test_always_failing_generator_returns_equal_resume(sample_resume):
    sample_resume["workExperience"] = [
        {"company": "X", "position": "Dev", "startDate": "", "endDate": "", "isCurrent": True,
         "responsibilities": ["Ship"], "technologies": []},
    ]
    sample_resume["additionalSections"] = {"Languages": ["English"], "Note": "n/a"}
    sample_resume["patents"] = ["P1"]
    sample_resume["volunteering"] = [{"org": "Z", "details": ["Taught kids"]}]
    original = copy.deepcopy(sample_resume)

    tailored = run(sample_resume, FakeGenerator(default=GeneratorError("down")))

    assert tailored == original
    assert tailored is not sample_resume


def test_empty_generations_keep_original(sample_resume):
    original = copy.deepcopy(sample_resume)
    tailored = run(sample_resume, FakeGenerator(default="   \n\n"))
    assert tailored == original


def test_education_is_never_modified(sample_resume):
    ai = FakeGenerator(default="• Rewritten line")
    tailored = run(sample_resume, ai)
    assert tailored["education"] == sample_resume["education"]
    assert not any("BSc" in p for p in ai.prompts)
    assert tailored["experience"][0]["responsibilities"] == ["Rewritten line"]
    assert tailored["projects"][0]["description"] == ["Rewritten line"]


def test_experience_failure_is_isolated_per_entry(sample_resume):
    sample_resume["experience"].append(
        {"title": "Lead", "company": "Y", "location": "", "startDate": "", "endDate": "",
         "responsibilities": ["Led team"]}
    )
    ai = FakeGenerator(
        {'Job title: "Eng"': GeneratorError("boom"), 'Job title: "Lead"': "- Led a Go team\n- Hired engineers"},
        default="not used",
    )
    tailored = run(sample_resume, ai)
    assert tailored["experience"][0] == sample_resume["experience"][0]
    assert tailored["experience"][1]["responsibilities"] == ["Led a Go team", "Hired engineers"]


def test_skills_reordered_from_json_block(sample_resume):
    reply = 'Sure! Here you go:\n```json\n{"languages": ["Go", "Python"], "frameworks": "Django", "tools": ["Docker"]}\n```'
    ai = FakeGenerator({"skills should be emphasized": reply}, default=GeneratorError("skip"))
    tailored = run(sample_resume, ai)
    assert tailored["skills"]["languages"] == ["Go", "Python"]
    # non-list and missing categories stay as they were
    assert tailored["skills"]["frameworks"] == ["Django"]
    assert tailored["skills"]["concepts"] == ["APIs"]


def test_skills_non_json_reply_keeps_skills(sample_resume):
    ai = FakeGenerator({"skills should be emphasized": "Go is the most relevant."}, default=GeneratorError("skip"))
    tailored = run(sample_resume, ai)
    assert tailored["skills"] == sample_resume["skills"]


def test_skills_empty_or_non_string_categories_keep_original(sample_resume):
    reply = '{"languages": [], "frameworks": [null, 3], "tools": ["Docker", "Kubernetes"], "concepts": "APIs"}'
    ai = FakeGenerator({"skills should be emphasized": reply}, default=GeneratorError("skip"))
    tailored = run(sample_resume, ai)
    assert tailored["skills"]["languages"] == ["Python", "Go"]
    assert tailored["skills"]["frameworks"] == ["Django"]
    assert tailored["skills"]["tools"] == ["Docker", "Kubernetes"]
    assert tailored["skills"]["concepts"] == ["APIs"]


def test_work_experience_prompt_and_result():
    resume = {
        "workExperience": [
            {"company": "X", "position": "Dev", "isCurrent": True, "responsibilities": ["Ship features"],
             "technologies": ["Go"]},
            {"company": "Y", "position": "", "isCurrent": False, "responsibilities": []},
        ]
    }
    ai = FakeGenerator({"work responsibilities": "* Shipped Go features"})
    tailored = run(resume, ai)
    assert tailored["workExperience"][0]["responsibilities"] == ["Shipped Go features"]
    assert tailored["workExperience"][0]["technologies"] == ["Go"]
    assert tailored["workExperience"][1] == resume["workExperience"][1]
    assert len(ai.prompts) == 1
    assert "Current position" in ai.prompts[0]


def test_additional_sections():
    resume = {"additionalSections": {"Certifications": ["CKA"], "Note": "plain string", "Empty": []}}
    ai = FakeGenerator({"Certifications": "• Certified Kubernetes Administrator"})
    tailored = run(resume, ai)
    assert tailored["additionalSections"] == {
        "Certifications": ["Certified Kubernetes Administrator"],
        "Note": "plain string",
        "Empty": [],
    }


def test_dynamic_string_section():
    resume = {"open_source": ["Maintainer of a Go library"]}
    ai = FakeGenerator({"open source items": "- Maintainer of a popular Go library"})
    tailored = run(resume, ai)
    assert tailored["open_source"] == ["Maintainer of a popular Go library"]


def test_dynamic_object_section_tailors_only_content_field():
    resume = {
        "volunteering": [
            {"org": "Code Club", "role": "Mentor", "achievements": ["Taught Python"], "year": 2021},
            {"org": "Food bank", "hours": "10"},
        ]
    }
    ai = FakeGenerator({"volunteering item": "• Taught Go and Python"})
    tailored = run(resume, ai)
    first, second = tailored["volunteering"]
    assert first == {"org": "Code Club", "role": "Mentor", "achievements": ["Taught Go and Python"], "year": 2021}
    assert second == resume["volunteering"][1]
    assert len(ai.prompts) == 1
    assert "Org: Code Club" in ai.prompts[0]
    assert "Original achievements" in ai.prompts[0]


def test_find_content_field_follows_priority_order():
    entry = {"details": ["d"], "description": ["x"], "bullets": ["b"]}
    assert find_content_field(entry) == "description"
    assert find_content_field({"details": [], "bullets": ["b"]}) == "bullets"
    assert find_content_field({"description": "a string"}) is None


def test_pipeline_defect_returns_original_resume(sample_resume):
    class BrokenGenerator:
        async def generate(self, prompt):
            return 12345  # not text

    result = run(sample_resume, BrokenGenerator())
    assert result is sample_resume


def test_parse_bullets():
    text = "• First\n\n- Second\n*   Third\n  Fourth  \n"
    assert parse_bullets(text) == ["First", "Second", "Third", "Fourth"]
    assert parse_bullets("") == []


def test_extract_json_object():
    assert extract_json_object('noise {"a": [1]} trailing') == {"a": [1]}
    with pytest.raises(MalformedResponseError):
        extract_json_object("no json here")
    with pytest.raises(MalformedResponseError):
        extract_json_object("{not: valid}")


def test_answer_question_trims_and_embeds_resume(sample_resume):
    ai = FakeGenerator(default="  Ada led the migration.  ")
    answer = asyncio.run(answer_question(sample_resume, "Tell me about leadership", ai))
    assert answer == "Ada led the migration."
    assert '"summary": "Built web apps"' in ai.prompts[0]
    assert "Tell me about leadership" in ai.prompts[0]


def test_answer_question_sentinel_on_empty(sample_resume):
    ai = FakeGenerator(default="")
    assert asyncio.run(answer_question(sample_resume, "Anything?", ai)) == NO_ANSWER


def test_answer_question_errors_propagate(sample_resume):
    ai = FakeGenerator(default=GeneratorError("down"))
    with pytest.raises(GeneratorError):
        asyncio.run(answer_question(sample_resume, "Anything?", ai))
