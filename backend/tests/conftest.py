import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure backend package is importable
backend_root = Path(__file__).resolve().parents[1]
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))


class FakeResponse:
    def __init__(self, status_code=200, text="", json_data=None):
        self.status_code = status_code
        self.text = text
        self._json = json_data

    @property
    def is_success(self):
        return 200 <= self.status_code < 300

    def json(self):
        return self._json


class FakeGenerator:
    """Text generator that answers by prompt content.

    `replies` maps a substring of the prompt to the text returned; a value
    that is an Exception instance is raised instead.
    """

    def __init__(self, replies=None, default=None):
        self.replies = replies or {}
        self.default = default
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        for needle, reply in self.replies.items():
            if needle in prompt:
                if isinstance(reply, Exception):
                    raise reply
                return reply
        if isinstance(self.default, Exception):
            raise self.default
        if self.default is None:
            raise RuntimeError("no canned reply")
        return self.default


@pytest.fixture
def client(monkeypatch):
    """Provide a FastAPI TestClient backed by a fresh in-memory storage."""
    monkeypatch.setenv("CORS_ORIGINS", "*")

    from resume_tailor.main import app  # type: ignore
    from resume_tailor.storage import MemStorage, get_storage  # type: ignore

    storage = MemStorage()
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_resume():
    return {
        "contact": {"name": "Ada", "location": "", "email": "ada@example.com", "phone": "", "linkedin": "", "github": ""},
        "summary": "Built web apps",
        "experience": [
            {"title": "Eng", "company": "X", "location": "", "startDate": "2020", "endDate": "2023",
             "responsibilities": ["Wrote code", "Reviewed code"]},
        ],
        "education": [{"degree": "BSc", "institution": "Uni", "years": "2016 - 2020", "gpa": "3.8"}],
        "skills": {"languages": ["Python", "Go"], "frameworks": ["Django"], "tools": ["Docker"], "concepts": ["APIs"]},
        "projects": [{"name": "Site", "description": ["Made a site"]}],
    }
