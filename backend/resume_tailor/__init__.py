"""Resume Tailor backend: parse a resume PDF, fetch a job posting, tailor the resume."""

__version__ = "0.1.0"
