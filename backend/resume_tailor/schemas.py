from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ----- Resume shape -----
class Contact(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    location: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    github: str = ""


class Experience(BaseModel):
    title: str = ""
    company: str = ""
    location: str = ""
    startDate: str = ""
    endDate: str = ""
    responsibilities: List[str] = Field(default_factory=list)


class WorkExperience(BaseModel):
    company: str = ""
    position: str = ""
    startDate: str = ""
    endDate: str = ""
    isCurrent: bool = False
    responsibilities: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)


class Education(BaseModel):
    degree: str = ""
    institution: str = ""
    years: str = ""
    gpa: str = ""


class Skills(BaseModel):
    languages: List[str] = Field(default_factory=list)
    frameworks: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    concepts: List[str] = Field(default_factory=list)


class Project(BaseModel):
    name: str = ""
    description: List[str] = Field(default_factory=list)


class ResumeData(BaseModel):
    """Canonical resume. Unrecognized sections ride along as extra fields."""

    model_config = ConfigDict(extra="allow")

    contact: Contact = Field(default_factory=Contact)
    summary: str = ""
    experience: List[Experience] = Field(default_factory=list)
    education: Optional[List[Education]] = None
    skills: Skills = Field(default_factory=Skills)
    projects: List[Project] = Field(default_factory=list)
    workExperience: Optional[List[WorkExperience]] = None
    technical_skills: Optional[Any] = None
    additionalSections: Optional[Dict[str, List[str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON form; optional sections the source lacked are left out."""
        data = self.model_dump()
        for key in ("education", "workExperience", "technical_skills", "additionalSections"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


# ----- API requests/responses -----
class JobFetchRequest(BaseModel):
    url: Optional[str] = None


class JobFetchResponse(BaseModel):
    jobDetails: str


class TailorRequest(BaseModel):
    resume: Optional[Dict[str, Any]] = None
    geminiApiKey: Optional[str] = None
    applicationUrl: Optional[str] = None


class QuestionRequest(BaseModel):
    resume: Optional[Dict[str, Any]] = None
    question: Optional[str] = None
    geminiApiKey: Optional[str] = None


class QuestionResponse(BaseModel):
    answer: str


# ----- Storage records -----
class UserIn(BaseModel):
    username: str
    password: str


class UserOut(UserIn):
    id: int


class ResumeIn(BaseModel):
    user_id: Optional[int] = None
    original_resume: Dict[str, Any]
    tailored_resume: Optional[Dict[str, Any]] = None
    job_url: Optional[str] = None


class ResumeOut(ResumeIn):
    id: int
    created_at: Optional[datetime] = None
