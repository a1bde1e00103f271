from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from .db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)


class Resume(Base):
    __tablename__ = "resumes"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    original_resume = Column(JSON, nullable=False)  # normalized ResumeData
    tailored_resume = Column(JSON, nullable=True)
    job_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
