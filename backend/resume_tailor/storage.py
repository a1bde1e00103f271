"""
Storage repository for users and saved resumes.

The app builds one Storage at startup and hands it to request handlers via
the get_storage dependency. MemStorage keeps everything in process memory;
SqlStorage persists through SQLAlchemy.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Request
from sqlalchemy.orm import Session, sessionmaker

from .db import make_session_factory
from .models import Resume, User
from .schemas import ResumeIn, ResumeOut, UserIn, UserOut

logger = logging.getLogger(__name__)

UPDATABLE_RESUME_FIELDS = {"user_id", "original_resume", "tailored_resume", "job_url"}


class Storage(ABC):
    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[UserOut]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[UserOut]: ...

    @abstractmethod
    def create_user(self, user: UserIn) -> UserOut: ...

    # Resumes
    @abstractmethod
    def get_resume(self, resume_id: int) -> Optional[ResumeOut]: ...

    @abstractmethod
    def get_resumes_by_user_id(self, user_id: int) -> List[ResumeOut]: ...

    @abstractmethod
    def create_resume(self, resume: ResumeIn) -> ResumeOut: ...

    @abstractmethod
    def update_resume(self, resume_id: int, changes: Dict[str, Any]) -> Optional[ResumeOut]: ...

    @abstractmethod
    def delete_resume(self, resume_id: int) -> bool: ...


class MemStorage(Storage):
    def __init__(self):
        self._users: Dict[int, UserOut] = {}
        self._resumes: Dict[int, ResumeOut] = {}
        self._next_user_id = 1
        self._next_resume_id = 1

    def get_user(self, user_id: int) -> Optional[UserOut]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[UserOut]:
        return next((u for u in self._users.values() if u.username == username), None)

    def create_user(self, user: UserIn) -> UserOut:
        out = UserOut(id=self._next_user_id, **user.model_dump())
        self._users[out.id] = out
        self._next_user_id += 1
        return out

    def get_resume(self, resume_id: int) -> Optional[ResumeOut]:
        return self._resumes.get(resume_id)

    def get_resumes_by_user_id(self, user_id: int) -> List[ResumeOut]:
        return [r for r in self._resumes.values() if r.user_id == user_id]

    def create_resume(self, resume: ResumeIn) -> ResumeOut:
        out = ResumeOut(id=self._next_resume_id, created_at=datetime.now(timezone.utc), **resume.model_dump())
        self._resumes[out.id] = out
        self._next_resume_id += 1
        return out

    def update_resume(self, resume_id: int, changes: Dict[str, Any]) -> Optional[ResumeOut]:
        existing = self._resumes.get(resume_id)
        if not existing:
            return None
        updated = existing.model_copy(update={k: v for k, v in changes.items() if k in UPDATABLE_RESUME_FIELDS})
        self._resumes[resume_id] = updated
        return updated

    def delete_resume(self, resume_id: int) -> bool:
        return self._resumes.pop(resume_id, None) is not None


def _user_out(u: User) -> UserOut:
    return UserOut(id=u.id, username=u.username, password=u.password)


def _resume_out(r: Resume) -> ResumeOut:
    return ResumeOut(
        id=r.id,
        user_id=r.user_id,
        original_resume=r.original_resume,
        tailored_resume=r.tailored_resume,
        job_url=r.job_url,
        created_at=r.created_at,
    )


class SqlStorage(Storage):
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _session(self) -> Session:
        return self.session_factory()

    def get_user(self, user_id: int) -> Optional[UserOut]:
        with self._session() as db:
            u = db.get(User, user_id)
            return _user_out(u) if u else None

    def get_user_by_username(self, username: str) -> Optional[UserOut]:
        with self._session() as db:
            u = db.query(User).filter(User.username == username).first()
            return _user_out(u) if u else None

    def create_user(self, user: UserIn) -> UserOut:
        with self._session() as db:
            u = User(username=user.username, password=user.password)
            db.add(u); db.commit()
            db.refresh(u)
            return _user_out(u)

    def get_resume(self, resume_id: int) -> Optional[ResumeOut]:
        with self._session() as db:
            r = db.get(Resume, resume_id)
            return _resume_out(r) if r else None

    def get_resumes_by_user_id(self, user_id: int) -> List[ResumeOut]:
        with self._session() as db:
            rows = db.query(Resume).filter(Resume.user_id == user_id).order_by(Resume.id).all()
            return [_resume_out(r) for r in rows]

    def create_resume(self, resume: ResumeIn) -> ResumeOut:
        with self._session() as db:
            r = Resume(**resume.model_dump())
            db.add(r); db.commit()
            db.refresh(r)
            return _resume_out(r)

    def update_resume(self, resume_id: int, changes: Dict[str, Any]) -> Optional[ResumeOut]:
        with self._session() as db:
            r = db.get(Resume, resume_id)
            if not r:
                return None
            for k, v in changes.items():
                if k in UPDATABLE_RESUME_FIELDS:
                    setattr(r, k, v)
            db.commit()
            db.refresh(r)
            return _resume_out(r)

    def delete_resume(self, resume_id: int) -> bool:
        with self._session() as db:
            r = db.get(Resume, resume_id)
            if not r:
                return False
            db.delete(r); db.commit()
            return True


def build_storage(database_url: Optional[str]) -> Storage:
    if database_url:
        logger.info("Using SQL storage")
        return SqlStorage(make_session_factory(database_url))
    return MemStorage()


def get_storage(request: Request) -> Storage:
    return request.app.state.storage
