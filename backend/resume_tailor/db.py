from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def make_session_factory(database_url: str, echo: bool = False) -> sessionmaker:
    """Create the engine for database_url, ensure the schema, return a session factory."""
    connect_args: Optional[dict] = None
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    engine = create_engine(database_url, echo=echo, connect_args=connect_args or {})
    # Ensure models are registered on Base before create_all
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
