"""
Database connection and setup
SQLite database with SQLAlchemy
"""
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config.settings import settings
from sitemap.models import Base

DATABASE_URL = settings.database_url

# Create engine with echo=False (set to True for SQL debugging)
engine = create_engine(
    DATABASE_URL,
    # check_same_thread is needed for SQLite only
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
    echo=False
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

GUEST_USER = "guest"


def init_db(bind=None):
    """
    Initialize database - create all tables
    Safe to call multiple times (won't recreate existing tables)
    """
    Base.metadata.create_all(bind=bind or engine)


def open_session(session_factory=SessionLocal, user: str = GUEST_USER):
    """
    Open a visitor session. Remember to close() when done.
    """
    session = session_factory()
    session.info.update({"user": user, "system": False})
    return session


def get_db():
    """
    Get a visitor session - use in FastAPI dependencies
    Yields a session and closes it when done
    """
    db = open_session()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def system_session(workspace: str, session_factory=SessionLocal):
    """
    Privileged session bound to one workspace.

    Only held for the duration of the with-block. Rolls back on error.
    """
    session = session_factory()
    session.info.update({
        "user": settings.system_user,
        "workspace": workspace,
        "system": True,
    })
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
