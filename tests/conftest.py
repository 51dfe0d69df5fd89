"""
Shared fixtures: a throwaway SQLite content repository per test.
"""
from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from sitemap import crud
from sitemap.cache import cache_key_for
from sitemap.db import init_db, open_session, system_session
from sitemap.models import NodeFile, PAGE_NODE_TYPE, utcnow

LIVE = "live"
PREVIEW = "default"
SITEMAP_PATH = "/sites/acme/sitemap"


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh database file."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'content.db'}",
        connect_args={"check_same_thread": False},
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def site(session_factory):
    """
    Site "acme" published in live, with a draft copy in the default workspace:

    /sites/acme/home, /sites/acme/home/about, /sites/acme/private (excluded),
    /sites/acme/sitemap
    """
    for workspace in (LIVE, PREVIEW):
        with system_session(workspace, session_factory=session_factory) as db:
            crud.create_node(db, workspace, "/sites", "jnt:virtualsitesFolder")
            crud.create_node(db, workspace, "/sites/acme", "jnt:virtualsite", title="Acme")
            crud.create_node(db, workspace, "/sites/acme/home", PAGE_NODE_TYPE, title="Home")
            crud.create_node(db, workspace, "/sites/acme/home/about", PAGE_NODE_TYPE, title="About")
            crud.create_node(db, workspace, "/sites/acme/private", PAGE_NODE_TYPE,
                             title="Private", exclude_from_sitemap=True)
            crud.create_node(db, workspace, SITEMAP_PATH, "jseont:sitemap")
            db.commit()
    return session_factory


@pytest.fixture
def visitor(site):
    """Visitor session, as used by one request."""
    db = open_session(site)
    yield db
    db.close()


def add_page(session_factory, path, workspace=LIVE):
    with system_session(workspace, session_factory=session_factory) as db:
        crud.create_node(db, workspace, path, PAGE_NODE_TYPE)
        db.commit()


def age_stored_sitemap(session_factory, locale, age: timedelta):
    """Pretend the stored sitemap for a locale was written `age` ago."""
    with system_session(LIVE, session_factory=session_factory) as db:
        file = db.query(NodeFile).filter(NodeFile.name == cache_key_for(locale)).one()
        file.last_modified = utcnow() - age
        db.commit()


def count_stored_files(session_factory) -> int:
    db = session_factory()
    try:
        return db.query(NodeFile).count()
    finally:
        db.close()
