"""
Tests for the repository-backed sitemap file store.
"""
import pytest

from sitemap import crud
from sitemap.cache import CacheStore, SITEMAP_MIME_TYPE, cache_key_for
from sitemap.db import open_session
from sitemap.errors import AccessDeniedError, CacheReadError, RepositoryError
from sitemap.models import utcnow

from conftest import LIVE, SITEMAP_PATH, count_stored_files


@pytest.fixture
def store(site):
    return CacheStore(session_factory=site)


@pytest.fixture
def sitemap_node(visitor):
    return crud.get_node_by_path(visitor, LIVE, SITEMAP_PATH)


def test_get_without_prior_write_returns_none(store, sitemap_node):
    assert store.get(sitemap_node, "fr") is None


def test_get_without_owner_returns_none(store):
    assert store.get(None, "en") is None


def test_put_then_get_round_trip(store, sitemap_node):
    body = '<?xml version="1.0"?><urlset><url><loc>http://x/é</loc></url></urlset>'.encode("utf-8")
    before = utcnow()

    store.put(SITEMAP_PATH, "en", body, SITEMAP_MIME_TYPE)
    entry = store.get(sitemap_node, "en")

    assert entry is not None
    assert entry.data == body
    assert entry.content_type == "application/xml"
    assert entry.owner_path == SITEMAP_PATH
    assert entry.locale == "en"
    assert entry.last_modified >= before
    assert store.read_text(sitemap_node, "en") == body.decode("utf-8")


def test_put_is_scoped_per_locale(store, sitemap_node):
    store.put(SITEMAP_PATH, "en", b"<urlset>en</urlset>")

    assert store.get(sitemap_node, "fr") is None
    assert store.get(sitemap_node, "en").data == b"<urlset>en</urlset>"


def test_put_overwrites_existing_entry(site, store, sitemap_node):
    store.put(SITEMAP_PATH, "en", b"<urlset>old</urlset>")
    first = store.get(sitemap_node, "en")
    store.put(SITEMAP_PATH, "en", b"<urlset>new</urlset>")
    second = store.get(sitemap_node, "en")

    assert second.data == b"<urlset>new</urlset>"
    assert second.last_modified >= first.last_modified
    assert count_stored_files(site) == 1


def test_put_is_visible_to_a_later_request(site, store):
    store.put(SITEMAP_PATH, "de", b"<urlset>de</urlset>")

    db = open_session(site)
    try:
        node = crud.get_node_by_path(db, LIVE, SITEMAP_PATH)
        assert store.get(node, "de").data == b"<urlset>de</urlset>"
    finally:
        db.close()


def test_put_on_missing_owner_raises(store):
    with pytest.raises(RepositoryError):
        store.put("/sites/acme/missing", "en", b"<urlset/>")


def test_get_on_detached_node_raises(site, store):
    db = open_session(site)
    node = crud.get_node_by_path(db, LIVE, SITEMAP_PATH)
    db.close()

    with pytest.raises(RepositoryError):
        store.get(node, "en")


def test_read_text_of_missing_entry_raises_read_error(store, sitemap_node):
    with pytest.raises(CacheReadError):
        store.read_text(sitemap_node, "en")


def test_read_text_of_corrupt_entry_raises_read_error(store, sitemap_node):
    store.put(SITEMAP_PATH, "en", b"\xff\xfe\xfa")
    with pytest.raises(OSError):
        store.read_text(sitemap_node, "en")


def test_visitor_session_cannot_upload(visitor, sitemap_node):
    with pytest.raises(AccessDeniedError):
        crud.upload_file(visitor, sitemap_node, cache_key_for("en"), b"<urlset/>", SITEMAP_MIME_TYPE)
