"""
Unit tests for sitemap cache expiration, naming and request coordination.
"""
from datetime import datetime, timedelta

import pytest

from sitemap.cache import (
    CACHE_NAME,
    RequestCoordinator,
    cache_key_for,
    get_cache_duration,
    is_expired,
)
from sitemap.errors import StateError
from sitemap.render import RenderContext


LAST_MODIFIED = datetime(2026, 10, 19, 8, 0, 0)
FOUR_HOURS = timedelta(hours=4)


# =============================================================================
# Expiration
# =============================================================================

@pytest.mark.parametrize("age, expected", [
    (timedelta(hours=1), False),
    (timedelta(hours=4), False),  # exactly at the boundary is still fresh
    (timedelta(hours=4, microseconds=1), True),
    (timedelta(hours=5), True),
    (timedelta(0), False),
    (timedelta(hours=-1), False),
])
def test_is_expired_compares_against_last_modified_plus_ttl(age, expected):
    now = LAST_MODIFIED + age
    assert is_expired(LAST_MODIFIED, now, FOUR_HOURS) is expected
    assert is_expired(LAST_MODIFIED, now, FOUR_HOURS) == (now > LAST_MODIFIED + FOUR_HOURS)


def test_zero_ttl_expires_immediately():
    assert is_expired(LAST_MODIFIED, LAST_MODIFIED + timedelta(seconds=1), timedelta(0))
    assert not is_expired(LAST_MODIFIED, LAST_MODIFIED, timedelta(0))


def test_default_cache_duration_is_four_hours():
    assert get_cache_duration() == FOUR_HOURS


# =============================================================================
# Naming
# =============================================================================

def test_cache_key_is_prefix_and_locale():
    assert CACHE_NAME == "sitemap-cache"
    assert cache_key_for("fr") == "sitemap-cache-fr"
    assert cache_key_for("en_US", prefix="custom") == "custom-en_US"


def test_cache_key_is_stable_and_distinct_per_locale():
    locales = ["en", "fr", "de", "en_US", "en_GB", "pt_BR"]
    keys = [cache_key_for(locale) for locale in locales]
    assert keys == [cache_key_for(locale) for locale in locales]
    assert len(set(keys)) == len(locales)


# =============================================================================
# Request coordination
# =============================================================================

@pytest.fixture
def context():
    return RenderContext(mode="live", locale="en", base_url="http://test")


def test_decision_is_read_back_within_the_request(context):
    coordinator = RequestCoordinator()
    coordinator.set_decision(context, True)
    assert coordinator.get_decision(context) is True


def test_decision_is_scoped_to_one_context(context):
    coordinator = RequestCoordinator()
    other = RenderContext(mode="live", locale="en", base_url="http://test")
    coordinator.set_decision(context, False)

    assert coordinator.get_decision(context) is False
    with pytest.raises(StateError):
        coordinator.get_decision(other)


def test_reading_before_setting_is_an_error(context):
    with pytest.raises(StateError):
        RequestCoordinator().get_decision(context)


def test_setting_twice_is_an_error(context):
    coordinator = RequestCoordinator()
    coordinator.set_decision(context, True)
    with pytest.raises(StateError):
        coordinator.set_decision(context, False)
    assert coordinator.get_decision(context) is True


def test_should_render_unless_stored_copy_is_fresh(context):
    coordinator = RequestCoordinator()
    assert coordinator.should_render(context)

    coordinator.set_decision(context, False)
    assert not coordinator.should_render(context)

    refreshing = RenderContext(mode="live", locale="en", base_url="http://test")
    coordinator.set_decision(refreshing, True)
    assert coordinator.should_render(refreshing)
