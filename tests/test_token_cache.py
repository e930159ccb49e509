from __future__ import annotations

from booking_service.infrastructure.calendar.token_cache import AccessTokenCache


def test_empty_cache_has_no_token():
    assert AccessTokenCache().get(now=0.0) is None


def test_token_valid_until_expiry_minus_skew():
    cache = AccessTokenCache(skew_seconds=60)
    cache.store("abc", expires_in=3600, now=1000.0)

    assert cache.get(now=1000.0) == "abc"
    assert cache.get(now=4539.0) == "abc"
    assert cache.get(now=4540.0) is None


def test_clear_forgets_token():
    cache = AccessTokenCache()
    cache.store("abc", expires_in=3600, now=0.0)
    cache.clear()

    assert cache.get(now=1.0) is None
