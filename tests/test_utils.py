"""Tests for retry, cache key and logging helpers."""

import logging

import httpx
import pytest

from shelfwise.utils.cache import RedisCache, make_cache_key
from shelfwise.utils.logging import LogContext
from shelfwise.utils.retry import RetryConfig, retry_async


def _response(status: int, **headers: str) -> httpx.Response:
    return httpx.Response(status, headers=headers)


class TestRetryAsync:
    @pytest.mark.asyncio
    async def test_returns_first_success(self):
        calls = []

        async def op():
            calls.append(1)
            return _response(200)

        response = await retry_async(op, config=RetryConfig(base_delay=0))
        assert response.status_code == 200
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_retries_transport_error(self):
        calls = []

        async def op():
            calls.append(1)
            if len(calls) < 3:
                raise httpx.ReadError("reset")
            return _response(200)

        response = await retry_async(op, config=RetryConfig(max_retries=3, base_delay=0))
        assert response.status_code == 200
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_exhausted_transport_error_is_raised(self):
        calls = []

        async def op():
            calls.append(1)
            raise httpx.ConnectTimeout("slow")

        with pytest.raises(httpx.ConnectTimeout):
            await retry_async(op, config=RetryConfig(max_retries=2, base_delay=0))
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_exhausted_status_returns_last_response(self):
        statuses = iter([503, 502])

        async def op():
            return _response(next(statuses))

        response = await retry_async(op, config=RetryConfig(max_retries=1, base_delay=0))
        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        calls = []

        async def op():
            calls.append(1)
            return _response(404)

        response = await retry_async(op, config=RetryConfig(max_retries=3, base_delay=0))
        assert response.status_code == 404
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self):
        async def op():
            raise KeyError("nope")

        with pytest.raises(KeyError):
            await retry_async(op, config=RetryConfig(base_delay=0))

    @pytest.mark.asyncio
    async def test_waits_for_retry_after(self, monkeypatch):
        sleeps = []

        async def fake_sleep(delay):
            sleeps.append(delay)

        monkeypatch.setattr("shelfwise.utils.retry.asyncio.sleep", fake_sleep)
        responses = iter([_response(429, **{"Retry-After": "3"}), _response(200)])

        async def op():
            return next(responses)

        config = RetryConfig(max_retries=1, base_delay=0.5, max_delay=8.0)
        response = await retry_async(op, config=config)
        assert response.status_code == 200
        assert sleeps == [3.0]

    def test_backoff_is_capped(self):
        config = RetryConfig(base_delay=1.0, max_delay=5.0)
        assert config.backoff(0) == 1.0
        assert config.backoff(2) == 4.0
        assert config.backoff(10) == 5.0
        assert config.backoff(0, _response(429, **{"Retry-After": "120"})) == 5.0
        assert config.backoff(1, _response(503, **{"Retry-After": "soon"})) == 2.0


class TestCache:
    def test_cache_key(self):
        assert make_cache_key("googlebooks:search", "dune", page=2) == "googlebooks:search:dune:page=2"
        assert make_cache_key("ns", None, a=None) == "ns"

    def test_long_key_is_hashed(self):
        key = make_cache_key("googlebooks:search", "x" * 300)
        assert key.startswith("googlebooks:search:")
        assert len(key) < 50

    @pytest.mark.asyncio
    async def test_disconnected_cache_is_a_miss(self):
        cache = RedisCache()
        assert await cache.get("anything") is None
        assert await cache.set("anything", {"a": 1}) is False


class TestLogContext:
    def test_prefix(self, caplog):
        logger = logging.getLogger("shelfwise.test")
        log = LogContext(logger, user="u1", book=None).bind(catalog_id="vol-1")

        with caplog.at_level(logging.INFO, logger="shelfwise.test"):
            log.info("mirrored")

        assert "user=u1" in caplog.text
        assert "catalog_id=vol-1" in caplog.text
        assert "book=" not in caplog.text
        assert "mirrored" in caplog.text
