"""Tests for evalcourt.providers.retry - opt-in retry around a judge provider."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import pytest

from evalcourt.providers.base import BaseJudgeProvider
from evalcourt.providers.retry import RetryingProvider, _is_transient


def _inner(*side_effect) -> AsyncMock:
    inner = AsyncMock(spec=BaseJudgeProvider)
    inner.call.side_effect = list(side_effect)
    inner.provider_name.return_value = "inner"
    return inner


def _status_error(attr: str, code) -> Exception:
    exc = Exception("http error")
    setattr(exc, attr, code)
    return exc


class TestIsTransient:
    """Test _is_transient detection logic."""

    def test_timeout_error_is_transient(self):
        assert _is_transient(TimeoutError("timed out")) is True

    def test_connection_error_is_transient(self):
        assert _is_transient(ConnectionError("refused")) is True

    def test_value_error_not_transient(self):
        assert _is_transient(ValueError("bad input")) is False

    @pytest.mark.parametrize("code", [429, 500, 502, 503])
    def test_retryable_status_codes(self, code):
        assert _is_transient(_status_error("status_code", code)) is True

    def test_status_attribute_is_checked(self):
        assert _is_transient(_status_error("status", 502)) is True

    @pytest.mark.parametrize("code", [400, 401, 404, 504])
    def test_other_status_codes_not_transient(self, code):
        assert _is_transient(_status_error("status_code", code)) is False

    def test_non_integer_status_ignored(self):
        assert _is_transient(_status_error("status", "busy")) is False


class TestRetryingProvider:
    @pytest.mark.asyncio
    async def test_success_makes_single_call(self):
        inner = _inner("YES\nfine")
        provider = RetryingProvider(inner, max_retries=3, base_delay=0.001)

        assert await provider.call("p", {}) == "YES\nfine"
        assert inner.call.await_count == 1
        assert provider.retries == 0

    @pytest.mark.asyncio
    async def test_retries_transient_failure(self, caplog):
        inner = _inner(ConnectionError("blip"), "YES\nfine")
        provider = RetryingProvider(inner, max_retries=2, base_delay=0.001)

        with caplog.at_level(logging.WARNING, logger="evalcourt.providers.retry"):
            assert await provider.call("p", {"model": "m"}) == "YES\nfine"

        assert inner.call.await_count == 2
        inner.call.assert_awaited_with("p", {"model": "m"})
        assert provider.retries == 1
        assert "retry 1/2" in caplog.text

    @pytest.mark.asyncio
    async def test_non_transient_raises_immediately(self):
        inner = _inner(ValueError("bad"))
        provider = RetryingProvider(inner, max_retries=3, base_delay=0.001)

        with pytest.raises(ValueError):
            await provider.call("p", {})
        assert inner.call.await_count == 1

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_last_error(self):
        inner = _inner(ConnectionError("down"), TimeoutError("slow"), ConnectionError("still down"))
        provider = RetryingProvider(inner, max_retries=2, base_delay=0.001)

        with pytest.raises(ConnectionError, match="still down"):
            await provider.call("p", {})
        assert inner.call.await_count == 3
        assert provider.retries == 2

    @pytest.mark.asyncio
    async def test_zero_retries_calls_once(self):
        inner = _inner(TimeoutError("slow"))
        provider = RetryingProvider(inner, max_retries=0)

        with pytest.raises(TimeoutError):
            await provider.call("p", {})
        assert inner.call.await_count == 1

    def test_backoff_is_capped(self):
        provider = RetryingProvider(_inner(), base_delay=1.0, max_delay=4.0)
        assert all(0 <= provider._backoff(attempt) <= 4.0 for attempt in range(10))

    def test_negative_max_retries_rejected(self):
        with pytest.raises(ValueError, match="max_retries"):
            RetryingProvider(_inner(), max_retries=-1)

    def test_provider_name_delegates(self):
        assert RetryingProvider(_inner()).provider_name() == "inner"
