"""
Unit tests for the resilient generation transport.
"""

import httpx
import pytest
import pytest_asyncio
from httpx import Request, Response

from qa_curator.core.errors import TransportError
from qa_curator.integrations.transport import ResilientTransport, is_retryable_status

URL = "http://backend.test/generate"


@pytest.fixture
def sleeps():
    """Recorded backoff waits."""
    return []


@pytest_asyncio.fixture
async def transport(sleeps):
    """Transport whose backoff records waits instead of sleeping."""

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    transport = ResilientTransport(timeout_seconds=5, max_attempts=3, sleep=fake_sleep)
    yield transport
    await transport.close()


def _response(status, body):
    return Response(status, json=body, request=Request("POST", URL))


class TestRetryClassification:
    """Tests for status code classification."""

    @pytest.mark.parametrize("status", [429, 500, 502, 503])
    def test_retryable(self, status):
        assert is_retryable_status(status) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
    def test_terminal(self, status):
        assert is_retryable_status(status) is False

    def test_rejects_zero_attempt_budget(self):
        with pytest.raises(ValueError):
            ResilientTransport(max_attempts=0)


class TestPostJson:
    """Tests for ResilientTransport.post_json."""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self, transport, sleeps, monkeypatch):
        calls = []

        async def mock_post(url, **kwargs):
            calls.append(kwargs)
            return _response(200, {"ok": True})

        monkeypatch.setattr(transport.client, "post", mock_post)

        response = await transport.post_json(URL, {"a": 1}, headers={"x-test": "1"})

        assert response.json() == {"ok": True}
        assert len(calls) == 1
        assert calls[0]["json"] == {"a": 1}
        assert calls[0]["headers"] == {"x-test": "1"}
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_server_errors_then_success(self, transport, sleeps, monkeypatch):
        """Two 503s then 200: three requests, backoff 1s then 2s."""
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                return _response(503, {"error": "unavailable"})
            return _response(200, {"ok": True})

        monkeypatch.setattr(transport.client, "post", mock_post)

        response = await transport.post_json(URL, {})

        assert response.status_code == 200
        assert call_count == 3
        assert sleeps == [1, 2]

    @pytest.mark.asyncio
    async def test_network_error_retried(self, transport, sleeps, monkeypatch):
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise httpx.ConnectError("connection refused")
            return _response(200, {"ok": True})

        monkeypatch.setattr(transport.client, "post", mock_post)

        response = await transport.post_json(URL, {})

        assert response.status_code == 200
        assert call_count == 2
        assert sleeps == [1]

    @pytest.mark.asyncio
    async def test_rate_limit_retried(self, transport, sleeps, monkeypatch):
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                return _response(429, {"error": "slow down"})
            return _response(200, {"ok": True})

        monkeypatch.setattr(transport.client, "post", mock_post)

        await transport.post_json(URL, {})

        assert call_count == 2

    @pytest.mark.asyncio
    async def test_forbidden_not_retried(self, transport, sleeps, monkeypatch):
        """403 fails immediately with one request and no backoff."""
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            return _response(403, {"error": "bad key"})

        monkeypatch.setattr(transport.client, "post", mock_post)

        with pytest.raises(TransportError) as exc_info:
            await transport.post_json(URL, {})

        assert call_count == 1
        assert sleeps == []
        assert exc_info.value.status_code == 403
        assert exc_info.value.retryable is False
        assert exc_info.value.attempts == 1

    @pytest.mark.asyncio
    async def test_all_retries_exhausted(self, transport, sleeps, monkeypatch):
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            return _response(500, {"error": "boom"})

        monkeypatch.setattr(transport.client, "post", mock_post)

        with pytest.raises(TransportError) as exc_info:
            await transport.post_json(URL, {})

        assert call_count == 3
        # No wait after the final attempt
        assert sleeps == [1, 2]
        assert exc_info.value.retryable is True
        assert exc_info.value.attempts == 3
        assert "after 3 attempts" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_attempt_budget_override(self, transport, sleeps, monkeypatch):
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            raise httpx.ReadTimeout("timed out")

        monkeypatch.setattr(transport.client, "post", mock_post)

        with pytest.raises(TransportError):
            await transport.post_json(URL, {}, max_attempts=1)

        assert call_count == 1
        assert sleeps == []
