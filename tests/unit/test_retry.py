"""Tests for retry utilities."""

import httpx
import pytest

from jira_helper.utils.retry import is_transient_http_error, run_with_retry


def _status_error(status: int, headers: dict | None = None) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://jira.example.com/rest/api/2/myself")
    response = httpx.Response(status, request=request, headers=headers)
    return httpx.HTTPStatusError(f"status {status}", request=request, response=response)


@pytest.mark.parametrize("status", [429, 502, 503, 504])
def test_transient_statuses(status):
    assert is_transient_http_error(_status_error(status))


@pytest.mark.parametrize("status", [400, 401, 403, 404, 500])
def test_permanent_statuses(status):
    assert not is_transient_http_error(_status_error(status))


def test_network_errors_are_transient():
    request = httpx.Request("GET", "https://jira.example.com")
    assert is_transient_http_error(httpx.ConnectError("refused", request=request))
    assert is_transient_http_error(httpx.ReadTimeout("slow", request=request))


def test_other_exceptions_are_not_transient():
    assert not is_transient_http_error(ValueError("bad"))


@pytest.mark.asyncio
async def test_run_with_retry_succeeds_after_transient_failures():
    attempts = []

    async def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise _status_error(503)
        return "done"

    assert await run_with_retry(flaky, max_retries=3, initial_delay=0.001) == "done"
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_run_with_retry_raises_permanent_error_immediately():
    attempts = []

    async def broken():
        attempts.append(1)
        raise _status_error(404)

    with pytest.raises(httpx.HTTPStatusError):
        await run_with_retry(broken, max_retries=5, initial_delay=0.001)
    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_run_with_retry_honours_retry_after(monkeypatch):
    waits = []

    async def fake_sleep(seconds):
        waits.append(seconds)

    monkeypatch.setattr("jira_helper.utils.retry.asyncio.sleep", fake_sleep)
    attempts = []

    async def rate_limited():
        attempts.append(1)
        if len(attempts) == 1:
            raise _status_error(429, headers={"Retry-After": "7"})
        if len(attempts) == 2:
            raise _status_error(503)
        return "done"

    await run_with_retry(rate_limited, max_retries=3, initial_delay=0.5, backoff_factor=2.0)

    assert waits == [7.0, 1.0]
