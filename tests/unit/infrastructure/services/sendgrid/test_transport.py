"""Unit tests for the SendGrid HTTP transport."""

import time

import httpx
import pytest

from templatesync.core.exceptions import RateLimitedError, TransportError, UnexpectedStatusError
from templatesync.infrastructure.ratelimit import RateLimiter
from templatesync.infrastructure.services.sendgrid import SendGridTransport


@pytest.mark.asyncio
async def test_sends_bearer_token_and_json(transport, fake_api):
    response = await transport.request(
        "POST", "/templates", json={"name": "welcome"}, expected_statuses=(201,)
    )

    assert response.status_code == 201
    request = fake_api.requests[-1]
    assert request.headers["Authorization"] == "Bearer SG.test-key"
    assert str(request.url) == "https://api.sendgrid.test/v3/templates"
    assert fake_api.calls == [("POST", "/templates", {"name": "welcome"})]


@pytest.mark.asyncio
async def test_unexpected_status_raises(transport, fake_api):
    fake_api.script("GET", "/templates/t1", httpx.Response(500, text="server exploded"))

    with pytest.raises(UnexpectedStatusError) as exc_info:
        await transport.request("GET", "/templates/t1", expected_statuses=(200, 404))

    assert exc_info.value.status_code == 500
    assert "server exploded" in str(exc_info.value)


@pytest.mark.asyncio
async def test_accepts_any_expected_status(transport):
    response = await transport.request("GET", "/templates/missing", expected_statuses=(200, 404))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_rate_limited_call_is_retried(transport, fake_api, clock):
    fake_api.script(
        "POST",
        "/templates",
        httpx.Response(429, headers={"Retry-After": "3"}),
        httpx.Response(429, headers={"Retry-After": "3"}),
    )

    response = await transport.request(
        "POST", "/templates", json={"name": "welcome"}, expected_statuses=(201,), retries=5
    )

    assert response.status_code == 201
    assert len(fake_api.calls_to("POST", "/templates")) == 3
    assert clock.sleeps == [3.0, 3.0]


@pytest.mark.asyncio
async def test_rate_limit_exhausts_retry_budget(transport, fake_api):
    fake_api.script("DELETE", "/templates/t1", *[httpx.Response(429) for _ in range(2)])

    with pytest.raises(RateLimitedError) as exc_info:
        await transport.request("DELETE", "/templates/t1", expected_statuses=(204,), retries=2)

    assert exc_info.value.retry_after == 1.0
    assert len(fake_api.calls_to("DELETE")) == 2


@pytest.mark.asyncio
async def test_single_attempt_raises_rate_limit_immediately(transport, fake_api, clock):
    fake_api.script("GET", "/templates/t1", httpx.Response(429, headers={"Retry-After": "7"}))

    with pytest.raises(RateLimitedError) as exc_info:
        await transport.request("GET", "/templates/t1")

    assert exc_info.value.retry_after == 7.0
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_rate_limit_reset_header_is_epoch(transport, fake_api):
    reset = str(int(time.time()) + 30)
    fake_api.script("GET", "/templates/t1", httpx.Response(429, headers={"X-RateLimit-Reset": reset}))

    with pytest.raises(RateLimitedError) as exc_info:
        await transport.request("GET", "/templates/t1")

    assert 25.0 < exc_info.value.retry_after <= 30.0


@pytest.mark.asyncio
async def test_acquires_rate_limiter_before_each_attempt(transport, fake_api, clock):
    limiter = RateLimiter(5.0, clock=clock.monotonic, sleep=clock.sleep)
    fake_api.script("POST", "/templates", httpx.Response(429, headers={"Retry-After": "0"}))

    await transport.request(
        "POST",
        "/templates",
        json={"name": "welcome"},
        expected_statuses=(201,),
        rate_limiter=limiter,
        retries=2,
    )

    # One wait for the retry-after, one for the second token
    assert clock.sleeps == [0.0, pytest.approx(5.0)]


@pytest.mark.asyncio
async def test_network_errors_become_transport_errors(clock):
    def explode(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(explode)) as client:
        transport = SendGridTransport("SG.key", "https://api.test/v3", client=client, sleep=clock.sleep)

        with pytest.raises(TransportError, match="connection refused"):
            await transport.request("GET", "/templates/t1")


@pytest.mark.asyncio
async def test_closes_only_owned_client(http_client):
    transport = SendGridTransport("SG.key", client=http_client)
    await transport.aclose()
    assert http_client.is_closed is False

    async with SendGridTransport("SG.key") as owned:
        pass
    assert owned._client.is_closed is True
