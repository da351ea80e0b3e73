"""Unit tests for reconciler wiring."""

import pytest
import respx

from templatesync.application.services import get_rate_limits, open_reconciler
from templatesync.core.config import Settings


@pytest.mark.asyncio
async def test_open_reconciler_applies_settings():
    settings = Settings(
        _env_file=None,
        api_key="SG.key",
        poll_interval_seconds=0.5,
        create_timeout_seconds=30,
        strict_delete=True,
        delete_retries=2,
    )

    async with open_reconciler(settings) as reconciler:
        assert reconciler.poll_interval == 0.5
        assert reconciler.create_timeout == 30
        assert reconciler.strict_delete is True
        assert reconciler.client.delete_retries == 2
        transport = reconciler.client.transport

    assert transport._client.is_closed is True


@pytest.mark.asyncio
async def test_open_reconciler_requires_api_key():
    with pytest.raises(ValueError, match="API key is required"):
        async with open_reconciler(Settings(_env_file=None)):
            pass


def test_rate_limits_are_shared_per_process():
    first = get_rate_limits(5.0, 5.0)

    assert get_rate_limits(5.0, 5.0) is first
    assert get_rate_limits(1.0, 5.0) is not first


@pytest.mark.asyncio
@respx.mock
async def test_open_reconciler_talks_to_configured_api():
    route = respx.get("https://api.sendgrid.test/v3/templates/d-1").respond(
        status_code=200,
        json={"id": "d-1", "name": "welcome", "versions": None},
    )
    settings = Settings(
        _env_file=None, api_key="SG.key", api_base_url="https://api.sendgrid.test/v3/"
    )

    async with open_reconciler(settings) as reconciler:
        state = await reconciler.read("d-1")

    assert state.name == "welcome"
    assert state.versions == []
    assert route.calls.last.request.headers["Authorization"] == "Bearer SG.key"
