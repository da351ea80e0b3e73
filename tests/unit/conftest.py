"""Pytest configuration for unit tests.

Provides an in-memory SendGrid template API served through
httpx.MockTransport, and a fake clock so polling and rate limiting run
without real sleeps.
"""

import itertools
import json
from typing import Any, AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from templatesync.application.services import TemplateReconciler
from templatesync.infrastructure.ratelimit import RateLimits
from templatesync.infrastructure.services.sendgrid import SendGridTransport, TemplateApiClient

BASE_URL = "https://api.sendgrid.test/v3"


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeSendGridApi:
    """In-memory stand-in for the /templates endpoints.

    Attributes:
        templates: Stored templates keyed by ID.
        calls: Every request as (method, path, json body).
        requests: Every raw httpx request.
    """

    def __init__(self) -> None:
        self.templates: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.requests: list[httpx.Request] = []
        self._scripted: list[tuple[str, str, httpx.Response]] = []
        self._template_ids = itertools.count(1)
        self._version_ids = itertools.count(1)

    def script(self, method: str, path: str, *responses: httpx.Response) -> None:
        """Answer the next matching requests with the given responses, in order."""
        for response in responses:
            self._scripted.append((method, path, response))

    def calls_to(self, method: str, path: str | None = None) -> list[tuple[str, str, Any]]:
        return [
            call
            for call in self.calls
            if call[0] == method and (path is None or call[1] == path)
        ]

    def add_template(self, name: str, versions: list[dict[str, Any]] | None = None) -> str:
        template_id = f"tmpl-{next(self._template_ids)}"
        self.templates[template_id] = {"id": template_id, "name": name, "versions": []}
        for version in versions or []:
            self._store_version(template_id, version)
        return template_id

    def _store_version(self, template_id: str, body: dict[str, Any]) -> dict[str, Any]:
        version = {
            "id": f"ver-{next(self._version_ids)}",
            "template_id": template_id,
            "name": body["name"],
            "subject": body["subject"],
            "html_content": body.get("html_content", ""),
            "plain_content": body.get("plain_content", ""),
            "active": body.get("active", 0),
            "editor": "code",
            "generate_plain_content": False,
            "thumbnail_url": None,
        }
        self.templates[template_id]["versions"].append(version)
        return version

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path.removeprefix("/v3")
        body = json.loads(request.content) if request.content else None
        self.calls.append((method, path, body))
        self.requests.append(request)

        for index, (s_method, s_path, response) in enumerate(self._scripted):
            if s_method == method and s_path == path:
                del self._scripted[index]
                return response

        parts = path.strip("/").split("/")

        if parts == ["templates"] and method == "POST":
            template_id = self.add_template(body["name"])
            return httpx.Response(201, json=self.templates[template_id])

        template = self.templates.get(parts[1]) if len(parts) > 1 else None
        if template is None:
            return httpx.Response(404, json={"errors": [{"message": "Not found"}]})

        if len(parts) == 2:
            if method == "GET":
                return httpx.Response(200, json=template)
            if method == "PATCH":
                template["name"] = body["name"]
                return httpx.Response(200, json=template)
            if method == "DELETE":
                del self.templates[parts[1]]
                return httpx.Response(204)

        if len(parts) == 3 and parts[2] == "versions" and method == "POST":
            return httpx.Response(201, json=self._store_version(parts[1], body))

        if len(parts) == 4 and parts[2] == "versions" and method == "PATCH":
            for version in template["versions"]:
                if version["id"] == parts[3]:
                    version.update({k: v for k, v in body.items() if k != "template_id"})
                    return httpx.Response(200, json=version)
            return httpx.Response(404, json={"errors": [{"message": "Not found"}]})

        return httpx.Response(405)


@pytest.fixture
def fake_api() -> FakeSendGridApi:
    return FakeSendGridApi()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def http_client(fake_api: FakeSendGridApi) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler)) as client:
        yield client


@pytest.fixture
def transport(http_client: httpx.AsyncClient, clock: FakeClock) -> SendGridTransport:
    return SendGridTransport(
        "SG.test-key",
        BASE_URL,
        client=http_client,
        default_retry_after=1.0,
        sleep=clock.sleep,
    )


@pytest.fixture
def api_client(transport: SendGridTransport) -> TemplateApiClient:
    return TemplateApiClient(transport, RateLimits.unlimited())


@pytest.fixture
def reconciler(api_client: TemplateApiClient, clock: FakeClock) -> TemplateReconciler:
    return TemplateReconciler(
        api_client,
        poll_interval=1.0,
        create_timeout=60.0,
        continuous_target_occurrence=3,
        clock=clock.monotonic,
        sleep=clock.sleep,
    )
