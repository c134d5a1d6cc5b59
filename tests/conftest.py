from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from cambai_jobs.services.orchestration import JobOrchestrator
from cambai_jobs.services.transport import CambAIClient

BASE_URL = "https://client.camb.ai/apis"


class FakeCambAPI:
    """Scripted stand-in for the CambAI API behind an httpx.MockTransport.

    Each route holds a queue of responses; the last one keeps repeating once
    the queue is drained.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes[(method, "/apis" + path)] = list(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"detail": "not found"})
        scripted = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(scripted, Exception):
            raise scripted
        status_code = 200
        if isinstance(scripted, tuple):
            status_code, scripted = scripted
        if isinstance(scripted, bytes):
            return httpx.Response(status_code, content=scripted, headers={"content-type": "audio/flac"})
        return httpx.Response(status_code, json=scripted)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and request.url.path == "/apis" + path
        ]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content)


class FakeClock:
    """Monotonic clock that only moves when the poller sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_api() -> FakeCambAPI:
    return FakeCambAPI()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(fake_api: FakeCambAPI) -> CambAIClient:
    return CambAIClient(
        api_key="test-key",
        base_url=BASE_URL,
        transport=httpx.MockTransport(fake_api.handler),
    )


@pytest.fixture
def orchestrator(client: CambAIClient, fake_clock: FakeClock) -> JobOrchestrator:
    return JobOrchestrator(client, sleep=fake_clock.sleep, clock=fake_clock.time)
