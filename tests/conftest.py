"""Shared fixtures: a fake HeyBeauty API served through httpx.MockTransport."""

import json
import logging
from collections.abc import Iterator
from typing import Any

import httpx
import pytest

from heybeauty_mcp.client import HeyBeautyClient
from heybeauty_mcp.server.config import ServerConfig
from heybeauty_mcp.server.mcp_server import TryOnMCPServer

BASE_URL = "https://api.test/api"
API_KEY = "test-key"

CLOTHES = [
    {
        "cloth_id": "c1",
        "title": "Red Dress",
        "description": "A red summer dress",
        "cloth_img_url": "https://img.test/c1.jpg",
        "extra_field": "ignored",
    },
    {
        "cloth_id": 42,
        "title": "Denim Jacket",
        "description": None,
        "cloth_img_url": "https://img.test/42.jpg",
    },
]

SUBMITTED_TASK = {
    "uuid": "abc123",
    "created_at": "2024-05-01T10:00:00Z",
    "updated_at": "2024-05-01T10:00:00Z",
    "status": "pending",
    "tryon_img_url": None,
}

FINISHED_TASK = {
    "uuid": "something-else",
    "created_at": "2024-05-01T10:00:00Z",
    "updated_at": "2024-05-01T10:00:30Z",
    "status": "succeeded",
    "tryon_img_url": "https://img.test/result.jpg",
}


def envelope(data: Any, code: int = 0, message: str = "ok") -> dict[str, Any]:
    return {"code": code, "message": message, "data": data}


class FakeHeyBeautyAPI:
    """Records requests and replays canned responses per path."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, dict[str, Any]] = {}
        self.respond("/get-clothes", envelope(CLOTHES))
        self.respond("/mcp-vton", envelope(SUBMITTED_TASK))
        self.respond("/get-task-info", envelope(FINISHED_TASK))

    def respond(
        self,
        path: str,
        payload: Any = None,
        status: int = 200,
        text: str | None = None,
    ) -> None:
        if text is not None:
            self.responses[path] = {"status_code": status, "text": text}
        else:
            self.responses[path] = {"status_code": status, "json": payload}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        if path not in self.responses:
            return httpx.Response(404, text="not found")
        return httpx.Response(**self.responses[path])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def bodies(self, path: str) -> list[dict[str, Any]]:
        return [
            json.loads(r.content) for r in self.requests if r.url.path == f"/api{path}"
        ]


@pytest.fixture
def fake_api() -> FakeHeyBeautyAPI:
    return FakeHeyBeautyAPI()


@pytest.fixture
def client(fake_api: FakeHeyBeautyAPI) -> HeyBeautyClient:
    return HeyBeautyClient(api_key=API_KEY, base_url=BASE_URL, transport=fake_api.transport)


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(api_key=API_KEY, api_base_url=BASE_URL)


@pytest.fixture
def used_keys() -> list[str]:
    """API keys the server built clients with, in call order."""
    return []


@pytest.fixture
def make_server(fake_api: FakeHeyBeautyAPI, used_keys: list[str]) -> Any:
    def _make(config: ServerConfig) -> TryOnMCPServer:
        def factory(api_key: str) -> HeyBeautyClient:
            used_keys.append(api_key)
            return HeyBeautyClient(
                api_key=api_key, base_url=config.api_base_url, transport=fake_api.transport
            )

        return TryOnMCPServer(config, client_factory=factory)

    return _make


@pytest.fixture
def mcp_server(make_server: Any, config: ServerConfig) -> TryOnMCPServer:
    return make_server(config)


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """Undo configure_logging's changes to the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
