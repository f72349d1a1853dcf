"""Pytest configuration for the scan console."""
import json
import os
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from scanconsole.app import Console
from scanconsole.base.config import ApiConfig, ConsoleConfig, set_config
from scanconsole.data.storage import LocalStorage

BASE_URL = "http://cscan.test/api/v1"
TOKEN = "tok-admin-1"

ADMIN_LOGIN = {
    "code": 0,
    "msg": "login ok",
    "token": TOKEN,
    "userId": "u-1",
    "username": "admin",
    "role": "superadmin",
    "workspaceId": "ws-default",
}


def pytest_configure():
    # Keep anything that falls back to get_config() away from the real home dir.
    os.environ.setdefault("SCANCONSOLE_DATA_DIR", "/tmp/scanconsole-tests")


def make_test_config() -> ConsoleConfig:
    return ConsoleConfig(api=ApiConfig(base_url=BASE_URL, timeout=5.0))


class FakeBackend:
    """
    In-process stand-in for the platform API, served through httpx.MockTransport.

    Tests override `routes[path]` to script specific responses.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.workspaces: List[Dict[str, Any]] = [
            {"id": "ws-default", "name": "Default workspace"},
            {"id": "ws-red", "name": "Red team"},
        ]
        self.routes: Dict[str, Callable[[httpx.Request], Any]] = {
            "/login": self._login,
            "/workspace/list": self._workspace_list,
        }

    def path_of(self, request: httpx.Request) -> str:
        path = request.url.path
        prefix = "/api/v1"
        return path[len(prefix):] if path.startswith(prefix) else path

    def last(self, path: Optional[str] = None) -> httpx.Request:
        matching = [r for r in self.requests if path is None or self.path_of(r) == path]
        assert matching, f"no request recorded for {path}"
        return matching[-1]

    def count(self, path: str) -> int:
        return sum(1 for r in self.requests if self.path_of(r) == path)

    def _login(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        if body.get("username") == "admin" and body.get("password") == "123456":
            return httpx.Response(200, json=ADMIN_LOGIN)
        return httpx.Response(200, json={"code": 401, "msg": "wrong username or password"})

    def _workspace_list(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"code": 0, "total": len(self.workspaces), "list": self.workspaces}
        )

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        handler = self.routes.get(self.path_of(request))
        if handler is not None:
            return handler(request)
        if request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return httpx.Response(401, json={"code": 401, "msg": "Token invalid or expired"})
        return httpx.Response(200, json={"code": 0, "msg": "success", "data": {}})


@pytest.fixture(autouse=True)
def _isolated_config():
    set_config(make_test_config())
    yield
    set_config(None)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def storage():
    store = LocalStorage()
    yield store
    store.close()


@pytest_asyncio.fixture
async def make_console(storage):
    """Build a Console wired to a mock transport; handler defaults to FakeBackend."""
    clients: List[httpx.AsyncClient] = []

    def _make(handler: Callable[[httpx.Request], Any], store: Optional[LocalStorage] = None) -> Console:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
        clients.append(client)
        return Console(config=make_test_config(), storage=store or storage, http_client=client)

    yield _make
    for client in clients:
        await client.aclose()


@pytest_asyncio.fixture
async def console(make_console, backend) -> Console:
    return make_console(backend)


@pytest_asyncio.fixture
async def logged_in(console) -> Console:
    result = await console.session.login({"username": "admin", "password": "123456"})
    assert result.ok
    return console
