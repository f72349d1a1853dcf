"""
tests/integration/test_console_e2e.py
Full login -> scoped call -> forced logout cycle against an in-process
FastAPI server.
"""
import httpx
import pytest
from fastapi import FastAPI, Request

from scanconsole.app import Console
from scanconsole.base.config import ApiConfig, ConsoleConfig
from scanconsole.data.storage import LocalStorage
from scanconsole.errors import AuthExpiredError
from scanconsole.routing.guard import Allow, guard

BASE = "http://cscan.local/api/v1"


def build_server() -> FastAPI:
    app = FastAPI()
    app.state.valid_tokens = set()
    app.state.seen = []

    @app.post("/api/v1/login")
    async def login(request: Request):
        body = await request.json()
        if body.get("username") == "admin" and body.get("password") == "123456":
            app.state.valid_tokens.add("T1")
            return {
                "code": 0,
                "token": "T1",
                "userId": "u-admin",
                "username": "admin",
                "role": "superadmin",
                "workspaceId": "W0",
            }
        return {"code": 401, "msg": "wrong username or password"}

    @app.post("/api/v1/workspace/list")
    async def workspace_list(request: Request):
        app.state.seen.append(dict(request.headers))
        return {"code": 0, "total": 1, "list": [{"id": "W0", "name": "Default"}]}

    @app.post("/api/v1/asset/list")
    async def asset_list(request: Request):
        app.state.seen.append(dict(request.headers))
        token = request.headers.get("authorization", "").removeprefix("Bearer ")
        # Envelope code, HTTP 200, the way the platform reports expiry
        if token not in app.state.valid_tokens:
            return {"code": 401, "msg": "Token invalid or expired"}
        return {"code": 0, "total": 0, "list": []}

    return app


@pytest.mark.asyncio
async def test_login_scope_and_forced_logout():
    server = build_server()
    transport = httpx.ASGITransport(app=server)
    http = httpx.AsyncClient(transport=transport, base_url=BASE)
    store = LocalStorage()
    console = Console(
        config=ConsoleConfig(api=ApiConfig(base_url=BASE)),
        storage=store,
        http_client=http,
    )

    try:
        result = await console.session.login({"username": "admin", "password": "123456"})
        assert result.ok
        assert guard("/dashboard", console.session.is_authenticated) == Allow()
        assert console.navigator.push("/dashboard") == "/dashboard"

        payload = await console.client.post("/asset/list", json={"page": 1})
        assert payload["code"] == 0
        headers = server.state.seen[-1]
        assert headers["authorization"] == "Bearer T1"
        assert headers["x-workspace-id"] == "W0"

        await console.workspaces.refresh()
        assert console.workspaces.display_name() == "All workspaces"

        # Server revokes the token
        server.state.valid_tokens.clear()
        with pytest.raises(AuthExpiredError):
            await console.client.post("/asset/list", json={"page": 1})

        assert console.session.is_authenticated is False
        assert console.navigator.current == "/login"
        assert store.get_item("token") == ""
        assert console.navigator.push("/dashboard") == "/login"
    finally:
        await console.aclose()
        await http.aclose()
