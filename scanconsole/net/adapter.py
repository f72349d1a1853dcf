"""
scanconsole/net/adapter.py
The request pipeline for every call the console makes to the platform API.

This is the SINGLE choke point for outbound traffic. Each call goes through:

1. Augmentation: bearer token, workspace scope header, and for the worker
   log tail the no-cache / keep-alive hints, all read from live state at
   send time.
2. Classification: an envelope with code 401 clears the session, forces
   navigation to /login and rejects the call; a transport failure is
   announced and rejected; anything else reaches the caller untouched.

Endpoint wrappers (scanconsole.api) never talk to httpx directly.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional

import httpx

from scanconsole.base.config import ConsoleConfig, get_config
from scanconsole.base.notifier import Notifier
from scanconsole.errors import (
    AuthExpiredError,
    ErrorCode,
    ResultCode,
    TransportFailureError,
)
from scanconsole.routing.guard import LOGIN_PATH

logger = logging.getLogger(__name__)

AUTH_EXPIRED_MESSAGE = "Login expired, please sign in again"


class ConsoleHTTPClient:
    """
    Wraps httpx.AsyncClient and applies the session/workspace pipeline.

    Session and workspace registry are shared singletons that change under
    us, so they are reached through accessors on every call.
    """

    def __init__(
        self,
        session: Callable[[], Any],
        workspace: Callable[[], Any],
        navigator: Any,
        notifier: Notifier,
        config: Optional[ConsoleConfig] = None,
        underlying_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            session: Returns the SessionState
            workspace: Returns the WorkspaceRegistry
            navigator: Receives the forced push to /login on auth expiry
            notifier: Receives user-facing failure messages
            config: Defaults to the global config
            underlying_client: Pre-built httpx client (tests pass one with a
                MockTransport)
        """
        self._session = session
        self._workspace = workspace
        self.navigator = navigator
        self.notifier = notifier
        self.config = config or get_config()
        self._owns_client = underlying_client is None
        self.client = underlying_client or httpx.AsyncClient(
            base_url=self.config.api.base_url,
            timeout=self.config.api.timeout,
        )

    # ------------------------------------------------------------------
    # Augmentation
    # ------------------------------------------------------------------

    def is_stream_path(self, path: str) -> bool:
        pattern = self.config.api.stream_path_pattern
        return bool(pattern) and pattern in path

    def scope_header_value(self) -> str:
        """
        Workspace id for the scope header.

        An explicit selection wins ("all" maps to ""); before the user ever
        picks one, the home workspace from login is used.
        """
        registry = self._workspace()
        if registry.has_selection:
            return registry.effective_workspace_id
        return self._session().home_workspace_id or ""

    def build_headers(self, path: str, headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        merged: Dict[str, str] = dict(headers.items()) if headers else {}

        session = self._session()
        if session.is_authenticated:
            merged["Authorization"] = f"Bearer {session.token}"

        merged[self.config.api.workspace_header] = self.scope_header_value()

        if self.is_stream_path(path):
            merged["Cache-Control"] = "no-cache"
            merged["Connection"] = "keep-alive"
            merged.setdefault("Accept", "text/event-stream")
        return merged

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @staticmethod
    def _json_body(body: bytes) -> Any:
        if not body:
            return None
        try:
            return json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return None

    @staticmethod
    def is_unauthorized(payload: Any) -> bool:
        return isinstance(payload, dict) and payload.get("code") == ResultCode.UNAUTHORIZED

    @staticmethod
    def _is_envelope(payload: Any) -> bool:
        return isinstance(payload, dict) and "code" in payload

    def _expire_session(self, method: str, path: str) -> AuthExpiredError:
        logger.warning(f"[Pipeline] {method} {path} returned code 401, clearing session")
        self._session().logout()
        self.navigator.push(LOGIN_PATH, force=True)
        self.notifier.error(AUTH_EXPIRED_MESSAGE)
        return AuthExpiredError(details={"method": method, "path": path})

    def _transport_failure(
        self,
        exc: Exception,
        method: str,
        path: str,
        code: Optional[ErrorCode] = None,
        **details: Any,
    ) -> TransportFailureError:
        message = str(exc) or type(exc).__name__
        logger.error(f"[Pipeline] {method} {path} failed: {message}")
        self.notifier.error(message)
        if code is None:
            code = (
                ErrorCode.TRANSPORT_TIMEOUT
                if isinstance(exc, httpx.TimeoutException)
                else ErrorCode.TRANSPORT_FAILED
            )
        details.update(method=method, path=path)
        return TransportFailureError(message, original=exc, code=code, details=details)

    def _bad_status(self, response: httpx.Response, method: str, path: str) -> TransportFailureError:
        exc = httpx.HTTPStatusError(
            f"HTTP {response.status_code} for {method} {path}",
            request=response.request,
            response=response,
        )
        failure = self._transport_failure(
            exc, method, path,
            code=ErrorCode.TRANSPORT_BAD_STATUS,
            status_code=response.status_code,
        )
        failure.__cause__ = exc
        return failure

    def _classify(
        self,
        response: httpx.Response,
        method: str,
        path: str,
        classify_unauthorized: bool,
    ) -> Any:
        payload = self._json_body(response.content)

        if classify_unauthorized and self.is_unauthorized(payload):
            raise self._expire_session(method, path)

        if response.is_error and not self._is_envelope(payload):
            raise self._bad_status(response, method, path)

        return payload

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        kwargs["headers"] = self.build_headers(path, kwargs.get("headers"))
        # Injected clients carry their own default; the configured bound still applies
        kwargs.setdefault("timeout", self.config.api.timeout)
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise self._transport_failure(e, method, path) from e

    async def request(
        self,
        method: str,
        path: str,
        *,
        classify_unauthorized: bool = True,
        **kwargs: Any,
    ) -> Any:
        """
        Send one call through the pipeline.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            classify_unauthorized: False only for the credential exchange,
                where code 401 means "wrong password", not "session expired"
            **kwargs: Passed to httpx (json, params, headers, ...)

        Returns:
            The decoded JSON body (normally the {"code", "msg", ...}
            envelope), or the text of a non-JSON body

        Raises:
            AuthExpiredError: the server answered with code 401
            TransportFailureError: no usable response
        """
        method = method.upper()
        response = await self._send(method, path, **kwargs)
        payload = self._classify(response, method, path, classify_unauthorized)
        if payload is None:
            return response.text
        return payload

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def download(self, method: str, path: str, **kwargs: Any) -> bytes:
        """Like request() but hands back the raw body (file exports)."""
        method = method.upper()
        response = await self._send(method, path, **kwargs)
        self._classify(response, method, path, classify_unauthorized=True)
        return response.content

    async def stream_lines(self, method: str, path: str, **kwargs: Any) -> AsyncIterator[str]:
        """
        Iterate over the `data:` payloads of a server-sent event stream.

        Connecting is bounded by the configured timeout; reads are not, the
        server may stay quiet for as long as no worker logs anything.
        """
        method = method.upper()
        kwargs["headers"] = self.build_headers(path, kwargs.get("headers"))
        kwargs.setdefault("timeout", httpx.Timeout(self.config.api.timeout, read=None))
        try:
            async with self.client.stream(method, path, **kwargs) as response:
                content_type = response.headers.get("content-type", "")
                if response.is_error or "application/json" in content_type:
                    await response.aread()
                    payload = self._classify(response, method, path, classify_unauthorized=True)
                    if payload is not None:
                        yield payload if isinstance(payload, str) else json.dumps(payload)
                    return

                async for line in response.aiter_lines():
                    if line.startswith("data:"):
                        yield line[5:].lstrip()
        except httpx.TransportError as e:
            raise self._transport_failure(e, method, path) from e

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "ConsoleHTTPClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
