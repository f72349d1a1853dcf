from __future__ import annotations

import logging
from typing import Optional

import httpx

from scanconsole.base.config import ConsoleConfig, get_config
from scanconsole.base.notifier import Notifier
from scanconsole.base.session import SessionState
from scanconsole.base.workspace import WorkspaceRegistry
from scanconsole.data.storage import LocalStorage
from scanconsole.net.adapter import ConsoleHTTPClient
from scanconsole.routing.guard import LOGIN_PATH
from scanconsole.routing.navigator import Navigator

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class ThemePreference:
    """Dark/light preference; dark until the user says otherwise."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        stored = storage.get_item(THEME_KEY)
        self.is_dark = stored == "dark" or not stored

    def set(self, dark: bool) -> None:
        self.is_dark = bool(dark)
        self.storage.set_item(THEME_KEY, "dark" if self.is_dark else "light")

    def toggle(self) -> bool:
        self.set(not self.is_dark)
        return self.is_dark


class Console:
    """
    Owns every piece of client state for one process.

    Session and workspace registry need the request client to fetch, and
    the client reads both on every call; the cycle is broken by handing the
    state objects a provider they call lazily.
    """

    _instance: Optional["Console"] = None

    @classmethod
    def instance(cls) -> "Console":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def __init__(
        self,
        config: Optional[ConsoleConfig] = None,
        storage: Optional[LocalStorage] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_config()
        if storage is None:
            self.config.storage.ensure_dirs()
            storage = LocalStorage(self.config.storage.state_path)
        self.storage = storage

        self.notifier = Notifier()
        self.session = SessionState(self.storage, client_provider=self._get_client)
        self.workspaces = WorkspaceRegistry(
            self.storage,
            client_provider=self._get_client,
            page_size=self.config.api.workspace_page_size,
        )
        self.theme = ThemePreference(self.storage)
        self.navigator = Navigator(
            lambda: self.session.is_authenticated,
            initial="/" if self.session.is_authenticated else LOGIN_PATH,
        )
        self.client = ConsoleHTTPClient(
            session=lambda: self.session,
            workspace=lambda: self.workspaces,
            navigator=self.navigator,
            notifier=self.notifier,
            config=self.config,
            underlying_client=http_client,
        )
        logger.debug(f"[Console] Initialised with state at {self.storage.path}")

    def _get_client(self) -> ConsoleHTTPClient:
        return self.client

    async def aclose(self) -> None:
        await self.client.aclose()
        self.storage.close()

    async def __aenter__(self) -> "Console":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def get_console() -> Console:
    return Console.instance()


def set_console(console: Optional[Console]) -> None:
    Console._instance = console


def reset_console() -> None:
    """Test hook: drop the process-wide console and close its store."""
    console = Console._instance
    Console._instance = None
    if console is not None:
        console.storage.close()
