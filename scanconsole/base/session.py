"""Module session: the logged-in identity and its bearer token."""
#
# PURPOSE:
# Holds who is signed in to the console: the opaque token the server issued,
# the user's id, name and role, and the workspace the account was assigned
# at login time.
#
# KEY CONCEPTS:
# - The token is the source of truth: non-empty means authenticated
# - Identity fields are always written and cleared together with the token
# - Every change is mirrored to LocalStorage before the call returns, so a
#   restarted console picks up exactly where the last one stopped
#

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from scanconsole.api import auth as auth_api
from scanconsole.api.models import LoginCredentials, LoginResult
from scanconsole.data.storage import LocalStorage
from scanconsole.errors import ResultCode
from scanconsole.utils.observer import Signal

logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = "superadmin"
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from server"

# Persisted key -> attribute name
STORAGE_KEYS = {
    "token": "token",
    "userId": "user_id",
    "username": "username",
    "role": "role",
    "workspaceId": "home_workspace_id",
}


class SessionState:
    """
    Authentication state shared by the whole console.

    Construct once per process; the request pipeline and the route guard
    read it through accessors, they never copy it.
    """

    def __init__(
        self,
        storage: LocalStorage,
        client_provider: Optional[Callable[[], Any]] = None,
    ):
        """
        Args:
            storage: Durable store the fields are loaded from and mirrored to
            client_provider: Returns the request pipeline; looked up lazily at
                login time because the pipeline itself reads this session
        """
        self.storage = storage
        self._client_provider = client_provider
        self.changed = Signal()

        self.token = ""
        self.user_id = ""
        self.username = ""
        self.role = ""
        self.home_workspace_id = ""
        self._load()

    def _load(self) -> None:
        for key, attr in STORAGE_KEYS.items():
            setattr(self, attr, self.storage.get_item(key))

    def bind_client(self, client_provider: Callable[[], Any]) -> None:
        self._client_provider = client_provider

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_super_admin(self) -> bool:
        return self.role == SUPER_ADMIN_ROLE

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def login(self, credentials: Union[LoginCredentials, Mapping[str, Any]]) -> LoginResult:
        """
        Exchange credentials for a token.

        A rejected login (wrong password, disabled user) is a normal result:
        the session is left as it was and the result is handed back for
        display. Transport failures still raise.

        Args:
            credentials: LoginCredentials or a {"username", "password"} mapping

        Returns:
            The parsed login response
        """
        if self._client_provider is None:
            raise RuntimeError("SessionState has no request client bound")

        if isinstance(credentials, LoginCredentials):
            payload = credentials.model_dump()
        else:
            payload = dict(credentials)

        raw = await auth_api.login(self._client_provider(), payload)
        try:
            result = LoginResult.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"[Session] Unreadable login response: {e.error_count()} error(s)")
            result = LoginResult(code=ResultCode.SERVER_ERROR, msg=UNEXPECTED_RESPONSE_MESSAGE)

        if result.ok:
            self._apply(
                token=result.token,
                user_id=result.user_id,
                username=result.username,
                role=result.role,
                home_workspace_id=result.workspace_id,
            )
            logger.info(f"[Session] Logged in as {result.username} (role={result.role})")
        else:
            logger.info(f"[Session] Login rejected with code {result.code}: {result.msg}")
        return result

    def _apply(self, **fields: str) -> None:
        for key, attr in STORAGE_KEYS.items():
            value = fields.get(attr, "") or ""
            setattr(self, attr, value)
            self.storage.set_item(key, value)
        self.changed.emit(self)

    def logout(self) -> None:
        """
        Clear every field and its persisted copy.

        Safe to call repeatedly and from either an explicit sign-out or the
        pipeline's forced logout; the second call is a no-op.
        """
        was_authenticated = self.is_authenticated
        for key, attr in STORAGE_KEYS.items():
            setattr(self, attr, "")
            self.storage.remove_item(key)
        if was_authenticated:
            logger.info("[Session] Logged out")
            self.changed.emit(self)

    def set_home_workspace(self, workspace_id: str) -> None:
        self.home_workspace_id = workspace_id or ""
        self.storage.set_item("workspaceId", self.home_workspace_id)

    def reset(self) -> None:
        """Test hook: reload from storage, dropping subscribers."""
        self.changed = Signal()
        self._load()

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "role": self.role,
            "home_workspace_id": self.home_workspace_id,
            "authenticated": self.is_authenticated,
        }
