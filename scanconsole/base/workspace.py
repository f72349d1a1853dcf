"""Module workspace: known workspaces and the current workspace selection."""
#
# PURPOSE:
# A workspace is the tenant boundary for scan data. The console keeps the
# list the server last reported and the user's selection, which is either a
# specific workspace or "all workspaces" (no tenant filter).
#
# KEY CONCEPTS:
# - WorkspaceScope: SpecificWorkspace(id) | AllWorkspaces, stored on disk as
#   the id or the literal "all"
# - effective_workspace_id: what goes in the scope header ("" = no filter)
# - refresh(): one fetch at a time; a concurrent call returns immediately
# - Reconciliation: a selection the server no longer reports falls back to
#   AllWorkspaces
#

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

from pydantic import ValidationError

from scanconsole.api import workspace as workspace_api
from scanconsole.api.models import Workspace, WorkspaceListResult
from scanconsole.base.config import get_config
from scanconsole.data.storage import LocalStorage
from scanconsole.errors import ResultCode, describe
from scanconsole.utils.observer import Signal

logger = logging.getLogger(__name__)

ALL_WORKSPACES = "all"
ALL_WORKSPACES_LABEL = "All workspaces"
CURRENT_WORKSPACE_KEY = "currentWorkspaceId"


# ============================================================================
# Selection sum type
# ============================================================================

class WorkspaceScope:
    """Base of the two selection variants."""

    def to_wire(self) -> str:
        raise NotImplementedError

    def to_storage(self) -> str:
        raise NotImplementedError

    @staticmethod
    def parse(raw: Optional[str]) -> Optional["WorkspaceScope"]:
        """
        Read a persisted selection.

        "" / None -> None (never selected), "all" -> AllWorkspaces,
        anything else -> SpecificWorkspace.
        """
        if not raw:
            return None
        if raw == ALL_WORKSPACES:
            return AllWorkspaces()
        return SpecificWorkspace(raw)


@dataclass(frozen=True)
class SpecificWorkspace(WorkspaceScope):
    id: str

    def to_wire(self) -> str:
        return self.id

    def to_storage(self) -> str:
        return self.id


@dataclass(frozen=True)
class AllWorkspaces(WorkspaceScope):

    def to_wire(self) -> str:
        return ""

    def to_storage(self) -> str:
        return ALL_WORKSPACES


def scope_to_wire(scope: Optional[WorkspaceScope]) -> str:
    """The single conversion from a selection to the scope header value."""
    if scope is None:
        return ""
    return scope.to_wire()


# ============================================================================
# Registry
# ============================================================================

class WorkspaceRegistry:
    """
    Workspace list plus selection, shared by the whole console.
    """

    def __init__(
        self,
        storage: LocalStorage,
        client_provider: Optional[Callable[[], Any]] = None,
        page_size: Optional[int] = None,
    ):
        self.storage = storage
        self._client_provider = client_provider
        self.page_size = page_size or get_config().api.workspace_page_size
        self.changed = Signal()

        self.workspaces: List[Workspace] = []
        self.current: Optional[WorkspaceScope] = WorkspaceScope.parse(
            storage.get_item(CURRENT_WORKSPACE_KEY)
        )
        # In-flight flag for refresh()
        self.loading = False
        self.fetch_count = 0

    def bind_client(self, client_provider: Callable[[], Any]) -> None:
        self._client_provider = client_provider

    @property
    def current_workspace_id(self) -> str:
        """The selection as persisted: an id, "all", or "" when never selected."""
        return self.current.to_storage() if self.current is not None else ""

    @property
    def has_selection(self) -> bool:
        return self.current is not None

    @property
    def effective_workspace_id(self) -> str:
        return scope_to_wire(self.current)

    def find(self, workspace_id: str) -> Optional[Workspace]:
        for ws in self.workspaces:
            if ws.id == workspace_id:
                return ws
        return None

    def display_name(self) -> str:
        if not isinstance(self.current, SpecificWorkspace):
            return ALL_WORKSPACES_LABEL
        ws = self.find(self.current.id)
        return ws.name if ws is not None else ALL_WORKSPACES_LABEL

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def select(self, workspace: Union[str, WorkspaceScope, None]) -> WorkspaceScope:
        """
        Make a workspace current and persist it.

        Empty input means AllWorkspaces.
        """
        if isinstance(workspace, WorkspaceScope):
            scope = workspace
        elif not workspace or workspace == ALL_WORKSPACES:
            scope = AllWorkspaces()
        else:
            scope = SpecificWorkspace(workspace)

        self._set_current(scope)
        logger.info(f"[Workspace] Selected {scope.to_storage()}")
        return scope

    def _set_current(self, scope: WorkspaceScope) -> None:
        self.current = scope
        self.storage.set_item(CURRENT_WORKSPACE_KEY, scope.to_storage())
        self.changed.emit(self)

    async def refresh(self) -> Optional[WorkspaceListResult]:
        """
        Reload the workspace list from the server.

        Returns immediately with None, without fetching, while another
        refresh is outstanding. Otherwise returns the parsed list response;
        on a non-zero code (or an unreadable body) the previous list is kept
        and the failed result is handed back. Transport and auth errors
        propagate after the in-flight flag is cleared.
        """
        if self.loading:
            logger.debug("[Workspace] Refresh already in flight, skipping")
            return None
        if self._client_provider is None:
            raise RuntimeError("WorkspaceRegistry has no request client bound")

        self.loading = True
        try:
            self.fetch_count += 1
            raw = await workspace_api.list_workspaces(
                self._client_provider(), page=1, page_size=self.page_size
            )
            try:
                result = WorkspaceListResult.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"[Workspace] Unreadable list response: {e.error_count()} error(s)")
                return WorkspaceListResult(
                    code=ResultCode.SERVER_ERROR, msg=describe(ResultCode.SERVER_ERROR)
                )
            if not result.ok:
                logger.warning(
                    f"[Workspace] List failed with code {result.code}: {result.msg}"
                )
                return result

            self.workspaces = list(result.items)
            self._reconcile()
            self.changed.emit(self)
            return result
        finally:
            self.loading = False

    def _reconcile(self) -> None:
        if isinstance(self.current, SpecificWorkspace) and self.find(self.current.id) is None:
            logger.info(
                f"[Workspace] Selected workspace {self.current.id} no longer exists, "
                f"falling back to {ALL_WORKSPACES}"
            )
            self.current = AllWorkspaces()
            self.storage.set_item(CURRENT_WORKSPACE_KEY, ALL_WORKSPACES)

    def reset(self) -> None:
        """Test hook: forget the list and reload the selection from storage."""
        self.workspaces = []
        self.loading = False
        self.fetch_count = 0
        self.changed = Signal()
        self.current = WorkspaceScope.parse(self.storage.get_item(CURRENT_WORKSPACE_KEY))
