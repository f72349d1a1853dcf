"""
scanconsole/routing/guard.py
Route table and the navigation guard.

guard() is consulted before every view transition. It is a pure function of
the destination's metadata and whether the session is authenticated: no I/O,
no state changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

LOGIN_PATH = "/login"
DEFAULT_PATH = "/dashboard"


@dataclass(frozen=True)
class RouteMeta:
    requires_auth: bool = True
    title: str = ""
    icon: str = ""
    hidden: bool = False
    # Empty means every role may see the route
    roles: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Route:
    path: str
    name: str
    meta: RouteMeta = field(default_factory=RouteMeta)
    redirect: Optional[str] = None


ROUTES: Tuple[Route, ...] = (
    Route(LOGIN_PATH, "Login", RouteMeta(requires_auth=False, hidden=True)),
    Route("/", "Root", RouteMeta(hidden=True), redirect=DEFAULT_PATH),
    Route("/dashboard", "Dashboard", RouteMeta(title="Dashboard", icon="Odometer")),
    Route("/asset", "Asset", RouteMeta(title="Assets", icon="Monitor")),
    Route("/task", "Task", RouteMeta(title="Tasks", icon="List")),
    Route("/vul", "Vul", RouteMeta(title="Vulnerabilities", icon="Warning")),
    Route("/online-search", "OnlineSearch", RouteMeta(title="Online search", icon="Search")),
    Route("/workspace", "Workspace", RouteMeta(title="Workspaces", icon="Folder")),
    Route("/worker", "Worker", RouteMeta(title="Workers", icon="Connection")),
    Route("/poc", "Poc", RouteMeta(title="POCs", icon="Aim")),
    Route("/fingerprint", "Fingerprint", RouteMeta(title="Fingerprints", icon="Stamp")),
    Route("/report", "Report", RouteMeta(title="Scan report", icon="Document", hidden=True)),
    Route("/user", "User", RouteMeta(title="Users", icon="User", roles=("superadmin",))),
)


def normalize_path(path: str) -> str:
    path = (path or "/").split("?", 1)[0].split("#", 1)[0]
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def resolve(path: str) -> Optional[Route]:
    target = normalize_path(path)
    for route in ROUTES:
        if route.path == target:
            return route
    return None


# ============================================================================
# Decisions
# ============================================================================

@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Redirect:
    target: str


NavigationDecision = Union[Allow, Redirect]


def guard(destination: Union[Route, RouteMeta, str], is_authenticated: bool) -> NavigationDecision:
    """
    Decide whether a navigation may proceed.

    Args:
        destination: A Route, bare RouteMeta, or a path; unknown paths
            require authentication
        is_authenticated: Current Session.is_authenticated

    Returns:
        Allow(), or Redirect(target) to the login boundary / default view
    """
    if isinstance(destination, RouteMeta):
        # No path: only the auth requirement applies
        if destination.requires_auth and not is_authenticated:
            return Redirect(LOGIN_PATH)
        return Allow()

    if isinstance(destination, Route):
        route: Optional[Route] = destination
        path = destination.path
    else:
        path = normalize_path(destination)
        route = resolve(path)

    requires_auth = route.meta.requires_auth if route is not None else True

    if requires_auth and not is_authenticated:
        return Redirect(LOGIN_PATH)
    if path == LOGIN_PATH and is_authenticated:
        return Redirect(DEFAULT_PATH)
    return Allow()


def menu_routes(role: str, routes: Sequence[Route] = ROUTES) -> Tuple[Route, ...]:
    """Views to offer in the menu for a role: visible ones the role may open."""
    return tuple(
        r for r in routes
        if not r.meta.hidden and (not r.meta.roles or role in r.meta.roles)
    )
