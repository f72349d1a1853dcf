"""
tests/unit/test_route_guard.py
Navigation guard decisions, menu filtering and the Navigator.
"""
import pytest

from scanconsole.routing.guard import (
    DEFAULT_PATH,
    LOGIN_PATH,
    ROUTES,
    Allow,
    Redirect,
    RouteMeta,
    guard,
    menu_routes,
    normalize_path,
    resolve,
)
from scanconsole.routing.navigator import Navigator


@pytest.mark.parametrize(
    "path, authenticated, expected",
    [
        ("/dashboard", False, Redirect(LOGIN_PATH)),
        ("/dashboard", True, Allow()),
        ("/login", False, Allow()),
        ("/login", True, Redirect(DEFAULT_PATH)),
        ("/user", False, Redirect(LOGIN_PATH)),
        ("/no-such-view", False, Redirect(LOGIN_PATH)),
        ("/no-such-view", True, Allow()),
    ],
)
def test_guard_decisions(path, authenticated, expected):
    assert guard(path, authenticated) == expected


def test_guard_accepts_route_objects():
    login = resolve("/login")
    assert guard(login, False) == Allow()
    assert guard(resolve("/asset"), False) == Redirect(LOGIN_PATH)


@pytest.mark.parametrize(
    "requires_auth, authenticated, expected",
    [
        (True, False, Redirect(LOGIN_PATH)),
        (True, True, Allow()),
        (False, False, Allow()),
        (False, True, Allow()),
    ],
)
def test_guard_accepts_bare_metadata(requires_auth, authenticated, expected):
    assert guard(RouteMeta(requires_auth=requires_auth), authenticated) == expected


def test_every_route_but_login_requires_auth():
    public = [r.path for r in ROUTES if not r.meta.requires_auth]
    assert public == [LOGIN_PATH]


def test_normalize_path():
    assert normalize_path("dashboard/") == "/dashboard"
    assert normalize_path("/vul?page=2#top") == "/vul"
    assert normalize_path("") == "/"


def test_menu_routes_by_role():
    admin = [r.path for r in menu_routes("superadmin")]
    user = [r.path for r in menu_routes("user")]

    assert "/user" in admin
    assert "/user" not in user
    for hidden in ("/login", "/", "/report"):
        assert hidden not in admin
    assert user[0] == "/dashboard"


def test_navigator_redirects_anonymous_to_login():
    nav = Navigator(lambda: False)
    assert nav.push("/asset") == LOGIN_PATH
    assert nav.current == LOGIN_PATH


def test_navigator_follows_root_redirect():
    nav = Navigator(lambda: True, initial="/")
    assert nav.push("/") == DEFAULT_PATH
    assert nav.push("/login") == DEFAULT_PATH
    assert nav.push("/worker") == "/worker"
    assert nav.history == ["/", DEFAULT_PATH, DEFAULT_PATH, "/worker"]


def test_navigator_reads_auth_live():
    state = {"auth": False}
    nav = Navigator(lambda: state["auth"])
    assert nav.push("/task") == LOGIN_PATH
    state["auth"] = True
    assert nav.push("/task") == "/task"


def test_forced_push_to_login_skips_guard():
    seen = []
    nav = Navigator(lambda: True, initial="/dashboard")
    nav.navigated.connect(seen.append)

    # Unforced, an authenticated user is bounced off /login
    assert nav.push("/login") == DEFAULT_PATH
    assert nav.push("/login", force=True) == LOGIN_PATH
    assert seen == [DEFAULT_PATH, LOGIN_PATH]


def test_navigator_reset():
    nav = Navigator(lambda: True, initial="/dashboard")
    nav.push("/vul")
    nav.reset()
    assert nav.current == LOGIN_PATH
    assert nav.history == [LOGIN_PATH]
