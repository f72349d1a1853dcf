"""
scanconsole/routing/navigator.py
Tracks the current view and applies the guard on every transition.
"""

from __future__ import annotations

import logging
from typing import Callable, List

from scanconsole.routing.guard import LOGIN_PATH, Redirect, guard, normalize_path, resolve
from scanconsole.utils.observer import Signal

logger = logging.getLogger(__name__)

# Guard redirects can chain (/ -> /dashboard -> /login); bound the walk
_MAX_REDIRECTS = 5


class Navigator:
    """
    Holds the current path and the history of settled navigations.

    Args:
        is_authenticated: Accessor read at every push, never cached
    """

    def __init__(self, is_authenticated: Callable[[], bool], initial: str = LOGIN_PATH):
        self._is_authenticated = is_authenticated
        self.current = normalize_path(initial)
        self.history: List[str] = [self.current]
        self.navigated = Signal()

    def push(self, path: str, force: bool = False) -> str:
        """
        Navigate to a path.

        A forced push to the login boundary skips the guard; the request
        pipeline uses it after clearing an expired session.

        Returns:
            The path actually landed on
        """
        target = normalize_path(path)
        if not (force and target == LOGIN_PATH):
            for _ in range(_MAX_REDIRECTS):
                route = resolve(target)
                if route is not None and route.redirect:
                    target = route.redirect
                    continue
                decision = guard(route or target, self._is_authenticated())
                if isinstance(decision, Redirect):
                    if decision.target == target:
                        break
                    logger.debug(f"[Navigator] {target} redirected to {decision.target}")
                    target = decision.target
                    continue
                break

        if target != self.current:
            logger.info(f"[Navigator] {self.current} -> {target}")
        self.current = target
        self.history.append(target)
        self.navigated.emit(target)
        return target

    def reset(self, initial: str = LOGIN_PATH) -> None:
        self.current = normalize_path(initial)
        self.history = [self.current]
        self.navigated = Signal()
