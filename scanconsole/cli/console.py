"""
Scan Console CLI: drive the platform API from a terminal.

Usage examples:
    python -m scanconsole.cli.console login --username admin --password 123456
    python -m scanconsole.cli.console workspaces
    python -m scanconsole.cli.console use all
    python -m scanconsole.cli.console logs
"""

import argparse
import asyncio
import getpass
import json
import sys
from typing import List, Optional

from scanconsole.app import Console
from scanconsole.base.config import get_config, setup_logging
from scanconsole.base.notifier import Notification
from scanconsole.base.workspace import ALL_WORKSPACES
from scanconsole.errors import AuthExpiredError, TransportFailureError
from scanconsole.routing.guard import menu_routes


def _print_notification(note: Notification) -> None:
    prefix = "❌" if note.level == "error" else "ℹ️ "
    print(f"{prefix} {note.message}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scan Console command interface")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in and store the session")
    login.add_argument("--username", "-u", required=True)
    login.add_argument("--password", "-p", help="Prompted for when omitted")

    sub.add_parser("logout", help="Forget the stored session")
    sub.add_parser("whoami", help="Show the stored identity and workspace")
    sub.add_parser("workspaces", help="Refresh and list workspaces")

    use = sub.add_parser("use", help="Select a workspace id, or 'all'")
    use.add_argument("workspace")

    sub.add_parser("views", help="List the views available to your role")
    sub.add_parser("logs", help="Tail worker logs")
    return parser


async def _login(console: Console, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    result = await console.session.login({"username": args.username, "password": password})
    if not result.ok:
        print(f"❌ Login failed: {result.msg or result.code}")
        return 1
    console.navigator.push(console.navigator.current)
    print(f"✅ Logged in as {result.username} ({result.role})")
    return 0


def _whoami(console: Console) -> int:
    session = console.session
    if not session.is_authenticated:
        print("Not logged in")
        return 1
    print(f"User:      {session.username} ({session.user_id})")
    print(f"Role:      {session.role}")
    print(f"Home:      {session.home_workspace_id or '-'}")
    print(f"Selected:  {console.workspaces.current_workspace_id or '-'}")
    return 0


async def _refresh(registry) -> bool:
    result = await registry.refresh()
    if result is not None and not result.ok:
        print(f"❌ Could not load workspaces: {result.msg or result.code}")
        return False
    return True


async def _workspaces(console: Console) -> int:
    registry = console.workspaces
    if not await _refresh(registry):
        return 1
    selected = registry.effective_workspace_id
    for ws in registry.workspaces:
        marker = "*" if ws.id == selected else " "
        print(f"{marker} {ws.id}  {ws.name}")
    print(f"Current: {registry.display_name()}")
    return 0


async def _use(console: Console, workspace: str) -> int:
    registry = console.workspaces
    if not await _refresh(registry):
        return 1
    if workspace != ALL_WORKSPACES and registry.find(workspace) is None:
        print(f"❌ Unknown workspace {workspace}")
        return 1
    registry.select(workspace)
    print(f"✅ Now using {registry.display_name()}")
    return 0


def _views(console: Console) -> int:
    if not console.session.is_authenticated:
        print("Not logged in")
        return 1
    for route in menu_routes(console.session.role):
        print(f"{route.path:<16} {route.meta.title}")
    return 0


async def _logs(console: Console) -> int:
    from scanconsole.api.worker import stream_worker_logs

    async for data in stream_worker_logs(console.client):
        try:
            event = json.loads(data)
        except json.JSONDecodeError:
            print(data)
            continue
        print(
            f"[{event.get('timestamp', '')}] {event.get('level', 'INFO'):<5} "
            f"{event.get('workerName', '')}: {event.get('message', '')}"
        )
    return 0


async def run(args: argparse.Namespace, console: Optional[Console] = None) -> int:
    """
    Execute one parsed command.

    A console passed in stays open for the caller; one created here is
    closed before returning.
    """
    owns_console = console is None
    if console is None:
        console = Console()
    console.notifier.notified.connect(_print_notification)
    try:
        if args.command == "login":
            return await _login(console, args)
        if args.command == "logout":
            console.session.logout()
            print("👋 Logged out")
            return 0
        if args.command == "whoami":
            return _whoami(console)
        if args.command == "views":
            return _views(console)

        if not console.session.is_authenticated:
            print("Not logged in, run `login` first")
            return 1
        if args.command == "workspaces":
            return await _workspaces(console)
        if args.command == "use":
            return await _use(console, args.workspace)
        if args.command == "logs":
            return await _logs(console)
        return 2
    except (AuthExpiredError, TransportFailureError):
        # Already reported through the notifier
        return 1
    finally:
        console.notifier.notified.disconnect(_print_notification)
        if owns_console:
            await console.aclose()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    if args.debug:
        config.debug = True
    setup_logging(config)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
