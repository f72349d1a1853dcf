"""Worker endpoints, including the server-push log tail."""

from typing import Any, AsyncIterator, Dict


async def get_worker_list(client) -> Dict[str, Any]:
    return await client.post("/worker/list")


async def get_worker_logs_history(client, limit: int = 100) -> Dict[str, Any]:
    return await client.post("/worker/logs/history", json={"limit": limit})


async def clear_worker_logs(client) -> Dict[str, Any]:
    return await client.post("/worker/logs/clear")


def stream_worker_logs(client) -> AsyncIterator[str]:
    """
    Tail worker logs as the server pushes them.

    Yields the payload of each SSE `data:` line.
    """
    return client.stream_lines("GET", "/worker/logs/stream")
