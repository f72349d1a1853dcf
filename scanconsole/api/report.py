"""Scan report endpoints."""

from typing import Any, Dict


async def get_report_detail(client, task_id: str) -> Dict[str, Any]:
    return await client.post("/report/detail", json={"taskId": task_id})


async def export_report(client, task_id: str) -> bytes:
    """Download the exported report file."""
    return await client.download("POST", "/report/export", json={"taskId": task_id})
