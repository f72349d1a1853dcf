"""Workspace endpoints."""

from typing import Any, Dict


async def list_workspaces(client, page: int = 1, page_size: int = 100) -> Dict[str, Any]:
    return await client.post("/workspace/list", json={"page": page, "pageSize": page_size})


async def save_workspace(client, data: Dict[str, Any]) -> Dict[str, Any]:
    return await client.post("/workspace/save", json=data)


async def delete_workspace(client, workspace_id: str) -> Dict[str, Any]:
    return await client.post("/workspace/delete", json={"id": workspace_id})
