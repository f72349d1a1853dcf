"""Fingerprint rule endpoints."""

from typing import Any, Dict, List, Optional


async def get_fingerprint_list(client, data: Dict[str, Any]) -> Dict[str, Any]:
    return await client.post("/fingerprint/list", json=data)


async def save_fingerprint(client, data: Dict[str, Any]) -> Dict[str, Any]:
    return await client.post("/fingerprint/save", json=data)


async def delete_fingerprint(client, data: Dict[str, Any]) -> Dict[str, Any]:
    return await client.post("/fingerprint/delete", json=data)


async def get_fingerprint_categories(client) -> Dict[str, Any]:
    return await client.post("/fingerprint/categories")


async def sync_fingerprints(client, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return await client.post("/fingerprint/sync", json=data or {})


async def update_fingerprint_enabled(client, ids: List[str], enabled: bool) -> Dict[str, Any]:
    return await client.post("/fingerprint/updateEnabled", json={"ids": ids, "enabled": enabled})
