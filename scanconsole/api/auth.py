"""Login and user endpoints."""

from typing import Any, Dict, Optional


async def login(client, data: Dict[str, Any]) -> Dict[str, Any]:
    # A wrong password comes back as code 401 too; it must not force a logout
    return await client.post(client.config.api.login_path, json=data, classify_unauthorized=False)


async def get_user_list(client, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return await client.post("/user/list", json=data or {})
