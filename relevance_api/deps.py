from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request

from relevance.config import settings
from relevance.inventory import InMemoryInventory


def _api_key_dep(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    expected = (settings.api_key or "").strip()
    if not expected:
        return
    if (x_api_key or "").strip() != expected:
        raise HTTPException(status_code=401, detail="invalid_api_key")


def _inventory_dep(request: Request) -> InMemoryInventory:
    return request.app.state.inventory


ApiKeyDep = Depends(_api_key_dep)
InventoryDep = Depends(_inventory_dep)
