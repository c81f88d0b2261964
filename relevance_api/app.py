from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from relevance.inventory import InMemoryInventory
from relevance_api.routes_search import router as search_router


def create_app(inventory: Optional[InMemoryInventory] = None) -> FastAPI:
    app = FastAPI(title="relevance")
    app.state.inventory = inventory or InMemoryInventory()
    app.include_router(search_router, prefix="/api")
    return app
