from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SearchEvent:
    type: str
    generation: int | None = None
    data: dict[str, Any] = field(default_factory=dict)
