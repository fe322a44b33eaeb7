from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List


@dataclass
class ListResult:
    """One page of items plus the total number of matching rows."""
    items: List[Any] = field(default_factory=list)
    total: int = 0


def page_meta(page: int, limit: int, total: int) -> dict:
    page_count = max(1, math.ceil(total / limit)) if limit else 1
    return {
        "mode": "page",
        "page": page,
        "limit": limit,
        "total": total,
        "pageCount": page_count,
        "hasPrev": page > 1,
        "hasNext": page < page_count,
    }
