from __future__ import annotations

import math
from typing import Any, Sequence


def paginate(items: Sequence[Any], page: int, limit: int) -> tuple[list[Any], dict[str, Any]]:
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")
    total = len(items)
    total_pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit
    chunk = list(items[start : start + limit])
    return chunk, {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }
