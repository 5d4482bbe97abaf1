"""Paging over repository queries.

A Protean query returns at most ``limit`` rows per call (100 unless told
otherwise). Listings hand back one ``Page`` at a time; reads that need
every matching row walk the pages with ``fetch_all``.
"""

import math
from dataclasses import dataclass, field

SCAN_PAGE_SIZE = 100


@dataclass
class Page:
    items: list = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_dict(self, render) -> dict:
        """API shape: rendered items plus the paging counters."""
        return {
            "items": [render(item) for item in self.items],
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }


def fetch_page(query, page=1, limit=10) -> Page:
    """Run ``query`` for one 1-based page."""
    page = max(int(page), 1)
    limit = max(int(limit), 1)
    result = query.limit(limit).offset((page - 1) * limit).all()
    return Page(items=list(result.items), page=page, limit=limit, total=result.total)


def fetch_all(query, page_size=SCAN_PAGE_SIZE) -> list:
    """Every row ``query`` matches, in the query's order."""
    items = []
    offset = 0
    while True:
        result = query.limit(page_size).offset(offset).all()
        items.extend(result.items)
        offset += page_size
        if not result.items or offset >= result.total:
            return items
