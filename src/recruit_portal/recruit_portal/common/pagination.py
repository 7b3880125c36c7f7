from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def of(cls, page: Optional[int], limit: Optional[int]) -> "PageRequest":
        p = max(int(page or DEFAULT_PAGE), 1)
        lim = min(max(int(limit or DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)
        return cls(page=p, limit=lim)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self, serialize: Callable[[T], Any]) -> dict:
        return {
            "data": [serialize(i) for i in self.items],
            "meta": {"total": self.total, "page": self.page, "limit": self.limit, "pages": self.pages},
        }


def paginate(items: Sequence[T], req: PageRequest) -> Page[T]:
    """Slice an in-memory sequence (used for derived, never-stored views)."""
    return Page(items=list(items[req.offset:req.offset + req.limit]), total=len(items), page=req.page, limit=req.limit)
