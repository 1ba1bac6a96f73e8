"""分页结果类型."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PagedResponse(Generic[T]):
    """
    一页搜索结果.

    页数与前后页标记由 total / page / page_size 推算，不单独存储。

    示例:
        paged = client.table("users").where("age", ">", 18).page(2, 20).paginate()
        for user in paged:
            print(user["id"], user["name"])
    """

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 50
    took_ms: int | None = None
    max_score: float | None = None

    @property
    def total_pages(self) -> int:
        if self.page_size < 1:
            return 0
        return -(-self.total // self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def offset(self) -> int:
        """本页第一条在全部结果中的偏移量."""
        return (self.page - 1) * self.page_size

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        """导出为 {"items": [...], "pagination": {...}} 结构."""
        return {
            "items": list(self.items),
            "pagination": {
                "total": self.total,
                "page": self.page,
                "page_size": self.page_size,
                "total_pages": self.total_pages,
                "has_next": self.has_next,
                "has_prev": self.has_prev,
            },
            "took_ms": self.took_ms,
            "max_score": self.max_score,
        }
