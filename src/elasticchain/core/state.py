"""查询状态模块.

QueryState 保存一次链式查询累积的全部参数：表名、must/should/filter 条件、
分页、排序和返回字段。每次终止操作之后都会被重置为空状态。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from elasticchain.core.conditions import Condition
from elasticchain.core.constants import Pagination
from elasticchain.core.operators import ClauseKind
from elasticchain.exceptions import InvalidStateError


@dataclass
class QueryState:
    """链式查询的可变状态.

    条件以字段名为键存放，同一字段重复设置时后写覆盖前写，
    字典保持首次插入的顺序。must 与 should 中允许出现相同字段。

    Attributes:
        table: 当前表名（ES 索引名）
        must: must 条件（AND）
        should: should 条件（OR）
        filter: filter 条件（精确匹配，不参与评分）
        page: 当前页码，从 1 开始
        page_size: 每页条数
        sort: 排序项列表
        source: 返回的 _source 字段，None 表示全部
    """

    table: str | None = None
    must: dict[str, Condition] = field(default_factory=dict)
    should: dict[str, Condition] = field(default_factory=dict)
    filter: dict[str, Condition] = field(default_factory=dict)  # noqa: A003
    page: int = Pagination.DEFAULT_PAGE
    page_size: int = Pagination.DEFAULT_PAGE_SIZE
    sort: list[dict[str, Any]] = field(default_factory=list)
    source: list[str] | None = None

    def add(self, kind: ClauseKind, condition: Condition) -> None:
        """添加或覆盖一个条件."""
        self.clauses(kind)[condition.field] = condition

    def clauses(self, kind: ClauseKind) -> dict[str, Condition]:
        """获取指定子句类型的条件字典."""
        if kind == ClauseKind.MUST:
            return self.must
        if kind == ClauseKind.SHOULD:
            return self.should
        return self.filter

    @property
    def has_conditions(self) -> bool:
        return bool(self.must or self.should or self.filter)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def require_table(self) -> str:
        """返回当前表名，未设置时抛出 InvalidStateError."""
        if not self.table:
            raise InvalidStateError("尚未指定表名，请先调用 table()")
        return self.table
