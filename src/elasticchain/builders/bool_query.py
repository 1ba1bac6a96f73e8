"""bool 查询编译模块.

将 QueryState 中累积的条件编译为 ES 的 bool 查询:

    {
        "query": {"bool": {"must": [...], "should": [...], "filter": [...]}},
        "from": 0,
        "size": 50
    }

优先级规则:
    - 没有任何条件时编译为 match_all
    - 存在 must 子句时，should 子句只影响评分，不影响是否命中
    - 不存在 must 子句时，should 子句至少命中一个 (minimum_should_match=1)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from elasticsearch.dsl import Q as ElasticsearchQ
from elasticsearch.dsl.query import Query

from elasticchain.core.conditions import Condition
from elasticchain.core.operators import ClauseKind, ConditionOperator
from elasticchain.core.state import QueryState

logger = logging.getLogger(__name__)


def _field_query(name: str, key: str, value: Any) -> Query:
    """构建以字段名为键的查询，字段名原样保留（不把 __ 展开为 .）."""
    return ElasticsearchQ(name, _expand__to_dot=False, **{key: value})


@dataclass(frozen=True)
class CompiledQuery:
    """编译后的搜索请求.

    Attributes:
        table: 目标表名
        query: 查询对象（Bool 或 MatchAll）
        offset: 起始偏移量 (from)
        limit: 返回条数 (size)
        sort: 排序项
        source: 返回字段
    """

    table: str
    query: Query
    offset: int
    limit: int
    sort: list[dict[str, Any]] = field(default_factory=list)
    source: list[str] | None = None

    @property
    def is_match_all(self) -> bool:
        return self.query.name == "match_all"

    def to_dict(self) -> dict[str, Any]:
        """导出为搜索请求体."""
        body: dict[str, Any] = {
            "query": self.query.to_dict(),
            "from": self.offset,
            "size": self.limit,
        }
        if self.sort:
            body["sort"] = list(self.sort)
        if self.source is not None:
            body["_source"] = list(self.source)
        return body


class BoolQueryCompiler:
    """bool 查询编译器.

    纯函数式组件，不访问网络。

    使用示例:
        state = QueryState(table="users")
        state.add(ClauseKind.MUST, Condition.of("name", "张三"))
        compiled = BoolQueryCompiler().compile(state)
        compiled.to_dict()
        # {"query": {"bool": {"must": [{"match": {"name": "张三"}}]}}, "from": 0, "size": 50}
    """

    def compile(self, state: QueryState) -> CompiledQuery:  # noqa: A003
        """
        编译查询状态.

        Args:
            state: 查询状态

        Returns:
            CompiledQuery 对象

        Raises:
            InvalidStateError: 未指定表名时
        """
        table = state.require_table()
        compiled = CompiledQuery(
            table=table,
            query=self.build_query(state),
            offset=state.offset,
            limit=state.page_size,
            sort=list(state.sort),
            source=list(state.source) if state.source is not None else None,
        )
        logger.debug(f"Compiled query for table '{table}': {compiled.to_dict()}")
        return compiled

    def build_query(self, state: QueryState) -> Query:
        """只构建 query 部分."""
        if not state.has_conditions:
            return ElasticsearchQ("match_all")

        must = [self.parse(c) for c in state.must.values()]
        should = [self.parse(c) for c in state.should.values()]
        filters = [self.parse_filter(c) for c in state.filter.values()]

        bool_params: dict[str, Any] = {}
        if must:
            bool_params[ClauseKind.MUST.value] = must
        if should:
            bool_params[ClauseKind.SHOULD.value] = should
            if not must:
                bool_params["minimum_should_match"] = 1
        if filters:
            bool_params[ClauseKind.FILTER.value] = filters
        return ElasticsearchQ("bool", **bool_params)

    def parse(self, condition: Condition) -> Query:
        """
        解析 must/should 条件为 Q 对象.

        Args:
            condition: 条件项

        Returns:
            Q 对象
        """
        key = condition.field
        operator = condition.operator
        value = condition.value

        if operator == ConditionOperator.EQUAL:
            # match 不接受数组，多值时退化为 terms
            if isinstance(value, (list, tuple, set, frozenset)):
                return _field_query("terms", key, list(value))
            return _field_query("match", key, value)

        elif operator == ConditionOperator.NOT_EQUAL:
            return ElasticsearchQ("bool", must_not=[self._exact(key, value)])

        elif operator.is_range:
            return _field_query("range", key, {operator.value: value})

        elif operator == ConditionOperator.IN:
            return _field_query("terms", key, condition.values())

        elif operator == ConditionOperator.NOT_IN:
            return ElasticsearchQ(
                "bool", must_not=[_field_query("terms", key, condition.values())]
            )

        else:  # like
            return _field_query("wildcard", key, f"*{value}*")

    def parse_filter(self, condition: Condition) -> Query:
        """解析 filter 条件，只做精确匹配."""
        return self._exact(condition.field, condition.value)

    @staticmethod
    def _exact(key: str, value: Any) -> Query:
        if isinstance(value, (list, tuple, set, frozenset)):
            return _field_query("terms", key, list(value))
        return _field_query("term", key, value)
