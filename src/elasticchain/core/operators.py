"""条件操作符与子句类型定义模块."""

from enum import Enum


class ConditionOperator(str, Enum):
    """条件比较操作符."""

    EQUAL = "eq"
    NOT_EQUAL = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NOT_IN = "not_in"
    LIKE = "like"  # 模糊匹配

    @classmethod
    def lookup(cls, operator: "str | ConditionOperator") -> "ConditionOperator | None":
        """根据符号或名称查找操作符，找不到时返回 None."""
        if isinstance(operator, ConditionOperator):
            return operator
        if not isinstance(operator, str):
            return None
        return OPERATOR_LOOKUP.get(operator.strip().lower())

    @property
    def is_range(self) -> bool:
        return self in (
            ConditionOperator.GT,
            ConditionOperator.GTE,
            ConditionOperator.LT,
            ConditionOperator.LTE,
        )

    @property
    def is_membership(self) -> bool:
        return self in (ConditionOperator.IN, ConditionOperator.NOT_IN)


# SQL 风格符号到 ConditionOperator 的映射
OPERATOR_LOOKUP = {
    "=": ConditionOperator.EQUAL,
    "==": ConditionOperator.EQUAL,
    "eq": ConditionOperator.EQUAL,
    "!=": ConditionOperator.NOT_EQUAL,
    "<>": ConditionOperator.NOT_EQUAL,
    "neq": ConditionOperator.NOT_EQUAL,
    ">": ConditionOperator.GT,
    "gt": ConditionOperator.GT,
    ">=": ConditionOperator.GTE,
    "gte": ConditionOperator.GTE,
    "<": ConditionOperator.LT,
    "lt": ConditionOperator.LT,
    "<=": ConditionOperator.LTE,
    "lte": ConditionOperator.LTE,
    "in": ConditionOperator.IN,
    "not in": ConditionOperator.NOT_IN,
    "not_in": ConditionOperator.NOT_IN,
    "like": ConditionOperator.LIKE,
}


class ClauseKind(str, Enum):
    """bool 查询中的子句类型."""

    MUST = "must"
    SHOULD = "should"
    FILTER = "filter"


class SortDirection(str, Enum):
    """排序方向."""

    ASC = "asc"
    DESC = "desc"
