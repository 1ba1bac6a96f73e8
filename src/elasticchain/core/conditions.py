"""条件项定义模块."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from elasticchain.core.operators import ConditionOperator
from elasticchain.exceptions import InvalidInputError

# 用于区分 "未传入" 与 None/0/"" 等假值
MISSING: Any = object()


@dataclass(frozen=True)
class Condition:
    """条件项.

    表示 ``(字段, 操作符, 值)`` 三元组。值可以是标量或标量序列，
    0、空字符串、False 等假值都是合法条件值。

    Attributes:
        field: 字段名，不能为空
        operator: 比较操作符
        value: 条件值
    """

    field: str
    operator: ConditionOperator
    value: Any

    def __post_init__(self):
        """验证条件项参数."""
        if not isinstance(self.field, str) or not self.field.strip():
            raise InvalidInputError("字段名不能为空")
        if self.operator.is_membership:
            if not isinstance(self.value, (list, tuple, set, frozenset)):
                raise InvalidInputError(
                    f"操作符 {self.operator.value} 需要列表类型的值, got {type(self.value).__name__}"
                )
            if not self.value:
                raise InvalidInputError(
                    f"操作符 {self.operator.value} 的值列表不能为空: field={self.field}"
                )
        elif self.operator.is_range and isinstance(self.value, (list, tuple, set)):
            raise InvalidInputError(
                f"范围操作符 {self.operator.value} 只接受单个值: field={self.field}"
            )

    @classmethod
    def of(cls, field: str, operator_or_value: Any, value: Any = MISSING) -> Condition:
        """从链式调用参数创建条件项.

        支持两种写法:
            Condition.of("age", 18)          # 等于
            Condition.of("age", ">", 18)     # 显式操作符

        Args:
            field: 字段名
            operator_or_value: 两参数形式下为值，三参数形式下为操作符
            value: 三参数形式下的值

        Returns:
            Condition 对象

        Raises:
            InvalidInputError: 字段名为空或操作符不支持时
        """
        if value is MISSING:
            return cls(field=field, operator=ConditionOperator.EQUAL, value=operator_or_value)

        operator = ConditionOperator.lookup(operator_or_value)
        if operator is None:
            raise InvalidInputError(f"不支持的操作符: {operator_or_value!r}")
        return cls(field=field, operator=operator, value=value)

    def values(self) -> list[Any]:
        """以列表形式返回条件值."""
        if isinstance(self.value, (list, tuple, set, frozenset)):
            return list(self.value)
        return [self.value]
