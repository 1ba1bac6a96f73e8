"""核心模块导出."""

from elasticchain.core.conditions import MISSING, Condition
from elasticchain.core.constants import DOCUMENT_ID_KEY, Pagination, TableDefaults
from elasticchain.core.operators import ClauseKind, ConditionOperator, SortDirection
from elasticchain.core.state import QueryState

__all__ = [
    "MISSING",
    "Condition",
    "ConditionOperator",
    "ClauseKind",
    "SortDirection",
    "QueryState",
    "Pagination",
    "TableDefaults",
    "DOCUMENT_ID_KEY",
]
