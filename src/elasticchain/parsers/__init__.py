"""结果解析器模块."""

from elasticchain.parsers.response import ResponseParser
from elasticchain.parsers.types import PagedResponse

__all__ = [
    "ResponseParser",
    "PagedResponse",
]
