"""elasticchain 异常定义模块."""

from __future__ import annotations


class EsChainError(Exception):
    """elasticchain 基础异常类."""

    pass


class ValidationError(EsChainError):
    """调用参数或查询状态校验失败.

    在发起任何网络请求之前同步抛出。
    """

    pass


class InvalidInputError(ValidationError, ValueError):
    """调用方传入的参数为空或格式不正确.

    例如表名为空、文档为空、字段名为空、分页参数非正数等。
    """

    pass


class InvalidStateError(ValidationError):
    """终止操作所需的查询状态缺失，例如尚未指定表名."""

    pass


class DocumentNotFoundError(EsChainError):
    """按 id 寻址的文档不存在.

    Attributes:
        table: 表名（ES 索引名）
        doc_id: 文档 ID
    """

    def __init__(self, table: str, doc_id: str, message: str | None = None):
        self.table = table
        self.doc_id = doc_id
        super().__init__(message or f"文档不存在: table={table}, id={doc_id}")

