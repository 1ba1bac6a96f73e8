"""CRUD 请求体构建模块.

将插入、批量插入、按 id 查询/更新/删除以及建表意图转换为 ES 各操作所需的请求体。
所有函数均为纯函数，参数不合法时抛出 InvalidInputError，不访问网络。
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from elasticchain.core.constants import DOCUMENT_ID_KEY, TableDefaults
from elasticchain.exceptions import InvalidInputError


@dataclass(frozen=True)
class IndexRequest:
    """单文档写入请求.

    Attributes:
        table: 表名
        body: 文档内容（不含 id）
        doc_id: 显式文档 ID，None 表示由 ES 自动生成
    """

    table: str
    body: dict[str, Any]
    doc_id: str | None = None


@dataclass(frozen=True)
class BulkRequest:
    """批量写入请求.

    operations 为动作行与文档行交替排列的列表:
        [{"index": {"_index": "users"}}, {"name": "张三"}, ...]
    """

    table: str
    operations: list[dict[str, Any]]

    @property
    def document_count(self) -> int:
        return len(self.operations) // 2


@dataclass(frozen=True)
class DocumentRequest:
    """按 id 寻址的请求（查询、删除）."""

    table: str
    doc_id: str


@dataclass(frozen=True)
class MultiGetRequest:
    """按多个 id 批量查询的请求."""

    table: str
    doc_ids: list[str]


@dataclass(frozen=True)
class BulkDeleteRequest:
    """按多个 id 批量删除的请求."""

    table: str
    doc_ids: list[str]

    @property
    def operations(self) -> list[dict[str, Any]]:
        """bulk 删除动作行，删除动作没有文档行."""
        return [{"delete": {"_index": self.table, "_id": doc_id}} for doc_id in self.doc_ids]


@dataclass(frozen=True)
class UpdateRequest:
    """按 id 局部更新的请求.

    body 的格式为 {"doc": {...}}。
    """

    table: str
    doc_id: str
    body: dict[str, Any]


@dataclass(frozen=True)
class TableDefinition:
    """建表请求.

    Attributes:
        table: 表名
        settings: 索引设置（分片数、副本数）
        mappings: 字段映射
    """

    table: str
    settings: dict[str, Any] = field(default_factory=dict)
    mappings: dict[str, Any] = field(default_factory=dict)


def _require_table(table: str | None) -> str:
    if not isinstance(table, str) or not table.strip():
        raise InvalidInputError("表名不能为空")
    return table


def _require_id(doc_id: Any) -> str:
    """校验按 id 寻址时传入的文档 ID.

    这里只接受非空字符串，不做类型转换。写入时文档中的 id 会被 str() 转换，
    所以以整数 5 写入的文档需要用 "5" 查询、更新或删除。
    """
    if not isinstance(doc_id, str) or not doc_id.strip():
        raise InvalidInputError("文档 id 不能为空")
    return doc_id


def _split_document(document: Mapping[str, Any] | None) -> tuple[str | None, dict[str, Any]]:
    """拆分文档中的保留键 id 与其余字段.

    Returns:
        (文档 ID, 文档内容)

    Raises:
        InvalidInputError: 文档为空，或移除 id 后为空
    """
    if not document:
        raise InvalidInputError("文档不能为空")
    if not isinstance(document, Mapping):
        raise InvalidInputError(f"文档必须是字典类型, got {type(document).__name__}")

    body = dict(document)
    doc_id = None
    if DOCUMENT_ID_KEY in body:
        raw_id = body.pop(DOCUMENT_ID_KEY)
        if raw_id is not None:
            doc_id = str(raw_id)
    if not body:
        raise InvalidInputError("文档除 id 外不能为空")
    return doc_id, body


def build_index_request(table: str, document: Mapping[str, Any]) -> IndexRequest:
    """
    构建单文档写入请求.

    Args:
        table: 表名
        document: 文档，如果包含 id 则作为 ES 文档 ID 使用，不写入文档内容

    Returns:
        IndexRequest 对象

    示例:
        >>> build_index_request("users", {"id": "x", "a": 1})
        IndexRequest(table='users', body={'a': 1}, doc_id='x')
    """
    table = _require_table(table)
    doc_id, body = _split_document(document)
    return IndexRequest(table=table, body=body, doc_id=doc_id)


def build_bulk_request(table: str, documents: Iterable[Mapping[str, Any]]) -> BulkRequest:
    """
    构建批量写入请求.

    每个文档生成一个动作行和一个文档行，保持输入顺序。
    文档携带 id 时写入动作行的 _id。

    Args:
        table: 表名
        documents: 文档序列

    Returns:
        BulkRequest 对象

    Raises:
        InvalidInputError: 表名为空、文档序列为空或任一文档为空
    """
    table = _require_table(table)
    documents = list(documents) if documents is not None else []
    if not documents:
        raise InvalidInputError("批量写入的文档列表不能为空")

    operations: list[dict[str, Any]] = []
    for position, document in enumerate(documents):
        try:
            doc_id, body = _split_document(document)
        except InvalidInputError as e:
            raise InvalidInputError(f"第 {position} 个文档无效: {e}") from e

        action: dict[str, Any] = {"_index": table}
        if doc_id is not None:
            action["_id"] = doc_id
        operations.append({"index": action})
        operations.append(body)

    return BulkRequest(table=table, operations=operations)


def build_document_request(table: str, doc_id: str) -> DocumentRequest:
    """构建按 id 查询或删除的请求，doc_id 必须是字符串."""
    return DocumentRequest(table=_require_table(table), doc_id=_require_id(doc_id))


def build_multi_get_request(table: str, doc_ids: Iterable[str]) -> MultiGetRequest:
    """构建按多个 id 查询的请求，重复的 id 只保留一次."""
    table = _require_table(table)
    doc_ids = list(doc_ids) if doc_ids is not None else []
    if not doc_ids:
        raise InvalidInputError("文档 id 列表不能为空")
    unique_ids = list(dict.fromkeys(_require_id(doc_id) for doc_id in doc_ids))
    return MultiGetRequest(table=table, doc_ids=unique_ids)


def build_bulk_delete_request(table: str, doc_ids: Iterable[str]) -> BulkDeleteRequest:
    """
    构建按多个 id 批量删除的请求.

    Args:
        table: 表名
        doc_ids: 文档 ID 序列，重复的 id 只保留一次

    Returns:
        BulkDeleteRequest 对象，operations 形如
        [{"delete": {"_index": "users", "_id": "a"}}, ...]
    """
    table = _require_table(table)
    doc_ids = list(doc_ids) if doc_ids is not None else []
    if not doc_ids:
        raise InvalidInputError("文档 id 列表不能为空")
    unique_ids = list(dict.fromkeys(_require_id(doc_id) for doc_id in doc_ids))
    return BulkDeleteRequest(table=table, doc_ids=unique_ids)


def build_update_request(
    table: str, doc_id: str, doc: Mapping[str, Any] | None
) -> UpdateRequest:
    """
    构建按 id 局部更新的请求.

    Args:
        table: 表名
        doc_id: 文档 ID
        doc: 需要合并的字段

    Returns:
        UpdateRequest 对象，body 为 {"doc": {...}}
    """
    table = _require_table(table)
    doc_id = _require_id(doc_id)
    if not doc:
        raise InvalidInputError("更新内容不能为空")
    return UpdateRequest(table=table, doc_id=doc_id, body={"doc": dict(doc)})


def build_table_definition(
    table: str,
    columns: Mapping[str, Any] | None,
    number_of_shards: int = TableDefaults.NUMBER_OF_SHARDS,
    number_of_replicas: int = TableDefaults.NUMBER_OF_REPLICAS,
) -> TableDefinition:
    """
    构建建表请求.

    Args:
        table: 表名
        columns: 字段定义，例如 {"age": {"type": "integer"}}
        number_of_shards: 主分片数
        number_of_replicas: 副本分片数

    Returns:
        TableDefinition 对象
    """
    table = _require_table(table)
    if not columns:
        raise InvalidInputError("字段定义不能为空")
    if number_of_shards < 1 or number_of_replicas < 0:
        raise InvalidInputError(
            f"分片设置无效: shards={number_of_shards}, replicas={number_of_replicas}"
        )
    return TableDefinition(
        table=table,
        settings={
            "number_of_shards": number_of_shards,
            "number_of_replicas": number_of_replicas,
        },
        mappings={
            "_source": {"enabled": TableDefaults.SOURCE_ENABLED},
            "properties": dict(columns),
        },
    )
