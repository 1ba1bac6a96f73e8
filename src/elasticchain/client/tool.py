"""链式查询客户端模块."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from elasticsearch import Elasticsearch

from elasticchain.builders.bool_query import BoolQueryCompiler, CompiledQuery
from elasticchain.builders.payloads import (
    build_bulk_delete_request,
    build_bulk_request,
    build_document_request,
    build_index_request,
    build_multi_get_request,
    build_table_definition,
    build_update_request,
)
from elasticchain.connection import ConnectionSettings, create_client
from elasticchain.core.conditions import MISSING, Condition
from elasticchain.core.constants import Pagination, TableDefaults
from elasticchain.core.operators import ClauseKind, ConditionOperator, SortDirection
from elasticchain.core.state import QueryState
from elasticchain.exceptions import InvalidInputError, InvalidStateError
from elasticchain.parsers import PagedResponse, ResponseParser

from .gateway import RequestGateway

logger = logging.getLogger(__name__)


class Client:
    """
    ES 链式查询客户端.

    通过链式调用累积表名、条件与分页，终止操作（get / paginate / insert /
    insert_all / find_by_id / find_by_ids / update_by_id / delete_by_id /
    delete_by_ids / delete_all / count）
    将状态编译为请求体并发送。无论终止操作成功还是失败，查询状态都会被重置，
    避免条件污染下一次查询。

    同一个 Client 实例不是线程安全的，并发使用时请为每条调用链创建独立实例。

    使用示例:
        client = Client.from_settings(
            ConnectionSettings(hosts=["http://127.0.0.1:9201"], username="elastic", password="123456")
        )

        client.table("my_index").insert({"id": "1", "title": "天有不测风云", "age": 26})

        result = (
            client
            .table("my_index")
            .where("title", "风云")
            .where("age", ">", 18)
            .where_or("test_a", ">", 1)
            .filter("sex", 1)
            .page(1, 10)
            .get()
        )
    """

    def __init__(
        self,
        gateway: RequestGateway,
        compiler: BoolQueryCompiler | None = None,
        parser: ResponseParser | None = None,
    ):
        """
        初始化客户端.

        Args:
            gateway: 请求网关
            compiler: bool 查询编译器
            parser: 响应解析器，用于 paginate / find_by_id / find_by_ids
        """
        self._gateway = gateway
        self._compiler = compiler or BoolQueryCompiler()
        self._parser = parser or ResponseParser()
        self._state = QueryState()

    @classmethod
    def from_es(cls, es_client: Elasticsearch, **kwargs: Any) -> Client:
        """基于已有的 Elasticsearch 客户端创建."""
        return cls(RequestGateway(es_client), **kwargs)

    @classmethod
    def from_settings(cls, settings: ConnectionSettings, **kwargs: Any) -> Client:
        """基于连接配置创建."""
        return cls.from_es(create_client(settings), **kwargs)

    @property
    def state(self) -> QueryState:
        """当前查询状态（只读用途）."""
        return self._state

    # ========== 链式状态设置 ==========

    def table(self, name: str) -> Client:
        """
        指定表名.

        Args:
            name: 表名（ES 索引名）

        Returns:
            self，支持链式调用
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError("表名不能为空")
        self._state.table = name
        return self

    def where(self, field: str, operator_or_value: Any, value: Any = MISSING) -> Client:
        """
        添加 must 条件（AND）.

        示例:
            client.where("title", "风云")          # match
            client.where("age", ">", 18)           # range
            client.where("age", "in", [18, 19])    # terms
        """
        return self._add(ClauseKind.MUST, Condition.of(field, operator_or_value, value))

    def where_or(self, field: str, operator_or_value: Any, value: Any = MISSING) -> Client:
        """
        添加 should 条件（OR）.

        存在 must 条件时 should 只影响评分；不存在 must 条件时至少命中一个。
        """
        return self._add(ClauseKind.SHOULD, Condition.of(field, operator_or_value, value))

    def where_in(self, field: str, values: Sequence[Any]) -> Client:
        """添加 must 条件：字段值在列表中."""
        return self.where(field, ConditionOperator.IN, values)

    def where_not_in(self, field: str, values: Sequence[Any]) -> Client:
        """添加 must 条件：字段值不在列表中."""
        return self.where(field, ConditionOperator.NOT_IN, values)

    def filter(self, field: str, value: Any) -> Client:  # noqa: A003
        """
        添加 filter 条件（精确匹配，不参与评分）.

        列表值编译为 terms，单值编译为 term。
        """
        return self._add(ClauseKind.FILTER, Condition(field, ConditionOperator.EQUAL, value))

    def page(
        self,
        page: int = Pagination.DEFAULT_PAGE,
        page_size: int = Pagination.DEFAULT_PAGE_SIZE,
    ) -> Client:
        """
        设置分页.

        Args:
            page: 页码，从 1 开始
            page_size: 每页条数

        Returns:
            self，支持链式调用
        """
        for name, number in (("page", page), ("page_size", page_size)):
            if isinstance(number, bool) or not isinstance(number, int) or number < 1:
                raise InvalidInputError(f"{name} 必须是正整数, got {number!r}")
        self._state.page = page
        self._state.page_size = page_size
        return self

    def order_by(self, field: str, direction: str = SortDirection.ASC.value) -> Client:
        """
        添加排序.

        Args:
            field: 排序字段
            direction: asc 或 desc
        """
        if not isinstance(field, str) or not field.strip():
            raise InvalidInputError("排序字段不能为空")
        try:
            order = SortDirection(str(direction).lower())
        except ValueError as e:
            raise InvalidInputError(f"排序方向只能是 asc 或 desc, got {direction!r}") from e
        self._state.sort.append({field: {"order": order.value}})
        return self

    def select(self, fields: Iterable[str]) -> Client:
        """指定返回的 _source 字段."""
        fields = list(fields)
        if not fields or not all(isinstance(f, str) and f for f in fields):
            raise InvalidInputError("返回字段列表不能为空")
        self._state.source = fields
        return self

    def reset(self) -> Client:
        """丢弃当前累积的查询状态."""
        self._state = QueryState()
        return self

    def compile(self) -> CompiledQuery:  # noqa: A003
        """编译当前状态但不发送请求，也不重置状态."""
        return self._compiler.compile(self._state)

    def _add(self, kind: ClauseKind, condition: Condition) -> Client:
        self._state.add(kind, condition)
        return self

    def _take_state(self) -> QueryState:
        """取出当前状态并换上空状态.

        终止操作先取状态再做校验和请求，因此无论结果如何都不会残留条件。
        """
        state, self._state = self._state, QueryState()
        return state

    # ========== 查询 ==========

    def get(self) -> dict[str, Any]:
        """
        执行搜索并返回原始响应.

        Returns:
            ES 搜索响应体

        Raises:
            InvalidStateError: 未指定表名时
        """
        compiled = self._compiler.compile(self._take_state())
        return self._gateway.search(compiled.table, compiled.to_dict())

    def paginate(self) -> PagedResponse[dict[str, Any]]:
        """执行搜索并解析为分页结果，文档以 id 键携带 ES 文档 ID."""
        state = self._take_state()
        compiled = self._compiler.compile(state)
        response = self._gateway.search(compiled.table, compiled.to_dict())
        return self._parser.parse_paged(response, page=state.page, page_size=state.page_size)

    def count(self) -> int:
        """
        统计命中当前条件的文档数，忽略分页、排序与返回字段.

        Raises:
            InvalidStateError: 未指定表名时
        """
        compiled = self._compiler.compile(self._take_state())
        response = self._gateway.count(compiled.table, compiled.query.to_dict())
        return int(response.get("count", 0))

    def find_by_id(self, doc_id: str) -> dict[str, Any] | None:
        """
        按 id 查询文档.

        Returns:
            文档字典，ES 文档 ID 以 id 键返回

        Raises:
            InvalidStateError: 未指定表名时
            InvalidInputError: id 为空时
            DocumentNotFoundError: 文档不存在时
        """
        table = self._take_state().require_table()
        request = build_document_request(table, doc_id)
        response = self._gateway.get(request.table, request.doc_id)
        return self._parser.parse_document(response)

    def find_by_ids(self, doc_ids: Iterable[str]) -> list[dict[str, Any]]:
        """按多个 id 查询文档，不存在的 id 会被跳过."""
        table = self._take_state().require_table()
        request = build_multi_get_request(table, doc_ids)
        response = self._gateway.mget(request.table, request.doc_ids)
        return self._parser.parse_documents(response)

    # ========== 写入 ==========

    def insert(self, document: Mapping[str, Any]) -> dict[str, Any]:
        """
        写入单个文档.

        文档中的 id 键作为 ES 文档 ID，不写入文档内容。

        Args:
            document: 文档，例如 {"username": "张三", "age": 15}

        Returns:
            ES index 响应体
        """
        table = self._take_state().require_table()
        request = build_index_request(table, document)
        logger.debug(f"Insert into '{request.table}': id={request.doc_id}")
        return self._gateway.index_document(request.table, request.body, request.doc_id)

    def insert_all(self, documents: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        """
        批量写入文档.

        Args:
            documents: 文档列表，例如 [{"username": "张三"}, {"username": "李四"}]

        Returns:
            ES bulk 响应体
        """
        table = self._take_state().require_table()
        request = build_bulk_request(table, documents)
        logger.debug(f"Bulk insert into '{request.table}': {request.document_count} documents")
        return self._gateway.bulk(request.operations)

    def update_by_id(self, doc_id: str, doc: Mapping[str, Any]) -> dict[str, Any]:
        """
        按 id 局部更新文档.

        Args:
            doc_id: 文档 ID
            doc: 需要更新的字段，例如 {"username": "张三", "age": 12}
        """
        table = self._take_state().require_table()
        request = build_update_request(table, doc_id, doc)
        return self._gateway.update(request.table, request.doc_id, request.body)

    def delete_by_id(self, doc_id: str) -> dict[str, Any]:
        """按 id 删除文档."""
        table = self._take_state().require_table()
        request = build_document_request(table, doc_id)
        return self._gateway.delete(request.table, request.doc_id)

    def delete_by_ids(self, doc_ids: Iterable[str]) -> dict[str, Any]:
        """
        按多个 id 批量删除文档.

        不存在的 id 不会抛出异常，结果记录在 bulk 响应的 items 中。

        Returns:
            ES bulk 响应体
        """
        table = self._take_state().require_table()
        request = build_bulk_delete_request(table, doc_ids)
        logger.debug(f"Bulk delete from '{request.table}': {len(request.doc_ids)} ids")
        return self._gateway.bulk(request.operations)

    def delete_all(self) -> dict[str, Any]:
        """
        删除所有命中当前条件的文档.

        必须至少设置一个 where / where_or / filter 条件，清空整张表请使用 drop_table。

        Returns:
            ES delete_by_query 响应体

        Raises:
            InvalidStateError: 未指定表名或没有任何条件时
        """
        state = self._take_state()
        compiled = self._compiler.compile(state)
        if not state.has_conditions:
            raise InvalidStateError(f"按条件删除必须指定条件: table={compiled.table}")
        return self._gateway.delete_by_query(compiled.table, compiled.query.to_dict())

    # ========== 表结构管理 ==========
    # 以下操作直接透传到网关，只校验参数是否存在，不会重置查询状态

    def create_table(
        self,
        columns: Mapping[str, Any],
        table: str | None = None,
        number_of_shards: int = TableDefaults.NUMBER_OF_SHARDS,
        number_of_replicas: int = TableDefaults.NUMBER_OF_REPLICAS,
    ) -> dict[str, Any]:
        """
        创建表和结构.

        Args:
            columns: 字段定义，例如
                {"first_name": {"type": "text", "analyzer": "standard"}, "age": {"type": "integer"}}
            table: 表名，默认使用 table() 指定的表
            number_of_shards: 主分片数
            number_of_replicas: 副本分片数
        """
        definition = build_table_definition(
            self._admin_table(table), columns, number_of_shards, number_of_replicas
        )
        return self._gateway.create_index(
            definition.table, definition.settings, definition.mappings
        )

    def update_table(self, columns: Mapping[str, Any], table: str | None = None) -> dict[str, Any]:
        """更新表字段映射（只能新增字段）."""
        table = self._admin_table(table)
        if not columns:
            raise InvalidInputError("字段定义不能为空")
        return self._gateway.update_mapping(table, dict(columns))

    def get_table_info(self, tables: str | Sequence[str] | None = None) -> dict[str, Any]:
        """
        获取表结构信息.

        Args:
            tables: 表名或表名列表；为空时使用 table() 指定的表，仍为空则返回全部表

        Raises:
            InvalidInputError: 列表中包含空表名时
        """
        if isinstance(tables, str):
            tables = [tables]
        if tables and not all(isinstance(t, str) and t.strip() for t in tables):
            raise InvalidInputError(f"表名不能为空: {tables!r}")
        if not tables and self._state.table:
            tables = [self._state.table]
        return self._gateway.get_mapping(tables)

    def drop_table(self, table: str | None = None) -> dict[str, Any]:
        """删除表."""
        return self._gateway.delete_index(self._admin_table(table))

    def table_exists(self, table: str | None = None) -> bool:
        """检查表是否存在."""
        return self._gateway.index_exists(self._admin_table(table))

    def _admin_table(self, table: str | None) -> str:
        name = table or self._state.table
        if not name or not name.strip():
            raise InvalidInputError("表名不能为空")
        return name
