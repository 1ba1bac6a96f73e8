"""ES 请求网关模块.

RequestGateway 是对 elasticsearch.Elasticsearch 的薄封装，负责发出原始请求并返回
响应体字典。按 id 寻址的请求遇到 404 时转换为 DocumentNotFoundError，
其余传输层异常（ApiError / TransportError）原样抛出，不做重试。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from elasticsearch import Elasticsearch, NotFoundError

from elasticchain.exceptions import DocumentNotFoundError

logger = logging.getLogger(__name__)

# 搜索请求体键名到客户端参数名的映射
_SEARCH_PARAMS = {
    "query": "query",
    "from": "from_",
    "size": "size",
    "sort": "sort",
    "_source": "source",
}


def _body(response: Any) -> Any:
    """取出 ObjectApiResponse 的响应体，字典原样返回."""
    return getattr(response, "body", response)


class RequestGateway:
    """ES 请求网关.

    Args:
        es_client: Elasticsearch 客户端实例
    """

    def __init__(self, es_client: Elasticsearch):
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        self.es_client = es_client

    # ========== 表结构管理 ==========

    def create_index(
        self, table: str, settings: dict[str, Any], mappings: dict[str, Any]
    ) -> dict[str, Any]:
        """创建索引."""
        response = self.es_client.indices.create(
            index=table, settings=settings, mappings=mappings
        )
        logger.info(f"索引 '{table}' 创建请求已发送")
        return _body(response)

    def update_mapping(self, table: str, properties: dict[str, Any]) -> dict[str, Any]:
        """更新索引字段映射."""
        response = self.es_client.indices.put_mapping(index=table, properties=properties)
        logger.info(f"索引 '{table}' 映射更新请求已发送")
        return _body(response)

    def get_mapping(self, tables: str | Sequence[str] | None = None) -> dict[str, Any]:
        """获取索引映射，tables 为空时返回全部索引，单个字符串视为一个索引名."""
        if isinstance(tables, str):
            tables = [tables]
        if tables:
            response = self.es_client.indices.get_mapping(index=list(tables))
        else:
            response = self.es_client.indices.get_mapping()
        return _body(response)

    def delete_index(self, table: str) -> dict[str, Any]:
        """删除索引."""
        response = self.es_client.indices.delete(index=table)
        logger.info(f"索引 '{table}' 删除请求已发送")
        return _body(response)

    def index_exists(self, table: str) -> bool:
        """检查索引是否存在."""
        return bool(self.es_client.indices.exists(index=table))

    # ========== 文档操作 ==========

    def index_document(
        self, table: str, body: dict[str, Any], doc_id: str | None = None
    ) -> dict[str, Any]:
        """写入单个文档，doc_id 为 None 时由 ES 生成 ID."""
        kwargs: dict[str, Any] = {"index": table, "document": body}
        if doc_id is not None:
            kwargs["id"] = doc_id
        return _body(self.es_client.index(**kwargs))

    def bulk(self, operations: list[dict[str, Any]]) -> dict[str, Any]:
        """发送批量请求，operations 为 bulk 动作行列表（index 动作后紧跟文档行）."""
        response = _body(self.es_client.bulk(operations=operations))
        if response.get("errors"):
            failed = [
                item for item in response.get("items", [])
                if any("error" in result for result in item.values())
            ]
            logger.warning(f"批量请求部分失败: {len(failed)} 项出错")
        return response

    def get(self, table: str, doc_id: str) -> dict[str, Any]:
        """按 id 获取文档."""
        try:
            return _body(self.es_client.get(index=table, id=doc_id))
        except NotFoundError as e:
            raise self._not_found(table, doc_id) from e

    def mget(self, table: str, doc_ids: list[str]) -> dict[str, Any]:
        """按多个 id 获取文档."""
        return _body(self.es_client.mget(index=table, ids=doc_ids))

    def update(self, table: str, doc_id: str, body: dict[str, Any]) -> dict[str, Any]:
        """按 id 局部更新文档，body 形如 {"doc": {...}}."""
        try:
            return _body(self.es_client.update(index=table, id=doc_id, **body))
        except NotFoundError as e:
            raise self._not_found(table, doc_id) from e

    def delete(self, table: str, doc_id: str) -> dict[str, Any]:
        """按 id 删除文档."""
        try:
            return _body(self.es_client.delete(index=table, id=doc_id))
        except NotFoundError as e:
            raise self._not_found(table, doc_id) from e

    def search(self, table: str, body: dict[str, Any]) -> dict[str, Any]:
        """执行搜索，body 为编译后的搜索请求体."""
        kwargs = {_SEARCH_PARAMS[k]: v for k, v in body.items() if k in _SEARCH_PARAMS}
        return _body(self.es_client.search(index=table, **kwargs))

    def count(self, table: str, query: dict[str, Any]) -> dict[str, Any]:
        """统计命中数，query 为编译后的 query 部分."""
        return _body(self.es_client.count(index=table, query=query))

    def delete_by_query(self, table: str, query: dict[str, Any]) -> dict[str, Any]:
        """删除所有命中 query 的文档."""
        response = _body(self.es_client.delete_by_query(index=table, query=query))
        logger.info(f"索引 '{table}' 按条件删除 {response.get('deleted', 0)} 个文档")
        return response

    @staticmethod
    def _not_found(table: str, doc_id: str) -> DocumentNotFoundError:
        logger.warning(f"文档不存在: table={table}, id={doc_id}")
        return DocumentNotFoundError(table, doc_id)
