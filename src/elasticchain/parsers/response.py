"""
ES 查询结果解析器.

将 search / get / mget 的原始响应解析为文档字典，文档 ID 以保留键 id 返回，
与写入时的约定一致。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from elasticchain.core.constants import DOCUMENT_ID_KEY
from elasticchain.parsers.types import PagedResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResponseParser:
    """
    ES 查询结果解析器.

    使用示例:
        parser = ResponseParser()
        response = gateway.search("users", compiled.to_dict())
        paged = parser.parse_paged(response, page=1, page_size=20)
    """

    def __init__(
        self,
        item_transformer: Callable[[dict[str, Any]], T] | None = None,
        include_id: bool = True,
    ) -> None:
        """
        初始化解析器.

        Args:
            item_transformer: 文档转换函数，将文档字典转换为业务对象
            include_id: 是否把 _id 以 id 键合并进文档
        """
        self._item_transformer = item_transformer
        self._include_id = include_id

    def parse_hits(self, response: dict[str, Any]) -> list[T]:
        """
        解析命中文档列表.

        Args:
            response: ES 原始响应

        Returns:
            转换后的文档列表
        """
        response_dict = self._ensure_dict(response)
        hits = response_dict.get("hits", {}).get("hits", [])
        return [self._transform_hit(hit) for hit in hits]

    def parse_paged(
        self,
        response: dict[str, Any],
        page: int,
        page_size: int,
    ) -> PagedResponse[T]:
        """
        解析分页响应.

        Args:
            response: ES 原始响应
            page: 当前页码（从1开始）
            page_size: 每页大小

        Returns:
            分页响应对象
        """
        response_dict = self._ensure_dict(response)
        hits_info = response_dict.get("hits", {})

        return PagedResponse(
            items=[self._transform_hit(hit) for hit in hits_info.get("hits", [])],
            total=self.get_total(response_dict),
            page=page,
            page_size=page_size,
            took_ms=response_dict.get("took"),
            max_score=hits_info.get("max_score"),
        )

    def parse_document(self, response: dict[str, Any]) -> T | None:
        """
        解析 get 响应.

        Returns:
            文档，found 为 False 时返回 None
        """
        response_dict = self._ensure_dict(response)
        if not response_dict.get("found", False):
            return None
        return self._transform_hit(response_dict)

    def parse_documents(self, response: dict[str, Any]) -> list[T]:
        """解析 mget 响应，跳过未找到的文档."""
        response_dict = self._ensure_dict(response)
        documents = []
        for doc in response_dict.get("docs", []):
            if doc.get("found", False):
                documents.append(self._transform_hit(doc))
            else:
                logger.debug(f"mget 未找到文档: {doc.get('_id')}")
        return documents

    def get_total(self, response: dict[str, Any]) -> int:
        """
        获取总命中数.

        兼容 ES 7.x 之前的整数格式和之后的 {"value": n} 格式.
        """
        total_info = self._ensure_dict(response).get("hits", {}).get("total", 0)
        if isinstance(total_info, dict):
            return total_info.get("value", 0)
        return total_info

    def _ensure_dict(self, response: Any) -> dict[str, Any]:
        """
        确保响应为字典格式.

        支持 elasticsearch 的 ObjectApiResponse 和原始字典.
        """
        if isinstance(response, dict):
            return response
        if hasattr(response, "body") and isinstance(response.body, dict):
            return response.body
        raise TypeError(f"不支持的响应类型: {type(response)}")

    def _transform_hit(self, hit: dict[str, Any]) -> T:
        source = dict(hit.get("_source") or {})
        if self._include_id and hit.get("_id") is not None:
            source = {DOCUMENT_ID_KEY: hit["_id"], **source}
        if self._item_transformer:
            return self._item_transformer(source)
        return source  # type: ignore
