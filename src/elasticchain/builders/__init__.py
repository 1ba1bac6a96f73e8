"""构建器模块."""

from elasticchain.builders.bool_query import BoolQueryCompiler, CompiledQuery
from elasticchain.builders.payloads import (
    BulkDeleteRequest,
    BulkRequest,
    DocumentRequest,
    IndexRequest,
    MultiGetRequest,
    TableDefinition,
    UpdateRequest,
    build_bulk_delete_request,
    build_bulk_request,
    build_document_request,
    build_index_request,
    build_multi_get_request,
    build_table_definition,
    build_update_request,
)

__all__ = [
    "BoolQueryCompiler",
    "CompiledQuery",
    "IndexRequest",
    "BulkRequest",
    "BulkDeleteRequest",
    "DocumentRequest",
    "MultiGetRequest",
    "UpdateRequest",
    "TableDefinition",
    "build_index_request",
    "build_bulk_request",
    "build_document_request",
    "build_multi_get_request",
    "build_bulk_delete_request",
    "build_update_request",
    "build_table_definition",
]
