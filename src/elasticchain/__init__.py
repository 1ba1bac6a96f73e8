"""elasticchain - Elasticsearch 链式查询客户端.

以链式调用组合表名、must/should/filter 条件、分页和按 id 的增删改查，
并将累积的状态编译为单个 ES 请求体。

主要功能:
    - Client: 链式查询门面
    - BoolQueryCompiler: 将查询状态编译为 bool 查询
    - ResponseParser: 解析搜索结果为分页对象

使用示例:
    from elasticchain import Client, ConnectionSettings

    client = Client.from_settings(ConnectionSettings(hosts=["http://127.0.0.1:9201"]))
    result = client.table("my_index").where("title", "风云").where_or("age", ">", 15).get()
"""

__version__ = "0.1.0"

# 导出构建器
from elasticchain.builders import BoolQueryCompiler, CompiledQuery

# 导出客户端
from elasticchain.client import Client, RequestGateway

# 导出连接配置
from elasticchain.connection import ConnectionConfigError, ConnectionSettings, create_client

# 导出核心组件
from elasticchain.core import (
    ClauseKind,
    Condition,
    ConditionOperator,
    QueryState,
    SortDirection,
)

# 导出异常
from elasticchain.exceptions import (
    DocumentNotFoundError,
    EsChainError,
    InvalidInputError,
    InvalidStateError,
    ValidationError,
)

# 导出解析器
from elasticchain.parsers import PagedResponse, ResponseParser

__all__ = [
    # 版本
    "__version__",
    # 客户端
    "Client",
    "RequestGateway",
    # 构建器
    "BoolQueryCompiler",
    "CompiledQuery",
    # 核心组件
    "Condition",
    "ConditionOperator",
    "ClauseKind",
    "SortDirection",
    "QueryState",
    # 连接配置
    "ConnectionSettings",
    "create_client",
    # 解析器
    "ResponseParser",
    "PagedResponse",
    # 异常
    "EsChainError",
    "ValidationError",
    "InvalidInputError",
    "InvalidStateError",
    "DocumentNotFoundError",
    "ConnectionConfigError",
]
