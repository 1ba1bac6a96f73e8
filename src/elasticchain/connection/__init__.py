"""连接配置模块 - 根据配置创建 Elasticsearch 客户端.

使用示例:
    from elasticchain.connection import ConnectionSettings, create_client

    es = create_client(ConnectionSettings(hosts=["http://localhost:9200"]))
"""

from .exceptions import ConnectionConfigError
from .models import ConnectionSettings
from .tool import create_client

__all__ = [
    "ConnectionSettings",
    "ConnectionConfigError",
    "create_client",
]
