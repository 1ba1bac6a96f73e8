"""链式查询客户端模块.

主要组件:
    - Client: 链式查询门面，累积查询状态并在终止操作时编译、发送、重置
    - RequestGateway: Elasticsearch 客户端的薄封装

使用示例:
    from elasticchain.client import Client

    client = Client.from_es(es)
    client.table("users").where("age", ">", 18).page(1, 20).get()
"""

from .gateway import RequestGateway
from .tool import Client

__all__ = [
    "Client",
    "RequestGateway",
]
