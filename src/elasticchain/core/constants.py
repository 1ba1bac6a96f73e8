"""elasticchain 常量定义模块."""


class Pagination:
    """分页默认值."""

    DEFAULT_PAGE = 1
    DEFAULT_PAGE_SIZE = 50


class TableDefaults:
    """建表默认设置."""

    # 主分片
    NUMBER_OF_SHARDS = 3
    # 副本分片
    NUMBER_OF_REPLICAS = 2
    # 保存原始文本
    SOURCE_ENABLED = True


# 文档中作为 ES 文档 ID 的保留键
DOCUMENT_ID_KEY = "id"
