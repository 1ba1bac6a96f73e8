"""链式查询客户端使用示例.

本文件展示了如何使用 Client 完成建表、写入、查询、更新和删除。
"""

import random
from datetime import datetime

from elasticchain import Client, ConnectionSettings, DocumentNotFoundError

# 创建客户端，也可以使用 ConnectionSettings.from_env() 从环境变量读取
client = Client.from_settings(
    ConnectionSettings(
        hosts=["http://127.0.0.1:9201"],
        username="elastic",
        password="123456",
    )
)


# ==================== 示例1：建表 ====================
def example_create_table():
    """创建表和结构."""
    if client.table_exists("my_index"):
        print("表已存在")
        return None

    return client.create_table(
        {
            "id": {"type": "long"},
            "title": {"type": "text", "fielddata": True},
            "content": {"type": "text", "fielddata": True},
            "create_time": {"type": "text"},
            "test_a": {"type": "integer"},
            "name": {"type": "text", "fielddata": True},
            "age": {"type": "integer"},
            "sex": {"type": "integer"},
        },
        table="my_index",
    )


# ==================== 示例2：写入 ====================
def example_insert():
    """单条写入与批量写入."""
    # id 作为 ES 文档 ID，不会写入文档内容
    client.table("my_index").insert(
        {
            "id": random.randint(1, 99999),
            "title": "天有不测风云",
            "content": "月有阴晴圆缺",
            "create_time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "test_a": random.randint(1, 10),
            "name": "张三",
            "age": 26,
            "sex": 1,
        }
    )

    result = client.table("my_index").insert_all(
        [
            {"username": "张三", "age": 12},
            {"username": "李四", "age": 19},
        ]
    )
    print(f"批量写入是否有错误: {result.get('errors')}")


# ==================== 示例3：查询 ====================
def example_search():
    """链式条件查询."""
    paged = (
        client.table("my_index")
        # must 条件
        .where("title", "风云")
        .where_not_in("age", [27, 29])
        # should 条件，存在 must 时只影响评分
        .where_or("test_a", ">", 1)
        # 精确匹配
        .filter("sex", 1)
        .order_by("test_a", "asc")
        .select(["name", "age"])
        .page(1, 10)
        .paginate()
    )

    print(f"第 {paged.page}/{paged.total_pages} 页，共 {paged.total} 条")
    for item in paged.items:
        print(item)


# ==================== 示例4：按 id 更新、查询、删除 ====================
def example_by_id(doc_id: str):
    """按 id 操作文档."""
    client.table("my_index").update_by_id(doc_id, {"content": "今天你测试了吗"})
    print(client.table("my_index").find_by_id(doc_id))
    client.table("my_index").delete_by_id(doc_id)

    try:
        client.table("my_index").find_by_id(doc_id)
    except DocumentNotFoundError as e:
        print(f"已删除: {e}")


# ==================== 示例5：统计与批量删除 ====================
def example_count_and_delete():
    """统计、按 id 批量删除与按条件删除."""
    print(client.table("my_index").where("age", ">", 18).count())
    client.table("my_index").delete_by_ids(["1", "2"])
    result = client.table("my_index").filter("sex", 0).delete_all()
    print(f"按条件删除 {result['deleted']} 条")


if __name__ == "__main__":
    example_create_table()
    example_insert()
    example_search()
    example_count_and_delete()
