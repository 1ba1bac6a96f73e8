"""Client 单元测试."""

import unittest
from unittest.mock import MagicMock

from elasticsearch import ApiError

from elasticchain import Client, PagedResponse, QueryState
from elasticchain.client import RequestGateway
from elasticchain.exceptions import (
    DocumentNotFoundError,
    InvalidInputError,
    InvalidStateError,
)

SEARCH_RESPONSE = {
    "took": 3,
    "hits": {
        "total": {"value": 3, "relation": "eq"},
        "max_score": 1.0,
        "hits": [
            {"_id": "1", "_index": "my_index", "_source": {"name": "张三"}},
            {"_id": "2", "_index": "my_index", "_source": {"name": "李四"}},
        ],
    },
}


def make_api_error(status=500):
    """构造传输层异常."""
    meta = MagicMock()
    meta.status = status
    return ApiError("boom", meta=meta, body={"error": "boom"})


class TestClientState(unittest.TestCase):
    """Client 链式状态测试."""

    def setUp(self):
        """设置测试环境."""
        self.gateway = MagicMock(spec=RequestGateway)
        self.gateway.search.return_value = SEARCH_RESPONSE
        self.client = Client(self.gateway)

    def test_setters_chain(self):
        """测试链式调用返回同一客户端."""
        result = (
            self.client.table("my_index")
            .where("title", "风云")
            .where_or("test_a", ">", 1)
            .filter("sex", 1)
            .page(2, 10)
        )
        self.assertIs(result, self.client)
        self.assertEqual(self.client.state.table, "my_index")
        self.assertEqual(self.client.state.page, 2)
        self.assertEqual(self.client.state.page_size, 10)

    def test_setters_do_not_call_gateway(self):
        """测试设置状态不发起请求."""
        self.client.table("t").where("a", 1).where_or("b", 2).filter("c", 3).page()
        self.assertEqual(self.gateway.method_calls, [])

    def test_table_empty(self):
        """测试表名为空."""
        with self.assertRaises(InvalidInputError):
            self.client.table("")

    def test_where_empty_field(self):
        """测试字段名为空."""
        with self.assertRaises(InvalidInputError):
            self.client.where("", 1)

    def test_page_defaults(self):
        """测试默认分页."""
        self.client.page(3, 5).page()
        self.assertEqual((self.client.state.page, self.client.state.page_size), (1, 50))

    def test_page_non_positive(self):
        """测试分页参数非正数时不修改状态."""
        self.client.page(2, 10)
        for page, size in ((0, 10), (1, 0), (-1, 5), (1, True), (1.5, 10)):
            with self.assertRaises(InvalidInputError):
                self.client.page(page, size)
        self.assertEqual((self.client.state.page, self.client.state.page_size), (2, 10))

    def test_failed_setter_keeps_state(self):
        """测试校验失败时状态保持不变."""
        self.client.table("t").where("a", 1)
        with self.assertRaises(InvalidInputError):
            self.client.where("b", "in", "not-a-list")
        self.assertEqual(list(self.client.state.must), ["a"])

    def test_order_by(self):
        """测试排序."""
        self.client.table("t").order_by("age", "DESC").order_by("name")
        self.assertEqual(
            self.client.compile().to_dict()["sort"],
            [{"age": {"order": "desc"}}, {"name": {"order": "asc"}}],
        )

    def test_order_by_invalid_direction(self):
        """测试非法排序方向."""
        with self.assertRaises(InvalidInputError):
            self.client.order_by("age", "up")

    def test_select(self):
        """测试返回字段."""
        self.client.table("t").select(["name", "age"])
        self.assertEqual(self.client.compile().to_dict()["_source"], ["name", "age"])

    def test_where_in_and_not_in(self):
        """测试 where_in / where_not_in."""
        self.client.table("t").where_in("age", [27]).where_not_in("sex", [0])
        must = self.client.compile().to_dict()["query"]["bool"]["must"]
        self.assertEqual(
            must,
            [
                {"terms": {"age": [27]}},
                {"bool": {"must_not": [{"terms": {"sex": [0]}}]}},
            ],
        )

    def test_compile_does_not_reset(self):
        """测试 compile 不重置状态."""
        self.client.table("t").where("a", 1)
        self.client.compile()
        self.assertEqual(self.client.state.table, "t")

    def test_reset(self):
        """测试手动重置."""
        self.client.table("t").where("a", 1).reset()
        self.assertEqual(self.client.state, QueryState())


class TestClientSearch(unittest.TestCase):
    """Client 搜索测试."""

    def setUp(self):
        """设置测试环境."""
        self.gateway = MagicMock(spec=RequestGateway)
        self.gateway.search.return_value = SEARCH_RESPONSE
        self.client = Client(self.gateway)

    def test_get_match_all(self):
        """测试无条件搜索."""
        result = self.client.table("my_index").get()

        self.assertEqual(result, SEARCH_RESPONSE)
        self.gateway.search.assert_called_once_with(
            "my_index", {"query": {"match_all": {}}, "from": 0, "size": 50}
        )

    def test_get_bool_query(self):
        """测试带条件搜索."""
        self.client.table("my_index").where("title", "风云").where_or("age", ">", 15).page(2, 10).get()

        table, body = self.gateway.search.call_args.args
        self.assertEqual(table, "my_index")
        self.assertEqual(body["from"], 10)
        self.assertEqual(body["size"], 10)
        self.assertEqual(
            body["query"],
            {
                "bool": {
                    "must": [{"match": {"title": "风云"}}],
                    "should": [{"range": {"age": {"gt": 15}}}],
                }
            },
        )

    def test_get_without_table(self):
        """测试未指定表名时不发起请求."""
        with self.assertRaises(InvalidStateError):
            self.client.where("a", 1).get()
        self.gateway.search.assert_not_called()
        self.assertEqual(self.client.state, QueryState())

    def test_state_reset_after_success(self):
        """测试成功后状态被重置，与新客户端行为一致."""
        self.client.table("my_index").where("a", 1).filter("b", 2).page(3, 7).get()

        self.assertEqual(self.client.state, QueryState())
        with self.assertRaises(InvalidStateError):
            self.client.get()

        fresh = Client(MagicMock(spec=RequestGateway))
        self.assertEqual(
            self.client.table("x").compile().to_dict(),
            fresh.table("x").compile().to_dict(),
        )

    def test_state_reset_after_transport_error(self):
        """测试传输层异常原样抛出且状态被重置."""
        error = make_api_error()
        self.gateway.search.side_effect = error

        with self.assertRaises(ApiError) as ctx:
            self.client.table("my_index").where("a", 1).get()

        self.assertIs(ctx.exception, error)
        self.assertEqual(self.client.state, QueryState())

    def test_paginate(self):
        """测试分页解析."""
        paged = self.client.table("my_index").page(1, 2).paginate()

        self.assertIsInstance(paged, PagedResponse)
        self.assertEqual(paged.total, 3)
        self.assertEqual(paged.total_pages, 2)
        self.assertTrue(paged.has_next)
        self.assertEqual(paged.items[0], {"id": "1", "name": "张三"})
        self.assertEqual(self.client.state, QueryState())


class TestClientCrud(unittest.TestCase):
    """Client 增删改查测试."""

    def setUp(self):
        """设置测试环境."""
        self.gateway = MagicMock(spec=RequestGateway)
        self.client = Client(self.gateway)

    def test_insert_with_id(self):
        """测试带 id 写入."""
        self.gateway.index_document.return_value = {"result": "created"}

        result = self.client.table("T").insert({"id": "x", "a": 1})

        self.assertEqual(result, {"result": "created"})
        self.gateway.index_document.assert_called_once_with("T", {"a": 1}, "x")
        self.assertIsNone(self.client.state.table)

    def test_insert_empty(self):
        """测试空文档不发起请求."""
        with self.assertRaises(InvalidInputError):
            self.client.table("T").insert({})
        self.gateway.index_document.assert_not_called()
        self.assertIsNone(self.client.state.table)

    def test_insert_without_table(self):
        """测试未指定表名."""
        with self.assertRaises(InvalidStateError):
            self.client.insert({"a": 1})
        self.gateway.index_document.assert_not_called()

    def test_insert_all(self):
        """测试批量写入."""
        self.client.table("T").insert_all([{"a": 1}, {"b": 2}])

        self.gateway.bulk.assert_called_once_with(
            [
                {"index": {"_index": "T"}},
                {"a": 1},
                {"index": {"_index": "T"}},
                {"b": 2},
            ]
        )

    def test_insert_all_empty(self):
        """测试批量写入空列表."""
        with self.assertRaises(InvalidInputError):
            self.client.table("T").insert_all([])
        self.gateway.bulk.assert_not_called()

    def test_find_by_id(self):
        """测试按 id 查询."""
        self.gateway.get.return_value = {"_id": "abc", "found": True, "_source": {"content": "x"}}

        document = self.client.table("T").find_by_id("abc")

        self.gateway.get.assert_called_once_with("T", "abc")
        self.assertEqual(document, {"id": "abc", "content": "x"})

    def test_find_by_id_requires_str_id(self):
        """测试 id 必须是字符串，整数 id 需要先转换为字符串."""
        self.gateway.get.return_value = {"_id": "5", "found": True, "_source": {"a": 1}}

        with self.assertRaises(InvalidInputError):
            self.client.table("T").find_by_id(5)
        self.gateway.get.assert_not_called()

        self.client.table("T").insert({"id": 5, "a": 1})
        self.gateway.index_document.assert_called_once_with("T", {"a": 1}, "5")
        self.assertEqual(self.client.table("T").find_by_id("5"), {"id": "5", "a": 1})

    def test_find_by_id_not_found(self):
        """测试文档不存在时异常原样抛出且状态被重置."""
        self.gateway.get.side_effect = DocumentNotFoundError("T", "abc")

        with self.assertRaises(DocumentNotFoundError):
            self.client.table("T").where("a", 1).find_by_id("abc")
        self.assertEqual(self.client.state, QueryState())

    def test_find_by_id_empty(self):
        """测试 id 为空."""
        with self.assertRaises(InvalidInputError):
            self.client.table("T").find_by_id("")
        self.gateway.get.assert_not_called()

    def test_find_by_ids(self):
        """测试按多个 id 查询."""
        self.gateway.mget.return_value = {
            "docs": [
                {"_id": "a", "found": True, "_source": {"n": 1}},
                {"_id": "b", "found": False},
            ]
        }

        documents = self.client.table("T").find_by_ids(["a", "b"])

        self.gateway.mget.assert_called_once_with("T", ["a", "b"])
        self.assertEqual(documents, [{"id": "a", "n": 1}])

    def test_update_by_id(self):
        """测试按 id 更新."""
        self.client.table("T").update_by_id("abc", {"content": "x"})
        self.gateway.update.assert_called_once_with("T", "abc", {"doc": {"content": "x"}})

    def test_update_by_id_empty_doc(self):
        """测试更新内容为空."""
        with self.assertRaises(InvalidInputError):
            self.client.table("T").update_by_id("abc", {})
        self.gateway.update.assert_not_called()

    def test_delete_by_id(self):
        """测试按 id 删除."""
        self.client.table("T").delete_by_id("abc")
        self.gateway.delete.assert_called_once_with("T", "abc")

    def test_delete_by_ids(self):
        """测试按多个 id 批量删除."""
        self.gateway.bulk.return_value = {"errors": False, "items": []}

        result = self.client.table("T").where("a", 1).delete_by_ids(["a", "b", "a"])

        self.assertEqual(result, {"errors": False, "items": []})
        self.gateway.bulk.assert_called_once_with(
            [
                {"delete": {"_index": "T", "_id": "a"}},
                {"delete": {"_index": "T", "_id": "b"}},
            ]
        )
        self.assertEqual(self.client.state, QueryState())

    def test_delete_by_ids_empty(self):
        """测试 id 列表为空或含空 id 时不发起请求."""
        for ids in ([], ["a", ""]):
            with self.assertRaises(InvalidInputError):
                self.client.table("T").delete_by_ids(ids)
        self.gateway.bulk.assert_not_called()

    def test_delete_all(self):
        """测试按条件删除."""
        self.gateway.delete_by_query.return_value = {"deleted": 2}

        result = self.client.table("T").where("age", ">", 18).filter("sex", 1).page(3, 5).delete_all()

        self.assertEqual(result, {"deleted": 2})
        self.gateway.delete_by_query.assert_called_once_with(
            "T",
            {
                "bool": {
                    "must": [{"range": {"age": {"gt": 18}}}],
                    "filter": [{"term": {"sex": 1}}],
                }
            },
        )
        self.assertEqual(self.client.state, QueryState())

    def test_delete_all_without_conditions(self):
        """测试没有条件时拒绝删除且状态被重置."""
        with self.assertRaises(InvalidStateError):
            self.client.table("T").page(2, 10).delete_all()
        self.gateway.delete_by_query.assert_not_called()
        self.assertEqual(self.client.state, QueryState())

    def test_delete_all_transport_error(self):
        """测试按条件删除时传输层异常原样抛出且状态被重置."""
        error = make_api_error()
        self.gateway.delete_by_query.side_effect = error

        with self.assertRaises(ApiError) as ctx:
            self.client.table("T").where("a", 1).delete_all()
        self.assertIs(ctx.exception, error)
        self.assertEqual(self.client.state, QueryState())

    def test_count(self):
        """测试统计只发送 query 部分."""
        self.gateway.count.return_value = {"count": 7, "_shards": {}}

        total = self.client.table("T").where("title", "风云").order_by("age").page(2, 5).count()

        self.assertEqual(total, 7)
        self.gateway.count.assert_called_once_with(
            "T", {"bool": {"must": [{"match": {"title": "风云"}}]}}
        )
        self.assertEqual(self.client.state, QueryState())

    def test_count_match_all(self):
        """测试无条件统计."""
        self.gateway.count.return_value = {"count": 0}

        self.assertEqual(self.client.table("T").count(), 0)
        self.gateway.count.assert_called_once_with("T", {"match_all": {}})

    def test_terminal_without_table(self):
        """测试所有终止操作在未指定表名时都不发起请求."""
        calls = [
            lambda c: c.get(),
            lambda c: c.paginate(),
            lambda c: c.insert({"a": 1}),
            lambda c: c.insert_all([{"a": 1}]),
            lambda c: c.find_by_id("x"),
            lambda c: c.find_by_ids(["x"]),
            lambda c: c.update_by_id("x", {"a": 1}),
            lambda c: c.delete_by_id("x"),
            lambda c: c.delete_by_ids(["x"]),
            lambda c: c.delete_all(),
            lambda c: c.where("a", 1).delete_all(),
            lambda c: c.count(),
        ]
        for call in calls:
            with self.assertRaises(InvalidStateError):
                call(self.client)
        self.assertEqual(self.gateway.method_calls, [])


class TestClientAdmin(unittest.TestCase):
    """Client 表结构管理测试."""

    def setUp(self):
        """设置测试环境."""
        self.gateway = MagicMock(spec=RequestGateway)
        self.client = Client(self.gateway)

    def test_create_table(self):
        """测试建表."""
        columns = {"age": {"type": "integer"}}
        self.client.create_table(columns, table="my_index")

        self.gateway.create_index.assert_called_once_with(
            "my_index",
            {"number_of_shards": 3, "number_of_replicas": 2},
            {"_source": {"enabled": True}, "properties": columns},
        )

    def test_create_table_uses_selected_table(self):
        """测试使用 table() 指定的表且不重置状态."""
        self.client.table("my_index").create_table({"age": {"type": "integer"}})

        self.assertEqual(self.gateway.create_index.call_args.args[0], "my_index")
        self.assertEqual(self.client.state.table, "my_index")

    def test_create_table_validation(self):
        """测试建表参数校验."""
        with self.assertRaises(InvalidInputError):
            self.client.create_table({"age": {"type": "integer"}})
        with self.assertRaises(InvalidInputError):
            self.client.create_table({}, table="t")
        self.gateway.create_index.assert_not_called()

    def test_update_table(self):
        """测试更新表结构."""
        self.client.update_table({"name": {"type": "keyword"}}, table="t")
        self.gateway.update_mapping.assert_called_once_with("t", {"name": {"type": "keyword"}})

    def test_update_table_empty_columns(self):
        """测试更新表结构字段为空."""
        with self.assertRaises(InvalidInputError):
            self.client.update_table({}, table="t")

    def test_get_table_info(self):
        """测试获取表结构."""
        self.client.get_table_info(["a", "b"])
        self.gateway.get_mapping.assert_called_with(["a", "b"])

        self.client.get_table_info()
        self.gateway.get_mapping.assert_called_with(None)

        self.client.table("c").get_table_info()
        self.gateway.get_mapping.assert_called_with(["c"])

    def test_get_table_info_single_name(self):
        """测试单个表名字符串不会被拆成字符."""
        self.client.get_table_info("my_index")
        self.gateway.get_mapping.assert_called_once_with(["my_index"])

    def test_get_table_info_blank_name(self):
        """测试列表中包含空表名."""
        with self.assertRaises(InvalidInputError):
            self.client.get_table_info(["a", " "])
        self.gateway.get_mapping.assert_not_called()

    def test_drop_and_exists(self):
        """测试删除表与检查表是否存在."""
        self.gateway.index_exists.return_value = True

        self.assertTrue(self.client.table_exists("t"))
        self.client.drop_table("t")

        self.gateway.index_exists.assert_called_once_with("t")
        self.gateway.delete_index.assert_called_once_with("t")
