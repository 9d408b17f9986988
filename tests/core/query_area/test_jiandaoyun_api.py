# tests/core/query_area/test_jiandaoyun_api.py
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import requests

from core.query_area.jiandaoyun_api import JianDaoYunAPI, PAGE_SIZE
from core.query_area.query_models import FieldNames

CONFIG_TEXT = """
[JianDaoYun]
api_base_url = https://api.example.com/api/v5/
api_key = test_key
app_id = test_app
entry_id = test_entry
timeout = 10
"""


def _response(data):
    response = MagicMock()
    response.json.return_value = {"data": data}
    response.raise_for_status.return_value = None
    return response


class TestJianDaoYunAPI(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "config.ini")
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(CONFIG_TEXT)
        self.api = JianDaoYunAPI(self.config_path)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_reads_config(self):
        """从配置文件读取API参数。"""
        self.assertEqual(self.api.api_base_url, "https://api.example.com/api/v5")
        self.assertEqual(self.api.api_key, "test_key")
        self.assertEqual(self.api.timeout, 10.0)

    def test_missing_section_raises(self):
        """缺少 [JianDaoYun] 配置段时抛出 KeyError。"""
        empty_config = os.path.join(self.temp_dir, "empty.ini")
        with open(empty_config, "w", encoding="utf-8") as f:
            f.write("[Logging]\nlog_level = INFO\n")
        with self.assertRaises(KeyError):
            JianDaoYunAPI(empty_config)

    @patch("requests.post")
    def test_query_site_devices_request(self, mock_post):
        """查询场站设备时按场站过滤，并携带Bearer认证头。"""
        mock_post.return_value = _response([{"_id": "a1"}])
        result = self.api.query_site_devices("站A")

        self.assertEqual(result, [{"_id": "a1"}])
        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://api.example.com/api/v5/app/entry/data/list")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer test_key")
        payload = kwargs["json"]
        self.assertEqual(payload["app_id"], "test_app")
        self.assertEqual(payload["entry_id"], "test_entry")
        self.assertEqual(payload["limit"], PAGE_SIZE)
        self.assertIn(FieldNames.EQUIPMENT_LIST, payload["fields"])
        self.assertEqual(payload["filter"]["rel"], "and")
        self.assertEqual(payload["filter"]["cond"][0]["field"], FieldNames.STATION_NAME)
        self.assertEqual(payload["filter"]["cond"][0]["value"], ["站A"])
        self.assertNotIn("data_id", payload)

    @patch("requests.post")
    def test_pagination(self, mock_post):
        """整页数据时继续查询，使用最后一条数据的 _id 作为分页标识。"""
        first_page = [{"_id": f"id{i}"} for i in range(PAGE_SIZE)]
        second_page = [{"_id": "last"}]
        mock_post.side_effect = [_response(first_page), _response(second_page)]

        result = self.api.query_projects("P001")

        self.assertEqual(len(result), PAGE_SIZE + 1)
        self.assertEqual(mock_post.call_count, 2)
        second_payload = mock_post.call_args_list[1].kwargs["json"]
        self.assertEqual(second_payload["data_id"], f"id{PAGE_SIZE - 1}")
        self.assertEqual(second_payload["filter"]["cond"][0]["field"], FieldNames.PROJECT_NUMBER)

    @patch("requests.post")
    def test_query_projects_without_filter(self, mock_post):
        """不指定项目编号时不添加过滤条件。"""
        mock_post.return_value = _response([])
        self.assertEqual(self.api.query_projects(), [])
        self.assertEqual(mock_post.call_args.kwargs["json"]["filter"]["cond"], [])

    @patch("requests.post")
    def test_missing_id_stops_pagination(self, mock_post):
        """整页数据的最后一条缺少 _id 时抛出异常。"""
        mock_post.return_value = _response([{"name": "x"}] * PAGE_SIZE)
        with self.assertRaises(ValueError):
            self.api.query_site_devices("站A")

    @patch("requests.post")
    def test_http_error_is_raised(self, mock_post):
        """HTTP错误会被记录日志并重新抛出。"""
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        mock_post.return_value = response
        with self.assertRaises(requests.HTTPError):
            self.api.query_site_devices("站A")


if __name__ == '__main__':
    unittest.main()
