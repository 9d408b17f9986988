# tests/test_main.py
import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

import openpyxl
import requests

import main
from core.query_area.query_models import FieldNames

JDY_CONFIG_TEXT = """
[JianDaoYun]
api_base_url = https://api.example.com/api/v5
api_key = test_key
app_id = test_app
entry_id = test_entry
"""


class TestMainCommand(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "missing_config.ini")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _write_equipment(self, items) -> str:
        file_path = os.path.join(self.temp_dir, "equipment.json")
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(items, f, ensure_ascii=False)
        return file_path

    def _run(self, *args) -> int:
        with patch("builtins.print"):
            return main.main(["--config", self.config_path, *args])

    def test_generate_from_equipment_file(self):
        """从设备清单文件生成IO点表。"""
        equipment_file = self._write_equipment([
            {"name": "AI模块", "model": "LK411", "quantity": 1},
            {"name": "DI模块", "model": "LK610", "quantity": 1},
        ])
        output = os.path.join(self.temp_dir, "out", "站A_IO点表.xlsx")
        exit_code = self._run("--station", "站A", "--equipment-file", equipment_file, "--output", output)
        self.assertEqual(exit_code, 0)
        ws = openpyxl.load_workbook(output).active
        self.assertEqual(ws.max_row, 1 + 8 + 16)
        self.assertEqual(ws.cell(row=2, column=8).value, "站A", "场站名应取自命令行参数")

    def test_summary_only_writes_nothing(self):
        """--summary-only 只打印通道统计。"""
        equipment_file = self._write_equipment([{"name": "AI模块", "model": "LK411", "quantity": 2}])
        output = os.path.join(self.temp_dir, "summary.xlsx")
        exit_code = self._run("--station", "站A", "--equipment-file", equipment_file, "--output", output, "--summary-only")
        self.assertEqual(exit_code, 0)
        self.assertFalse(os.path.exists(output))

    def test_slot_overflow_exit_code(self):
        """模块数量超出机架容量时返回1。"""
        equipment_file = self._write_equipment([{"name": "DI模块", "model": "LK610", "quantity": 11}])
        output = os.path.join(self.temp_dir, "overflow.xlsx")
        exit_code = self._run("--station", "站A", "--equipment-file", equipment_file, "--output", output)
        self.assertEqual(exit_code, 1)
        self.assertFalse(os.path.exists(output))

    def test_invalid_equipment_file(self):
        """设备清单文件不存在或格式错误时返回1。"""
        self.assertEqual(self._run("--station", "站A", "--equipment-file", os.path.join(self.temp_dir, "none.json")), 1)
        bad_file = self._write_equipment({"name": "不是列表"})
        self.assertEqual(self._run("--station", "站A", "--equipment-file", bad_file), 1)

    def test_non_finite_quantity_is_skipped(self):
        """数量为 inf 的设备被跳过，其余设备正常生成点表。"""
        equipment_file = self._write_equipment([
            {"name": "AI模块", "model": "LK411", "quantity": "inf"},
            {"name": "DI模块", "model": "LK610", "quantity": 1},
        ])
        output = os.path.join(self.temp_dir, "inf.xlsx")
        exit_code = self._run("--station", "站A", "--equipment-file", equipment_file, "--output", output)
        self.assertEqual(exit_code, 0)
        self.assertEqual(openpyxl.load_workbook(output).active.max_row, 1 + 16)


class TestProjectQueryCommand(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "config.ini")
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(JDY_CONFIG_TEXT)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _run(self, *args):
        with patch("builtins.print") as mock_print:
            exit_code = main.main(["--config", self.config_path, *args])
        printed = "\n".join(" ".join(str(a) for a in call.args) for call in mock_print.call_args_list)
        return exit_code, printed

    @patch("requests.post")
    def test_project_lookup_prints_stations(self, mock_post):
        """--project 按项目编号查询并打印项目及场站。"""
        response = MagicMock()
        response.json.return_value = {"data": [{
            "_id": "p1",
            FieldNames.PROJECT_NAME: "示例项目",
            FieldNames.PROJECT_NUMBER: "P001",
            FieldNames.DESIGN_NUMBER: "SJ-01",
            FieldNames.STATION_NAME: "站A",
        }]}
        mock_post.return_value = response

        exit_code, printed = self._run("--project", "P001")

        self.assertEqual(exit_code, 0)
        payload = mock_post.call_args.kwargs["json"]
        self.assertEqual(payload["filter"]["cond"][0]["field"], FieldNames.PROJECT_NUMBER)
        self.assertEqual(payload["filter"]["cond"][0]["value"], ["P001"])
        self.assertIn("示例项目", printed)
        self.assertIn("SJ-01", printed)
        self.assertIn("站A", printed)

    @patch("requests.post")
    def test_project_lookup_api_failure(self, mock_post):
        """查询项目失败时返回1。"""
        mock_post.side_effect = requests.ConnectionError("网络不可用")
        exit_code, printed = self._run("--project", "P001")
        self.assertEqual(exit_code, 1)
        self.assertIn("查询项目数据失败", printed)

    def test_station_and_project_are_exclusive(self):
        """--station 与 --project 不能同时使用，也不能都不指定。"""
        with patch("sys.stderr"):
            with self.assertRaises(SystemExit):
                main.main(["--config", self.config_path, "--station", "站A", "--project", "P001"])
            with self.assertRaises(SystemExit):
                main.main(["--config", self.config_path])


if __name__ == '__main__':
    unittest.main()
