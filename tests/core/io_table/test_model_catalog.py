# tests/core/io_table/test_model_catalog.py
import unittest

from core.io_table.model_catalog import ChannelClass, RegisterType, lookup, get_rack_count
from core.io_table.equipment import (
    EquipmentItem,
    calculate_channels,
    classify_equipment,
    convert_equipment_items,
)

STATION = "测试场站"


def _item(name: str, model: str, quantity: int = 1) -> EquipmentItem:
    return EquipmentItem(equipment_name=name, spec_model=model, quantity=quantity, station_name=STATION)


class TestModelCatalog(unittest.TestCase):

    def test_lookup_known_models(self):
        """测试四种IO模块型号的通道配置。"""
        expected = {
            "LK610": (ChannelClass.DI, 16, RegisterType.BOOL),
            "LK710": (ChannelClass.DO, 16, RegisterType.BOOL),
            "LK411": (ChannelClass.AI, 8, RegisterType.REAL),
            "LK512": (ChannelClass.AO, 8, RegisterType.REAL),
        }
        for model, (channel_class, count, register_type) in expected.items():
            with self.subTest(model=model):
                profile = lookup(f"{model} 模块")
                self.assertIsNotNone(profile)
                self.assertEqual(profile.channel_class, channel_class)
                self.assertEqual(profile.channel_count, count)
                self.assertEqual(profile.register_type, register_type)

    def test_lookup_uses_first_match_in_catalog_order(self):
        """型号同时包含多个关键字时，按目录顺序取第一个匹配项。"""
        self.assertEqual(lookup("LK411/LK610").channel_class, ChannelClass.DI)
        self.assertEqual(lookup("LK512-LK710").channel_class, ChannelClass.DO)

    def test_lookup_non_io_models(self):
        """非IO模块、空型号以及大小写不同的型号都不匹配。"""
        self.assertIsNone(lookup("LK117"))
        self.assertIsNone(lookup(""))
        self.assertIsNone(lookup("lk411"))
        self.assertIsNone(lookup("电源模块"))

    def test_rack_count_from_first_lk117(self):
        """机架数量取第一个 LK117 设备的数量。"""
        equipment = [_item("AI模块", "LK411"), _item("背板", "LK117", 3), _item("背板2", "LK117", 5)]
        self.assertEqual(get_rack_count(equipment), 3)

    def test_rack_count_defaults_to_one(self):
        """没有 LK117 设备时默认1个机架。"""
        self.assertEqual(get_rack_count([_item("AI模块", "LK411", 2)]), 1)
        self.assertEqual(get_rack_count([]), 1)


class TestEquipmentClassification(unittest.TestCase):

    def test_classify_keeps_order_and_all_groups(self):
        """分类结果按 AI/AO/DI/DO 顺序包含全部分组，组内保持原始顺序。"""
        equipment = [
            _item("DI-1", "LK610"),
            _item("AI-1", "LK411"),
            _item("背板", "LK117"),
            _item("AI-2", "LK411"),
        ]
        groups = classify_equipment(equipment)
        self.assertEqual(list(groups.keys()), [ChannelClass.AI, ChannelClass.AO, ChannelClass.DI, ChannelClass.DO])
        self.assertEqual([e.equipment_name for e in groups[ChannelClass.AI]], ["AI-1", "AI-2"])
        self.assertEqual([e.equipment_name for e in groups[ChannelClass.DI]], ["DI-1"])
        self.assertEqual(groups[ChannelClass.AO], [])
        self.assertEqual(groups[ChannelClass.DO], [])

    def test_calculate_channels(self):
        """通道统计 = 数量 x 每模块通道数，未出现的类型计数为0。"""
        equipment = [
            _item("AI模块", "LK411", 2),
            _item("DI模块", "LK610", 1),
            _item("背板", "LK117", 2),
            _item("空数量", "LK710", 0),
        ]
        totals = calculate_channels(equipment)
        self.assertEqual(set(totals.keys()), {"AI", "AO", "DI", "DO"})
        self.assertEqual(totals["AI"].to_dict(), {"count": 16, "data_type": "REAL"})
        self.assertEqual(totals["AO"].to_dict(), {"count": 0, "data_type": "REAL"})
        self.assertEqual(totals["DI"].to_dict(), {"count": 16, "data_type": "BOOL"})
        self.assertEqual(totals["DO"].to_dict(), {"count": 0, "data_type": "BOOL"})


class TestConvertEquipmentItems(unittest.TestCase):

    def test_convert_valid_items(self):
        """转换前端格式的设备数据，数量截断为非负整数。"""
        raw = [
            {"name": "AI模块", "model": "LK411", "quantity": "2.7", "station_name": "站A"},
            {"name": "DO模块", "model": "LK710", "quantity": -3},
            {"name": "DI模块", "model": "LK610"},
        ]
        items = convert_equipment_items(raw, default_station="默认站")
        self.assertEqual(len(items), 3)
        self.assertEqual(items[0], EquipmentItem("AI模块", "LK411", 2, "站A"))
        self.assertEqual(items[1].quantity, 0)
        self.assertEqual(items[1].station_name, "默认站")
        self.assertEqual(items[2].quantity, 0)

    def test_convert_skips_invalid_items(self):
        """缺少名称/型号、非字典、数量无法解析的记录会被跳过。"""
        raw = [
            {"model": "LK411", "quantity": 1},
            {"name": "AI模块", "quantity": 1},
            "not a dict",
            {"name": "坏数量", "model": "LK411", "quantity": "abc"},
            {"name": "正常", "model": "LK411", "quantity": 1},
        ]
        items = convert_equipment_items(raw)
        self.assertEqual([item.equipment_name for item in items], ["正常"])
        self.assertEqual(items[0].station_name, "")

    def test_convert_skips_non_finite_quantity(self):
        """数量为 inf 或 nan 时跳过该记录，其余记录正常转换。"""
        raw = [
            {"name": "无穷数量", "model": "LK411", "quantity": "inf"},
            {"name": "无穷数量2", "model": "LK411", "quantity": float("inf")},
            {"name": "非数字", "model": "LK610", "quantity": "nan"},
            {"name": "正常", "model": "LK610", "quantity": 1},
        ]
        items = convert_equipment_items(raw, default_station="站A")
        self.assertEqual([item.equipment_name for item in items], ["正常"])


if __name__ == '__main__':
    unittest.main()
