"""设备清单数据模型、分类与通道统计"""

import logging
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence

from .model_catalog import ChannelClass, RegisterType, MODEL_CHANNEL_PROFILES, lookup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EquipmentItem:
    """设备清单中的一行，一行可以代表多个相同的物理模块 (quantity > 1)"""
    equipment_name: str   # 设备名称
    spec_model: str       # 规格型号
    quantity: int         # 数量
    station_name: str     # 场站名


@dataclass
class ChannelTotal:
    """通道数据统计结果"""
    count: int
    data_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "data_type": self.data_type}


def _to_quantity(value: Any) -> int:
    """数量转换为非负整数，浮点数直接截断；inf 抛出 OverflowError，nan 抛出 ValueError"""
    if value is None or value == "":
        return 0
    quantity = int(float(value))
    return quantity if quantity > 0 else 0


def convert_equipment_items(equipment_items: List[Dict[str, Any]], default_station: Optional[str] = None) -> List[EquipmentItem]:
    """
    将前端格式的设备数据 ({name, model, quantity, station_name}) 转换为内部设备数据结构。

    缺少名称或型号的记录会被跳过；没有 station_name 时使用 default_station。
    """
    equipment_list = []
    for i, item in enumerate(equipment_items):
        if not isinstance(item, dict):
            logger.warning(f"设备数据项 #{i + 1} 不是字典: {type(item)}，已跳过")
            continue
        name = item.get("name")
        model = item.get("model")
        if name is None or model is None:
            logger.warning(f"设备数据项 #{i + 1} 缺少名称或型号，已跳过: {item}")
            continue
        try:
            quantity = _to_quantity(item.get("quantity"))
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"设备 '{name}' 的数量无法解析: {item.get('quantity')!r}，已跳过")
            continue
        station_name = item.get("station_name") or default_station or ""
        equipment_list.append(EquipmentItem(
            equipment_name=str(name).strip(),
            spec_model=str(model).strip(),
            quantity=quantity,
            station_name=str(station_name),
        ))
    return equipment_list


def classify_equipment(equipment_list: Sequence[EquipmentItem]) -> Dict[ChannelClass, List[EquipmentItem]]:
    """
    按IO类型对设备进行分组，组内保持原始顺序。

    返回的字典按 AI/AO/DI/DO 顺序包含全部四个分组；型号无法匹配的设备不属于任何分组。
    """
    groups: Dict[ChannelClass, List[EquipmentItem]] = {channel_class: [] for channel_class in ChannelClass}
    for equipment in equipment_list:
        profile = lookup(equipment.spec_model)
        if profile is None:
            logger.debug(f"设备 '{equipment.equipment_name}' 型号 '{equipment.spec_model}' 不是IO模块，已忽略")
            continue
        groups[profile.channel_class].append(equipment)
    return groups


def calculate_channels(equipment_list: Sequence[EquipmentItem]) -> Dict[str, ChannelTotal]:
    """根据设备清单计算各类型通道总数及数据类型"""
    channel_totals: Dict[str, ChannelTotal] = {}
    for channel_class in ChannelClass:
        # 每个通道类型的数据类型由型号目录决定
        register_type = next(
            (p.register_type for p in MODEL_CHANNEL_PROFILES if p.channel_class == channel_class),
            RegisterType.BOOL,
        )
        channel_totals[channel_class.value] = ChannelTotal(count=0, data_type=register_type.value)

    for channel_class, group in classify_equipment(equipment_list).items():
        for equipment in group:
            if equipment.quantity == 0:
                continue
            profile = lookup(equipment.spec_model)
            channel_totals[channel_class.value].count += equipment.quantity * profile.channel_count

    logger.info("通道统计: " + ", ".join(f"{k}={v.count}" for k, v in channel_totals.items()))
    return channel_totals
