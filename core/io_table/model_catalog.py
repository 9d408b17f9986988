"""
PLC模块型号目录
定义设备规格型号到IO通道配置(通道类型、通道数、数据类型)的映射
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .equipment import EquipmentItem

logger = logging.getLogger(__name__)


class ChannelClass(str, Enum):
    """IO通道类型，声明顺序即点表生成时的处理顺序"""
    AI = "AI"
    AO = "AO"
    DI = "DI"
    DO = "DO"


class RegisterType(str, Enum):
    """数据类型: REAL 占用 %MD 双字，BOOL 占用 %MX 单个位"""
    REAL = "REAL"
    BOOL = "BOOL"


@dataclass(frozen=True)
class ChannelProfile:
    """单个型号的通道配置"""
    model_key: str                  # 型号关键字 (例如 'LK411')
    channel_class: ChannelClass     # 通道类型
    channel_count: int              # 每个模块的通道数
    register_type: RegisterType     # 数据类型

    @property
    def is_analog(self) -> bool:
        return self.register_type == RegisterType.REAL


# 顺序即匹配优先级: 取第一个 model_key 包含于规格型号中的配置
MODEL_CHANNEL_PROFILES: List[ChannelProfile] = [
    ChannelProfile("LK610", ChannelClass.DI, 16, RegisterType.BOOL),
    ChannelProfile("LK710", ChannelClass.DO, 16, RegisterType.BOOL),
    ChannelProfile("LK411", ChannelClass.AI, 8, RegisterType.REAL),
    ChannelProfile("LK512", ChannelClass.AO, 8, RegisterType.REAL),
]

# 扩展背板型号，数量即机架数量
RACK_MODEL_KEY = "LK117"
DEFAULT_RACK_COUNT = 1


def lookup(spec_model: str, profiles: Sequence[ChannelProfile] = MODEL_CHANNEL_PROFILES) -> Optional[ChannelProfile]:
    """
    根据规格型号查找通道配置。

    Args:
        spec_model (str): 设备规格型号，例如 "LK411 8通道AI模块"。
        profiles (Sequence[ChannelProfile]): 有序的型号配置列表。

    Returns:
        Optional[ChannelProfile]: 第一个匹配的配置，没有匹配时返回 None。
    """
    if not spec_model:
        return None
    for profile in profiles:
        if profile.model_key in spec_model:
            return profile
    return None


def get_rack_count(equipment_list: Sequence["EquipmentItem"]) -> int:
    """获取机架数量: 第一个包含 LK117 的设备的数量，没有则默认为1个机架"""
    for equipment in equipment_list:
        if RACK_MODEL_KEY in equipment.spec_model:
            logger.debug(f"从设备 '{equipment.equipment_name}' ({equipment.spec_model}) 获取机架数量: {equipment.quantity}")
            return equipment.quantity
    return DEFAULT_RACK_COUNT
