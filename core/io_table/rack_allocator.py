"""和利时LK系列机架/槽位分配"""

import logging

from .exceptions import SlotOverflowError

logger = logging.getLogger(__name__)

# 1号槽位固定用于通讯模块，IO模块只能使用 2~11 号槽位
FIRST_IO_SLOT = 2
LAST_IO_SLOT = 11


class RackSlotAllocator:
    """
    负责为每个IO模块实例分配机架号和槽位号。

    每个模块实例处理通道前调用 begin_unit()，通道处理完成后调用 end_unit()。
    当前机架槽位用完时自动切换到下一个机架，超出机架数量时抛出 SlotOverflowError。
    """

    def __init__(self, rack_count: int, start_rack: int = 1, start_slot: int = FIRST_IO_SLOT):
        self.rack_count = rack_count
        self.current_rack = start_rack
        self.current_slot = start_slot

    @property
    def slots_per_rack(self) -> int:
        return LAST_IO_SLOT - FIRST_IO_SLOT + 1

    def begin_unit(self) -> tuple[int, int]:
        """为下一个模块实例确定位置，返回 (机架号, 槽位号)"""
        if self.current_slot > LAST_IO_SLOT:
            self.current_rack += 1
            self.current_slot = FIRST_IO_SLOT
            logger.debug(f"机架槽位已满，切换到第 {self.current_rack} 号机架")
            if self.current_rack > self.rack_count:
                logger.error(f"IO模块数量超出了可用机架数量: rack_count={self.rack_count}, required_rack={self.current_rack}")
                raise SlotOverflowError(self.rack_count, self.current_rack)
        return self.current_rack, self.current_slot

    def end_unit(self) -> None:
        """当前模块实例的通道处理完毕，占用下一个槽位"""
        self.current_slot += 1
