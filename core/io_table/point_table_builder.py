"""
IO点表生成器

根据设备清单按 AI -> AO -> DI -> DO 的顺序逐个模块、逐个通道生成IO点表:
- 为每个模块实例分配机架号/槽位号 (RackSlotAllocator)
- 为每个通道分配PLC绝对地址，模拟量通道额外分配设定点位/报警/维护点位地址 (PLCAddressAllocator)
- 计算每个PLC地址对应的上位机Modbus通讯地址

所有计数器都保存在每次生成时新建的 AllocatorState 中，不同次生成之间互不影响。
任何 IOTableError 都会中止整张点表的生成，不返回部分结果。
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from .address_allocator import PLCAddressAllocator, PLCAddress
from .equipment import EquipmentItem, classify_equipment
from .io_point import (
    IOPoint, IOTable, ANALOG_SUB_POINTS, ANALOG_VALUE_HEADERS, PLACEHOLDER, derive_sub_point_name,
)
from .model_catalog import ChannelClass, ChannelProfile, RegisterType, get_rack_count, lookup
from .rack_allocator import RackSlotAllocator

logger = logging.getLogger(__name__)

READ_WRITE_PROPERTY = "R/W"
YES_MARK = "是"


@dataclass
class AllocatorState:
    """单次点表生成过程中的全部可变状态"""
    address_allocator: PLCAddressAllocator
    rack_allocator: RackSlotAllocator
    module_counters: Dict[ChannelClass, int] = field(
        default_factory=lambda: {channel_class: 1 for channel_class in ChannelClass}
    )
    index_counter: int = 1

    @classmethod
    def create(cls, rack_count: int) -> "AllocatorState":
        return cls(address_allocator=PLCAddressAllocator(), rack_allocator=RackSlotAllocator(rack_count))


class IOPointTableBuilder:
    """负责把设备清单转换为IO点表 (IOTable)。"""

    def build(self, equipment_list: Sequence[EquipmentItem], station_name: Optional[str] = None) -> IOTable:
        """
        生成IO点表。

        Args:
            equipment_list (Sequence[EquipmentItem]): 设备清单，顺序决定同类型模块的地址分配顺序。
            station_name (Optional[str]): 场站名，仅用于点表名称。

        Returns:
            IOTable: 按顺序排列的全部点位。

        Raises:
            SlotOverflowError: IO模块数量超出机架容量。
            AddrParseError: 生成的PLC地址无法转换为通讯地址。
        """
        if station_name is None:
            station_name = equipment_list[0].station_name if equipment_list else ""

        rack_count = get_rack_count(equipment_list)
        state = AllocatorState.create(rack_count)
        groups = classify_equipment(equipment_list)
        logger.info(
            f"开始生成场站 '{station_name}' 的IO点表: 设备 {len(equipment_list)} 项, 机架数量 {rack_count}, "
            + ", ".join(f"{k.value}模块 {len(v)} 项" for k, v in groups.items())
        )

        table = IOTable(table_name=f"{station_name}_IO表")
        for channel_class in ChannelClass:
            for equipment in groups[channel_class]:
                profile = lookup(equipment.spec_model)
                self._process_equipment(table, equipment, profile, state)

        logger.info(
            f"IO点表生成完成: 共 {len(table)} 个点位, REAL地址 {state.address_allocator.real_allocated} 个, "
            f"BOOL地址 {state.address_allocator.bool_allocated} 个, 占用至 {state.rack_allocator.current_rack} 号机架"
        )
        return table

    def _process_equipment(self, table: IOTable, equipment: EquipmentItem, profile: ChannelProfile, state: AllocatorState) -> None:
        """为一项设备的每个模块实例、每个通道生成点位"""
        for _ in range(equipment.quantity):
            rack, slot = state.rack_allocator.begin_unit()
            logger.debug(
                f"{profile.channel_class.value}模块 #{state.module_counters[profile.channel_class]} "
                f"'{equipment.equipment_name}' -> 机架 {rack} 槽位 {slot}"
            )
            for channel_index in range(profile.channel_count):
                channel_tag = f"{rack}_{slot}_{profile.channel_class.value}_{channel_index}"
                point = self._create_io_point(state.index_counter, equipment, profile, channel_tag)
                self._allocate_addresses(point, profile, state.address_allocator)
                table.add_row(point)
                state.index_counter += 1
            state.module_counters[profile.channel_class] += 1
            state.rack_allocator.end_unit()

    def _create_io_point(self, index: int, equipment: EquipmentItem, profile: ChannelProfile, channel_tag: str) -> IOPoint:
        """初始化点位的基础信息"""
        point = IOPoint(
            index=str(index),
            module_name=equipment.equipment_name,
            module_type=profile.channel_class.value,
            channel_tag=channel_tag,
            station_name=equipment.station_name,
            data_type=profile.register_type.value,
            read_write_property=READ_WRITE_PROPERTY,
            save_history=YES_MARK,
            power_off_protection=YES_MARK,
            maintenance_value=PLACEHOLDER,
        )
        if profile.channel_class == ChannelClass.AO:
            point.power_supply_type = PLACEHOLDER
            point.wire_system = PLACEHOLDER

        # REAL类型的量程和设定值由用户填写，BOOL类型不适用
        value_fill = "" if profile.is_analog else PLACEHOLDER
        for header in ANALOG_VALUE_HEADERS:
            point.set(header, value_fill)
        return point

    def _allocate_addresses(self, point: IOPoint, profile: ChannelProfile, allocator: PLCAddressAllocator) -> None:
        """分配PLC绝对地址，模拟量通道再按固定顺序分配附加点位地址"""
        primary = self._allocate(allocator, profile.register_type)
        point.plc_absolute_address = str(primary)
        point.host_comm_address = str(primary.modbus_address)

        if not profile.is_analog:
            for rule in ANALOG_SUB_POINTS:
                point.set(rule.name_header, PLACEHOLDER)
                point.set(rule.plc_header, PLACEHOLDER)
                point.set(rule.comm_header, PLACEHOLDER)
            return

        for rule in ANALOG_SUB_POINTS:
            address = self._allocate(allocator, rule.register_type)
            point.set(rule.name_header, derive_sub_point_name(point.variable_name_hmi, rule.suffix))
            point.set(rule.plc_header, str(address))
            point.set(rule.comm_header, str(address.modbus_address))

    @staticmethod
    def _allocate(allocator: PLCAddressAllocator, register_type: RegisterType) -> PLCAddress:
        if register_type == RegisterType.REAL:
            return allocator.allocate_real_address()
        return allocator.allocate_bool_address()


def build_io_point_table(equipment_list: Sequence[EquipmentItem], station_name: Optional[str] = None) -> IOTable:
    """生成IO点表的快捷函数"""
    return IOPointTableBuilder().build(equipment_list, station_name)
