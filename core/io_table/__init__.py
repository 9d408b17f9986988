"""IO点表生成相关模块"""

from .exceptions import IOTableError, SlotOverflowError, AddrParseError
from .model_catalog import ChannelClass, RegisterType, ChannelProfile, MODEL_CHANNEL_PROFILES, lookup, get_rack_count
from .equipment import EquipmentItem, ChannelTotal, convert_equipment_items, classify_equipment, calculate_channels
from .rack_allocator import RackSlotAllocator
from .address_allocator import PLCAddress, RealAddress, BoolAddress, PLCAddressAllocator, get_modbus_address
from .io_point import IOPoint, IOTable, IO_TABLE_HEADERS, derive_sub_point_name
from .point_table_builder import AllocatorState, IOPointTableBuilder, build_io_point_table
from .excel_exporter import IOExcelExporter

__all__ = [
    "IOTableError", "SlotOverflowError", "AddrParseError",
    "ChannelClass", "RegisterType", "ChannelProfile", "MODEL_CHANNEL_PROFILES", "lookup", "get_rack_count",
    "EquipmentItem", "ChannelTotal", "convert_equipment_items", "classify_equipment", "calculate_channels",
    "RackSlotAllocator",
    "PLCAddress", "RealAddress", "BoolAddress", "PLCAddressAllocator", "get_modbus_address",
    "IOPoint", "IOTable", "IO_TABLE_HEADERS", "derive_sub_point_name",
    "AllocatorState", "IOPointTableBuilder", "build_io_point_table",
    "IOExcelExporter",
]
