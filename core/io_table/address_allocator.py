"""PLC地址分配与Modbus通讯地址转换"""

import logging
import re
from dataclasses import dataclass
from typing import Union

from .exceptions import AddrParseError

logger = logging.getLogger(__name__)

# 地址分配起点
START_MD_ADDRESS = 320
START_MX_BYTE = 20
START_MX_BIT = 0
MD_ADDRESS_STEP = 4

# Modbus地址偏移 (沿用原Excel公式中的常量，不可修改)
# %MDx:   (x // 2) + 3000 (MD基地址) + 40000 (保持寄存器区) + 1 (Modbus从1开始)
# %MXm.n: (m * 8) + n + 3000 (MX基地址) + 1
REAL_MODBUS_OFFSET = 43001
BOOL_MODBUS_OFFSET = 3001

_MD_PATTERN = re.compile(r"%MD(\d+)")
_MX_PATTERN = re.compile(r"%MX(\d+)\.([0-7])")


class PLCAddress:
    """PLC地址基类，子类为 RealAddress (%MD) 与 BoolAddress (%MX)"""

    @property
    def modbus_address(self) -> int:
        raise NotImplementedError

    @classmethod
    def parse(cls, plc_address: str) -> "PLCAddress":
        """从字符串解析PLC地址，格式无法识别时抛出 AddrParseError"""
        if not isinstance(plc_address, str):
            raise AddrParseError(f"PLC地址必须是字符串: {plc_address!r}")
        md_match = _MD_PATTERN.fullmatch(plc_address)
        if md_match:
            return RealAddress(int(md_match.group(1)))
        mx_match = _MX_PATTERN.fullmatch(plc_address)
        if mx_match:
            return BoolAddress(int(mx_match.group(1)), int(mx_match.group(2)))
        raise AddrParseError(f"未识别的PLC地址格式 (非%MD也非%MX): {plc_address!r}")


@dataclass(frozen=True)
class RealAddress(PLCAddress):
    """REAL类型地址 %MD<word_offset>"""
    word_offset: int

    def __str__(self) -> str:
        return f"%MD{self.word_offset}"

    @property
    def modbus_address(self) -> int:
        return self.word_offset // 2 + REAL_MODBUS_OFFSET


@dataclass(frozen=True)
class BoolAddress(PLCAddress):
    """BOOL类型地址 %MX<byte>.<bit>，bit 取值 0~7"""
    byte: int
    bit: int

    def __post_init__(self):
        if not 0 <= self.bit <= 7:
            raise AddrParseError(f"%MX地址的位号必须在0~7之间: %MX{self.byte}.{self.bit}")

    def __str__(self) -> str:
        return f"%MX{self.byte}.{self.bit}"

    @property
    def modbus_address(self) -> int:
        return self.byte * 8 + self.bit + BOOL_MODBUS_OFFSET


def get_modbus_address(plc_address: Union[str, PLCAddress]) -> int:
    """
    根据PLC地址计算上位机Modbus通讯地址。
    规则:
    - %MDx:   Modbus地址 = (x // 2) + 43001
    - %MXm.n: Modbus地址 = (m * 8) + n + 3001
    无法识别的地址抛出 AddrParseError，不会返回默认值。
    """
    if isinstance(plc_address, str):
        plc_address = PLCAddress.parse(plc_address)
    return plc_address.modbus_address


class PLCAddressAllocator:
    """负责PLC地址的分配和管理，REAL与BOOL地址使用两个相互独立的游标。"""

    def __init__(self, start_md_address=START_MD_ADDRESS, start_mx_byte=START_MX_BYTE, start_mx_bit=START_MX_BIT):
        self.current_md_address = start_md_address
        self.current_mx_byte = start_mx_byte
        self.current_mx_bit = start_mx_bit
        self.real_allocated = 0
        self.bool_allocated = 0
        logger.debug(f"PLCAddressAllocator initialized: MD starts at {self.current_md_address}, MX starts at {self.current_mx_byte}.{self.current_mx_bit}")

    def allocate_real_address(self) -> RealAddress:
        """分配一个REAL类型的地址 (%MD)。"""
        address = RealAddress(self.current_md_address)
        self.current_md_address += MD_ADDRESS_STEP
        self.real_allocated += 1
        return address

    def allocate_bool_address(self) -> BoolAddress:
        """分配一个BOOL类型的地址 (%MX)。"""
        address = BoolAddress(self.current_mx_byte, self.current_mx_bit)
        self.current_mx_bit += 1
        if self.current_mx_bit > 7:
            self.current_mx_bit = 0
            self.current_mx_byte += 1
        self.bool_allocated += 1
        return address
