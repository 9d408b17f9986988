"""IO点表生成过程中的异常定义"""


class IOTableError(Exception):
    """IO点表生成异常基类，任何子类异常都会中止整张点表的生成"""
    pass


class SlotOverflowError(IOTableError):
    """IO模块数量超出了可用机架的槽位容量"""

    def __init__(self, rack_count: int, required_rack: int):
        self.rack_count = rack_count
        self.required_rack = required_rack
        super().__init__(
            f"IO模块数量超出了可用机架数量: 当前机架数量为 {rack_count}，"
            f"需要使用第 {required_rack} 号机架，请增加机架(LK117)数量"
        )


class AddrParseError(IOTableError):
    """PLC地址格式无法识别 (非 %MD<n> 也非 %MX<n>.<0-7>)"""
    pass
