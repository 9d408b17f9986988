"""
IO点表数据模型
用于表示IO点表的每一行数据 (共53列)，以及表头与字段之间的映射
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .model_catalog import RegisterType

# 不适用的列统一填写 "/"
PLACEHOLDER = "/"


@dataclass
class IOPoint:
    """IO点表中的一行，所有字段均为字符串"""
    index: str = ""                                     # 序号
    module_name: str = ""                               # 模块名称
    module_type: str = ""                               # 模块类型
    power_supply_type: str = ""                         # 供电类型（有源/无源）
    wire_system: str = ""                               # 线制
    channel_tag: str = ""                               # 通道位号
    tag: str = ""                                       # 位号
    station_name: str = ""                              # 场站名
    variable_name_hmi: str = ""                         # 变量名称（HMI）
    variable_description: str = ""                      # 变量描述
    data_type: str = ""                                 # 数据类型
    read_write_property: str = ""                       # 读写属性
    save_history: str = ""                              # 保存历史
    power_off_protection: str = ""                      # 掉电保护
    range_lower_limit: str = ""                         # 量程低限
    range_upper_limit: str = ""                         # 量程高限
    sll_value: str = ""                                 # SLL设定值
    sll_setpoint: str = ""                              # SLL设定点位
    sll_setpoint_plc_address: str = ""                  # SLL设定点位_PLC地址
    sll_setpoint_comm_address: str = ""                 # SLL设定点位_通讯地址
    sl_value: str = ""                                  # SL设定值
    sl_setpoint: str = ""                               # SL设定点位
    sl_setpoint_plc_address: str = ""                   # SL设定点位_PLC地址
    sl_setpoint_comm_address: str = ""                  # SL设定点位_通讯地址
    sh_value: str = ""                                  # SH设定值
    sh_setpoint: str = ""                               # SH设定点位
    sh_setpoint_plc_address: str = ""                   # SH设定点位_PLC地址
    sh_setpoint_comm_address: str = ""                  # SH设定点位_通讯地址
    shh_value: str = ""                                 # SHH设定值
    shh_setpoint: str = ""                              # SHH设定点位
    shh_setpoint_plc_address: str = ""                  # SHH设定点位_PLC地址
    shh_setpoint_comm_address: str = ""                 # SHH设定点位_通讯地址
    ll_alarm: str = ""                                  # LL报警
    ll_alarm_plc_address: str = ""                      # LL报警_PLC地址
    ll_alarm_comm_address: str = ""                     # LL报警_通讯地址
    l_alarm: str = ""                                   # L报警
    l_alarm_plc_address: str = ""                       # L报警_PLC地址
    l_alarm_comm_address: str = ""                      # L报警_通讯地址
    h_alarm: str = ""                                   # H报警
    h_alarm_plc_address: str = ""                       # H报警_PLC地址
    h_alarm_comm_address: str = ""                      # H报警_通讯地址
    hh_alarm: str = ""                                  # HH报警
    hh_alarm_plc_address: str = ""                      # HH报警_PLC地址
    hh_alarm_comm_address: str = ""                     # HH报警_通讯地址
    maintenance_value: str = ""                         # 维护值设定
    maintenance_setpoint: str = ""                      # 维护值设定点位
    maintenance_setpoint_plc_address: str = ""          # 维护值设定点位_PLC地址
    maintenance_setpoint_comm_address: str = ""         # 维护值设定点位_通讯地址
    maintenance_enable_switch: str = ""                 # 维护使能开关点位
    maintenance_enable_switch_plc_address: str = ""     # 维护使能开关点位_PLC地址
    maintenance_enable_switch_comm_address: str = ""    # 维护使能开关点位_通讯地址
    plc_absolute_address: str = ""                      # PLC绝对地址
    host_comm_address: str = ""                         # 上位机通讯地址

    def get(self, header: str) -> Optional[str]:
        """按表头名称获取字段值，未知表头返回 None"""
        attr = HEADER_TO_FIELD.get(header)
        return getattr(self, attr) if attr else None

    def set(self, header: str, value: str) -> None:
        """按表头名称设置字段值"""
        attr = HEADER_TO_FIELD.get(header)
        if attr is None:
            raise KeyError(f"未知的表头: {header}")
        setattr(self, attr, value)

    def to_row(self) -> List[str]:
        """按表头顺序输出整行数据"""
        return [getattr(self, attr) for _, attr in IO_TABLE_FIELDS]

    def items(self) -> Iterator[Tuple[str, str]]:
        for header, attr in IO_TABLE_FIELDS:
            yield header, getattr(self, attr)

    @property
    def is_real(self) -> bool:
        return self.data_type == RegisterType.REAL.value

    def set_hmi_variable_name(self, hmi_name: str) -> None:
        """设置HMI变量名，REAL点位的设定点位/报警名称随之重新生成"""
        self.variable_name_hmi = hmi_name or ""
        if not self.is_real:
            return
        for rule in ANALOG_SUB_POINTS:
            self.set(rule.name_header, derive_sub_point_name(self.variable_name_hmi, rule.suffix))


# 表头与字段的对应关系，顺序即Excel列顺序
IO_TABLE_FIELDS: List[Tuple[str, str]] = [
    ("序号", "index"),
    ("模块名称", "module_name"),
    ("模块类型", "module_type"),
    ("供电类型（有源/无源）", "power_supply_type"),
    ("线制", "wire_system"),
    ("通道位号", "channel_tag"),
    ("位号", "tag"),
    ("场站名", "station_name"),
    ("变量名称（HMI）", "variable_name_hmi"),
    ("变量描述", "variable_description"),
    ("数据类型", "data_type"),
    ("读写属性", "read_write_property"),
    ("保存历史", "save_history"),
    ("掉电保护", "power_off_protection"),
    ("量程低限", "range_lower_limit"),
    ("量程高限", "range_upper_limit"),
    ("SLL设定值", "sll_value"),
    ("SLL设定点位", "sll_setpoint"),
    ("SLL设定点位_PLC地址", "sll_setpoint_plc_address"),
    ("SLL设定点位_通讯地址", "sll_setpoint_comm_address"),
    ("SL设定值", "sl_value"),
    ("SL设定点位", "sl_setpoint"),
    ("SL设定点位_PLC地址", "sl_setpoint_plc_address"),
    ("SL设定点位_通讯地址", "sl_setpoint_comm_address"),
    ("SH设定值", "sh_value"),
    ("SH设定点位", "sh_setpoint"),
    ("SH设定点位_PLC地址", "sh_setpoint_plc_address"),
    ("SH设定点位_通讯地址", "sh_setpoint_comm_address"),
    ("SHH设定值", "shh_value"),
    ("SHH设定点位", "shh_setpoint"),
    ("SHH设定点位_PLC地址", "shh_setpoint_plc_address"),
    ("SHH设定点位_通讯地址", "shh_setpoint_comm_address"),
    ("LL报警", "ll_alarm"),
    ("LL报警_PLC地址", "ll_alarm_plc_address"),
    ("LL报警_通讯地址", "ll_alarm_comm_address"),
    ("L报警", "l_alarm"),
    ("L报警_PLC地址", "l_alarm_plc_address"),
    ("L报警_通讯地址", "l_alarm_comm_address"),
    ("H报警", "h_alarm"),
    ("H报警_PLC地址", "h_alarm_plc_address"),
    ("H报警_通讯地址", "h_alarm_comm_address"),
    ("HH报警", "hh_alarm"),
    ("HH报警_PLC地址", "hh_alarm_plc_address"),
    ("HH报警_通讯地址", "hh_alarm_comm_address"),
    ("维护值设定", "maintenance_value"),
    ("维护值设定点位", "maintenance_setpoint"),
    ("维护值设定点位_PLC地址", "maintenance_setpoint_plc_address"),
    ("维护值设定点位_通讯地址", "maintenance_setpoint_comm_address"),
    ("维护使能开关点位", "maintenance_enable_switch"),
    ("维护使能开关点位_PLC地址", "maintenance_enable_switch_plc_address"),
    ("维护使能开关点位_通讯地址", "maintenance_enable_switch_comm_address"),
    ("PLC绝对地址", "plc_absolute_address"),
    ("上位机通讯地址", "host_comm_address"),
]

IO_TABLE_HEADERS: List[str] = [header for header, _ in IO_TABLE_FIELDS]
HEADER_TO_FIELD: Dict[str, str] = dict(IO_TABLE_FIELDS)

HMI_NAME_HEADER = "变量名称（HMI）"
PLC_ADDRESS_HEADER = "PLC绝对地址"
HOST_COMM_ADDRESS_HEADER = "上位机通讯地址"


@dataclass(frozen=True)
class SubPointRule:
    """模拟量通道附加点位 (设定点位/报警/维护) 的生成规则"""
    key: str                        # 逻辑名称
    name_header: str                # 点位名称列
    plc_header: str                 # PLC地址列
    comm_header: str                # 通讯地址列
    suffix: str                     # 拼接到HMI变量名后的后缀
    register_type: RegisterType     # 分配地址的数据类型


# 顺序即地址分配顺序
ANALOG_SUB_POINTS: List[SubPointRule] = [
    SubPointRule("sll_set", "SLL设定点位", "SLL设定点位_PLC地址", "SLL设定点位_通讯地址", "_LoLoLimit", RegisterType.REAL),
    SubPointRule("sl_set", "SL设定点位", "SL设定点位_PLC地址", "SL设定点位_通讯地址", "_LoLimit", RegisterType.REAL),
    SubPointRule("sh_set", "SH设定点位", "SH设定点位_PLC地址", "SH设定点位_通讯地址", "_HiLimit", RegisterType.REAL),
    SubPointRule("shh_set", "SHH设定点位", "SHH设定点位_PLC地址", "SHH设定点位_通讯地址", "_HiHiLimit", RegisterType.REAL),
    SubPointRule("ll_alarm", "LL报警", "LL报警_PLC地址", "LL报警_通讯地址", "_LL", RegisterType.BOOL),
    SubPointRule("l_alarm", "L报警", "L报警_PLC地址", "L报警_通讯地址", "_L", RegisterType.BOOL),
    SubPointRule("h_alarm", "H报警", "H报警_PLC地址", "H报警_通讯地址", "_H", RegisterType.BOOL),
    SubPointRule("hh_alarm", "HH报警", "HH报警_PLC地址", "HH报警_通讯地址", "_HH", RegisterType.BOOL),
    SubPointRule("maint_val_set", "维护值设定点位", "维护值设定点位_PLC地址", "维护值设定点位_通讯地址", "_whz", RegisterType.REAL),
    SubPointRule("maint_enable", "维护使能开关点位", "维护使能开关点位_PLC地址", "维护使能开关点位_通讯地址", "_whzzt", RegisterType.BOOL),
]

# REAL点位需要用户填写、BOOL点位填 "/" 的数值列
ANALOG_VALUE_HEADERS: List[str] = ["量程低限", "量程高限", "SLL设定值", "SL设定值", "SH设定值", "SHH设定值"]


def derive_sub_point_name(hmi_name: Optional[str], suffix: str) -> str:
    """HMI变量名非空时返回 变量名+后缀，否则只返回后缀 (与Excel公式中的 ISBLANK 判断一致，空格不算空)"""
    if hmi_name:
        return f"{hmi_name}{suffix}"
    return suffix


@dataclass
class IOTable:
    """IO点表，包含多行IO点位数据"""
    table_name: str
    rows: List[IOPoint] = field(default_factory=list)

    def add_row(self, row: IOPoint) -> None:
        self.rows.append(row)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[IOPoint]:
        return iter(self.rows)

    @property
    def headers(self) -> List[str]:
        return list(IO_TABLE_HEADERS)

    def to_rows(self) -> List[List[str]]:
        return [row.to_row() for row in self.rows]
