import logging
from typing import List, Optional

import openpyxl
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .io_point import (
    IOPoint, IOTable, IO_TABLE_HEADERS, ANALOG_SUB_POINTS, HMI_NAME_HEADER, PLACEHOLDER,
)

logger = logging.getLogger(__name__)

IO_SHEET_NAME = "IO点表"

# 需要用户填写的字段（将在导出时高亮显示）
HIGHLIGHT_FIELDS = {
    "供电类型（有源/无源）", "线制", "位号", "变量名称（HMI）", "变量描述",
    "量程低限", "量程高限", "SLL设定值", "SL设定值", "SH设定值", "SHH设定值",
}

# 通讯地址列以数字写入
COMM_ADDRESS_HEADERS = {
    header for header in IO_TABLE_HEADERS if header.endswith("_通讯地址")
} | {"上位机通讯地址"}

MIN_COLUMN_WIDTH = 10.0
MAX_COLUMN_WIDTH = 50.0


def _estimate_width(text: str) -> float:
    """估算文本显示宽度，中文字符宽度按ASCII字符的2倍计算"""
    return float(sum(1 if ord(ch) < 128 else 2 for ch in text))


class PLCSheetExporter:
    """
    负责生成 "IO点表" Sheet页。

    点表内容（地址、通讯地址、点位名称）已经由 IOPointTableBuilder 生成，
    这里只负责写入单元格、设置公式和样式:
    - 表头加粗、所有单元格细边框、左对齐。
    - 需要用户填写的列高亮（值为 "/" 的单元格以及BOOL点位的量程列除外）。
    - use_formulas 为 True 时，REAL点位的设定点位/报警名称写为引用 "变量名称（HMI）" 列的Excel公式，
      用户在Excel中填写HMI变量名后名称会自动更新。
    """

    def __init__(self):
        self.headers_plc = list(IO_TABLE_HEADERS)
        self.hmi_name_column_letter = get_column_letter(self.headers_plc.index(HMI_NAME_HEADER) + 1)
        self.header_font = Font(bold=True)
        self.left_alignment = Alignment(horizontal='left', vertical='center')
        thin_side = Side(border_style="thin", color="000000")
        self.thin_border_style = Border(left=thin_side, right=thin_side, top=thin_side, bottom=thin_side)
        self.user_input_fill = PatternFill(start_color="FFFFFF00", end_color="FFFFFF00", fill_type="solid")

    def _build_sub_point_formula(self, excel_row: int, suffix: str) -> str:
        hmi_cell = f"{self.hmi_name_column_letter}{excel_row}"
        return f'=IF(ISBLANK({hmi_cell}),"{suffix}",{hmi_cell}&"{suffix}")'

    def _row_values(self, point: IOPoint, excel_row: int, use_formulas: bool) -> List:
        """生成一行要写入的单元格值"""
        row_values = []
        for header, value in point.items():
            if header in COMM_ADDRESS_HEADERS and value.isdigit():
                row_values.append(int(value))
            else:
                row_values.append(value)

        if use_formulas and point.is_real:
            for rule in ANALOG_SUB_POINTS:
                row_values[self.headers_plc.index(rule.name_header)] = self._build_sub_point_formula(excel_row, rule.suffix)
        return row_values

    def _should_highlight(self, header: str, value: str, point: IOPoint) -> bool:
        if header not in HIGHLIGHT_FIELDS:
            return False
        if not point.is_real and header.startswith("量程"):
            return False
        return value != PLACEHOLDER

    def _apply_row_styles(self, ws: Worksheet, excel_row: int, point: IOPoint):
        """为指定行中的单元格应用高亮、边框和对齐样式。"""
        for col_idx, (header, value) in enumerate(point.items(), 1):
            cell = ws.cell(row=excel_row, column=col_idx)
            cell.border = self.thin_border_style
            cell.alignment = self.left_alignment
            if self._should_highlight(header, value, point):
                cell.fill = self.user_input_fill

    def _adjust_column_widths(self, ws: Worksheet, table: IOTable):
        """根据表头和内容估算列宽，公式单元格不参与计算"""
        widths = [max(_estimate_width(header) + 2, MIN_COLUMN_WIDTH) for header in self.headers_plc]
        for point in table:
            for col_idx, value in enumerate(point.to_row()):
                widths[col_idx] = max(widths[col_idx], _estimate_width(value) + 2)
        for col_idx, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = min(width, MAX_COLUMN_WIDTH)

    def populate_sheet(self, ws: Worksheet, table: IOTable, use_formulas: bool = True):
        """填充IO点表数据到指定的工作表。"""
        ws.append(self.headers_plc)
        for cell in ws[1]:
            cell.font = self.header_font
            cell.alignment = self.left_alignment
            cell.border = self.thin_border_style
            if cell.value in HIGHLIGHT_FIELDS:
                cell.fill = self.user_input_fill

        for point in table:
            excel_row = ws.max_row + 1
            ws.append(self._row_values(point, excel_row, use_formulas))
            self._apply_row_styles(ws, excel_row, point)

        self._adjust_column_widths(ws, table)


class IOExcelExporter:
    """负责将IO点表导出到Excel文件。"""

    def __init__(self):
        self.plc_sheet_exporter = PLCSheetExporter()

    def export_to_excel(self, table: Optional[IOTable], filename: str = "IO_Table.xlsx", use_formulas: bool = True) -> bool:
        """
        将IO点表导出到指定的Excel文件。

        Returns:
            bool: 导出成功返回 True，没有数据或保存失败返回 False。
        """
        if table is None or len(table) == 0:
            logger.warning("没有IO点表数据可供导出。")
            return False

        logger.info(f"IOExcelExporter.export_to_excel called. filename='{filename}', table='{table.table_name}', rows={len(table)}, use_formulas={use_formulas}")

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = IO_SHEET_NAME
        self.plc_sheet_exporter.populate_sheet(ws, table, use_formulas)

        try:
            wb.save(filename)
            logger.info(f"数据已成功导出到 {filename}")
            return True
        except OSError as e:
            logger.error(f"导出Excel文件时出错: {e}")
            return False
