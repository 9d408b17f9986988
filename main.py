"""
IO点表生成工具 - 主程序入口
根据场站设备清单生成和利时PLC的IO点表 (Excel)
"""

import sys
import json
import logging
import argparse
import configparser
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

import requests

from core.io_table import (
    IOTableError, EquipmentItem, IOExcelExporter, build_io_point_table, calculate_channels, convert_equipment_items,
)
from core.query_area import JianDaoYunAPI, QueryService, ProjectInfo

DEFAULT_OUTPUT_DIR = "output"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_app_base_path() -> Path:
    """
    获取应用程序的基准路径。
    - 如果程序是被冻结（打包）的，则返回可执行文件所在的目录。
    - 否则（作为脚本运行），返回 main.py 所在的目录。
    """
    if getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS'):
        # sys._MEIPASS 是临时解压目录，不应作为数据存储位置
        return Path(sys.executable).parent
    return Path(__file__).resolve().parent


def _use_default_logging(message: str):
    print(message)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)


def setup_logging(base_path: Path, config_path: Path):
    """配置日志系统，从 config.ini 的 [Logging] 读取配置"""
    config = configparser.ConfigParser()

    if not config_path.exists():
        _use_default_logging(f"警告: 配置文件 {config_path} 未找到，使用默认日志配置。")
        return

    try:
        config.read(config_path, encoding='utf-8')

        log_settings = config['Logging']
        log_level_str = log_settings.get('log_level', 'INFO').upper()
        log_file_name = log_settings.get('log_file', 'app.log')
        max_log_size = int(log_settings.get('max_log_size', 5*1024*1024))  # 默认5MB
        backup_count = int(log_settings.get('backup_count', 3))

        numeric_level = getattr(logging, log_level_str, logging.INFO)
        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)
        formatter = logging.Formatter(LOG_FORMAT)

        log_file_path = base_path / log_file_name
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            str(log_file_path),
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(numeric_level)
        root_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(numeric_level)
        root_logger.addHandler(console_handler)

        logging.info(f"日志系统已配置：级别={log_level_str}, 文件='{log_file_path}'")

    except (KeyError, ValueError, OSError, configparser.Error) as e:
        _use_default_logging(f"配置日志系统时发生错误: {e}。将使用默认日志配置。")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="根据场站设备清单生成IO点表")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--station", help="场站名称")
    mode.add_argument("--project", metavar="PROJECT_NO", help="按项目编号查询项目及其场站，不生成点表")
    parser.add_argument("--equipment-file", help="设备清单JSON文件 ([{name, model, quantity}])，不指定时从简道云查询")
    parser.add_argument("--output", help="输出的Excel文件路径，默认为 <output_dir>/<场站名>_IO点表.xlsx")
    parser.add_argument("--summary-only", action="store_true", help="只打印通道统计，不生成点表")
    parser.add_argument("--no-formulas", action="store_true", help="点位名称直接写入文本，不使用Excel公式")
    parser.add_argument("--config", help="配置文件路径，默认为程序目录下的 config.ini")
    return parser.parse_args(argv)


def load_equipment_file(file_path: str, station_name: str) -> List[EquipmentItem]:
    """从JSON文件读取设备清单"""
    with open(file_path, 'r', encoding='utf-8') as f:
        raw_items = json.load(f)
    if not isinstance(raw_items, list):
        raise ValueError(f"设备清单文件 {file_path} 的内容必须是列表")
    return convert_equipment_items(raw_items, default_station=station_name)


def print_channel_summary(station_name: str, equipment_list: List[EquipmentItem]):
    print(f"场站 '{station_name}' 通道统计:")
    for channel_class, total in calculate_channels(equipment_list).items():
        print(f"  {channel_class}: {total.count} 个通道 ({total.data_type})")


def print_projects(projects: List[ProjectInfo]):
    if not projects:
        print("未查询到项目数据")
        return
    for project in projects:
        print(f"项目: {project.project_name} ({project.project_number})  "
              f"深化设计编号: {project.design_number}  客户: {project.customer_name}  场站: {project.station_name}")


def query_projects(config_path: Path, project_no: str) -> int:
    """按项目编号查询项目列表，用于确认场站名称"""
    logger = logging.getLogger(__name__)
    try:
        query_service = QueryService(JianDaoYunAPI(str(config_path)))
        projects = query_service.get_projects(project_no)
    except (KeyError, ValueError, requests.RequestException) as e:
        logger.error(f"查询项目数据失败: {e}", exc_info=True)
        print(f"错误: 查询项目数据失败: {e}")
        return 1
    print_projects(projects)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """主函数，返回进程退出码"""
    args = parse_args(argv)

    app_base_path = get_app_base_path()
    config_path = Path(args.config) if args.config else app_base_path / 'config.ini'
    setup_logging(app_base_path, config_path)
    logger = logging.getLogger(__name__)

    if args.project is not None:
        return query_projects(config_path, args.project)

    config = configparser.ConfigParser()
    config.read(config_path, encoding='utf-8')
    output_dir = config.get('IOTable', 'output_dir', fallback=DEFAULT_OUTPUT_DIR)
    use_formulas = config.getboolean('IOTable', 'use_formulas', fallback=True) and not args.no_formulas

    try:
        if args.equipment_file:
            logger.info(f"从文件 {args.equipment_file} 读取设备清单")
            equipment_list = load_equipment_file(args.equipment_file, args.station)
        else:
            query_service = QueryService(JianDaoYunAPI(str(config_path)))
            equipment_list = query_service.get_station_equipment(args.station)
    except (OSError, ValueError, KeyError, requests.RequestException) as e:
        logger.error(f"获取设备清单失败: {e}", exc_info=True)
        print(f"错误: 获取设备清单失败: {e}")
        return 1

    if not equipment_list:
        logger.warning(f"场站 '{args.station}' 没有设备数据")
        print(f"错误: 场站 '{args.station}' 没有设备数据")
        return 1

    print_channel_summary(args.station, equipment_list)
    if args.summary_only:
        return 0

    try:
        table = build_io_point_table(equipment_list, args.station)
    except IOTableError as e:
        logger.error(f"生成IO点表失败: {e}")
        print(f"错误: {e}")
        return 1

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = app_base_path / output_dir / f"{args.station}_IO点表.xlsx"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if not IOExcelExporter().export_to_excel(table, str(output_path), use_formulas=use_formulas):
        print(f"错误: 导出IO点表到 {output_path} 失败")
        return 1

    print(f"IO点表已生成: {output_path} (共 {len(table)} 个点位)")
    logger.info(f"IO点表已生成: {output_path}")
    return 0


if __name__ == '__main__':
    exit_code = main()
    logging.shutdown()
    sys.exit(exit_code)
