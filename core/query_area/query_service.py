"""查询服务 - 处理简道云API返回的项目和设备数据"""

import logging
from typing import List, Dict, Any, Optional

from pydantic import ValidationError

from core.io_table.equipment import EquipmentItem
from .jiandaoyun_api import JianDaoYunAPI
from .query_models import FieldNames, ProjectInfo, EquipmentRecord

logger = logging.getLogger(__name__)


def process_project_data(raw_data: List[Dict[str, Any]]) -> List[ProjectInfo]:
    """将API返回的项目数据转换为 ProjectInfo 列表，无法解析的记录会被跳过"""
    projects = []
    for item in raw_data:
        try:
            projects.append(ProjectInfo.model_validate(item))
        except ValidationError as e:
            logger.warning(f"跳过无法解析的项目数据 (_id={item.get('_id', 'N/A')}): {e}")
    return projects


def _parse_equipment_record(item: Dict[str, Any]) -> Optional[EquipmentRecord]:
    try:
        return EquipmentRecord.model_validate(item)
    except ValidationError as e:
        logger.warning(f"跳过无法解析的设备数据 (_id={item.get('_id', 'N/A')}): {e}")
        return None


def process_equipment_data(raw_data: List[Dict[str, Any]]) -> List[EquipmentRecord]:
    """
    提取API返回数据中的设备清单。

    优先读取嵌套在深化清单子表单中的设备列表；
    记录中没有子表单时，把记录本身当作一行设备 (设备名称为空的记录会被忽略)。
    """
    equipment_records = []
    for record in raw_data:
        if not isinstance(record, dict):
            logger.warning(f"设备数据项不是字典: {type(record)}")
            continue

        sub_items = record.get(FieldNames.EQUIPMENT_LIST)
        if isinstance(sub_items, list):
            for item in sub_items:
                if not isinstance(item, dict):
                    logger.warning(f"设备列表中的项不是字典: {type(item)}")
                    continue
                equipment = _parse_equipment_record(item)
                if equipment is not None:
                    equipment_records.append(equipment)
        else:
            equipment = _parse_equipment_record(record)
            if equipment is not None and equipment.name:
                equipment_records.append(equipment)
    return equipment_records


def to_equipment_items(records: List[EquipmentRecord], station_name: str) -> List[EquipmentItem]:
    """把设备记录转换为点表生成所需的 EquipmentItem，数量截断为非负整数"""
    return [
        EquipmentItem(
            equipment_name=record.name,
            spec_model=record.model,
            quantity=max(int(record.quantity), 0),
            station_name=station_name,
        )
        for record in records
    ]


class QueryService:
    """项目/设备查询服务，负责调用简道云API并转换数据"""

    def __init__(self, jdy_api: JianDaoYunAPI):
        if not jdy_api:
            logger.error("QueryService 初始化失败: 未提供 JianDaoYunAPI 实例。")
            raise ValueError("JianDaoYunAPI 实例是必需的")
        self.jdy_api = jdy_api

    def get_projects(self, project_no: Optional[str] = None) -> List[ProjectInfo]:
        """查询项目列表"""
        logger.info(f"QueryService: 开始查询项目数据 (项目号: {project_no})")
        projects = process_project_data(self.jdy_api.query_projects(project_no))
        logger.info(f"QueryService: 查询到 {len(projects)} 条项目数据。")
        return projects

    def get_station_equipment(self, station_name: str) -> List[EquipmentItem]:
        """查询指定场站的设备清单并转换为 EquipmentItem 列表"""
        logger.info(f"QueryService: 开始查询场站 '{station_name}' 的设备数据")
        records = process_equipment_data(self.jdy_api.query_site_devices(station_name))
        equipment_list = to_equipment_items(records, station_name)
        logger.info(f"QueryService: 场站 '{station_name}' 共 {len(equipment_list)} 条设备数据。")
        return equipment_list
