# core/query_area/__init__.py

from .jiandaoyun_api import JianDaoYunAPI
from .query_models import FieldNames, ProjectInfo, EquipmentRecord
from .query_service import QueryService, process_project_data, process_equipment_data, to_equipment_items

__all__ = [
    'JianDaoYunAPI',
    'FieldNames',
    'ProjectInfo',
    'EquipmentRecord',
    'QueryService',
    'process_project_data',
    'process_equipment_data',
    'to_equipment_items',
]
