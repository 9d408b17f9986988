"""简道云API处理模块"""

import configparser
import requests
import logging
from typing import List, Dict, Any, Optional

from .query_models import FieldNames

logger = logging.getLogger(__name__)

PAGE_SIZE = 100  # API限制
DEFAULT_TIMEOUT = 30


class JianDaoYunAPI:
    def __init__(self, config_file: str = 'config.ini'):
        self.config = configparser.ConfigParser()
        try:
            # 使用UTF-8编码读取配置文件
            self.config.read(config_file, encoding='utf-8')
            self.jdy_config = self.config['JianDaoYun']

            # 初始化API配置
            self.api_base_url = self.jdy_config['api_base_url'].rstrip('/')
            self.api_key = self.jdy_config['api_key']
            self.app_id = self.jdy_config['app_id']
            self.entry_id = self.jdy_config['entry_id']
            self.timeout = self.jdy_config.getfloat('timeout', fallback=DEFAULT_TIMEOUT)

        except (KeyError, ValueError) as e:
            logger.error(f"读取配置文件失败: {str(e)}")
            raise

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    def _paginated_query(self, fields: List[str], filter_cond: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        通用的分页查询方法，自动获取所有满足条件的数据
        :param fields: 要查询的字段列表
        :param filter_cond: 过滤条件列表
        :return: 数据列表
        """
        url = f"{self.api_base_url}/app/entry/data/list"
        headers = self._headers()
        all_data = []
        last_data_id = None

        while True:
            params = {
                "app_id": self.app_id,
                "entry_id": self.entry_id,
                "fields": fields,
                "limit": PAGE_SIZE,
                "filter": {
                    "rel": "and",
                    "cond": filter_cond
                }
            }
            # 添加分页标识
            if last_data_id:
                params["data_id"] = last_data_id

            try:
                response = requests.post(url, json=params, headers=headers, timeout=self.timeout)
                response.raise_for_status()
                current_batch = response.json().get('data', [])
            except (requests.RequestException, ValueError) as e:
                logger.error(f"获取简道云数据失败: {str(e)}")
                raise

            all_data.extend(current_batch)

            # 数据量小于limit，说明已经查询完毕
            if len(current_batch) < PAGE_SIZE:
                break

            # 获取最后一条数据的ID作为下一次查询的起点
            last_data_id = current_batch[-1].get('_id')
            if not last_data_id:
                logger.error("简道云返回的数据中缺少_id字段，无法继续分页")
                raise ValueError("数据中缺少_id字段")

        logger.debug(f"简道云分页查询完成，共 {len(all_data)} 条数据")
        return all_data

    @staticmethod
    def _eq_condition(field: str, value: str) -> Dict[str, Any]:
        return {
            "field": field,
            "type": "text",
            "method": "eq",
            "value": [value]
        }

    def query_projects(self, project_no: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        查询项目数据
        :param project_no: 项目编号（用于过滤）
        :return: 数据列表
        """
        filter_cond = []
        if project_no:
            filter_cond.append(self._eq_condition(FieldNames.PROJECT_NUMBER, project_no))
        fields = [
            FieldNames.PROJECT_NAME,
            FieldNames.PROJECT_NUMBER,
            FieldNames.DESIGN_NUMBER,
            FieldNames.CUSTOMER_NAME,
            FieldNames.STATION_NAME,
        ]
        return self._paginated_query(fields, filter_cond)

    def query_site_devices(self, site_name: str) -> List[Dict[str, Any]]:
        """
        获取场站的设备数据
        :param site_name: 场站名称
        :return: 设备数据列表 (每条记录的深化清单子表单中包含设备)
        """
        filter_cond = [self._eq_condition(FieldNames.STATION_NAME, site_name)]
        fields = [
            FieldNames.EQUIPMENT_LIST,
            FieldNames.EQUIPMENT_NAME,
            FieldNames.BRAND,
            FieldNames.MODEL,
            FieldNames.TECH_PARAM,
            FieldNames.QUANTITY,
            FieldNames.UNIT,
            FieldNames.EXTERNAL_PARAM,
        ]
        return self._paginated_query(fields, filter_cond)
