"""简道云项目/设备数据的Pydantic领域模型"""
from typing import Any, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator


class FieldNames:
    """简道云表单字段标识符"""
    # 项目相关字段
    PROJECT_NAME = "_widget_1635777114903"      # 项目名称
    PROJECT_NUMBER = "_widget_1635777114935"    # 项目编号
    DESIGN_NUMBER = "_widget_1636359817201"     # 深化设计编号
    CUSTOMER_NAME = "_widget_1635777114972"     # 客户名称
    STATION_NAME = "_widget_1635777114991"      # 场站

    # 深化清单 (子表单)
    EQUIPMENT_LIST = "_widget_1635777115095"

    # 设备子表单中的字段
    EQUIPMENT_NAME = "_widget_1635777115211"    # 设备名称
    BRAND = "_widget_1635777115248"             # 品牌
    MODEL = "_widget_1635777115287"             # 规格型号
    TECH_PARAM = "_widget_1641439264111"        # 技术参数
    QUANTITY = "_widget_1635777485580"          # 数量
    UNIT = "_widget_1654703913698"              # 单位
    EXTERNAL_PARAM = "_widget_1641439463480"    # 技术参数(外部)


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


class ProjectInfo(BaseModel):
    """项目信息模型"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="简道云数据ID")
    project_name: str = Field(default="", alias=FieldNames.PROJECT_NAME, description="项目名称")
    project_number: str = Field(default="", alias=FieldNames.PROJECT_NUMBER, description="项目编号")
    design_number: str = Field(default="", alias=FieldNames.DESIGN_NUMBER, description="深化设计编号")
    customer_name: str = Field(default="", alias=FieldNames.CUSTOMER_NAME, description="客户名称")
    station_name: str = Field(default="", alias=FieldNames.STATION_NAME, description="场站")

    @field_validator("project_name", "project_number", "design_number", "customer_name", "station_name", mode="before")
    @classmethod
    def _empty_text(cls, value: Any) -> Any:
        return _none_to_empty(value)


class EquipmentRecord(BaseModel):
    """深化清单中的一行设备信息"""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id", description="简道云数据ID")
    name: str = Field(default="", alias=FieldNames.EQUIPMENT_NAME, description="设备名称")
    brand: str = Field(default="", alias=FieldNames.BRAND, description="品牌")
    model: str = Field(default="", alias=FieldNames.MODEL, description="规格型号")
    tech_param: str = Field(default="", alias=FieldNames.TECH_PARAM, description="技术参数")
    quantity: float = Field(default=0.0, alias=FieldNames.QUANTITY, allow_inf_nan=False, description="数量")
    unit: str = Field(default="", alias=FieldNames.UNIT, description="单位")
    external_param: str = Field(default="", alias=FieldNames.EXTERNAL_PARAM, description="技术参数(外部)")

    @field_validator("name", "brand", "model", "tech_param", "unit", "external_param", mode="before")
    @classmethod
    def _empty_text(cls, value: Any) -> Any:
        value = _none_to_empty(value)
        return value.strip() if isinstance(value, str) else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _empty_quantity(cls, value: Any) -> Any:
        return 0.0 if value in (None, "") else value
