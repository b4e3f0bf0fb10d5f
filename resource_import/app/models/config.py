from __future__ import annotations

from enum import Enum
from typing import Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ResourceType(str, Enum):
    JSON = "json"
    JSON_API = "jsonAPI"
    XML = "xml"
    XML_API = "xmlAPI"
    XLSX = "xlsx"

    @property
    def is_api(self) -> bool:
        return self in (ResourceType.JSON_API, ResourceType.XML_API)

    @property
    def is_file(self) -> bool:
        return not self.is_api


# -------------------------------------------------------------------------
# Resource configs (one per resource kind)
# -------------------------------------------------------------------------

class BaseResourceConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    source: str
    resource_type: ResourceType = Field(alias="resourceType")


class JsonResourceConfig(BaseResourceConfig):
    resource_type: Literal[ResourceType.JSON] = Field(default=ResourceType.JSON, alias="resourceType")


class JsonApiResourceConfig(BaseResourceConfig):
    resource_type: Literal[ResourceType.JSON_API] = Field(default=ResourceType.JSON_API, alias="resourceType")
    headers: Dict[str, str] = Field(default_factory=dict)


class XmlResourceConfig(BaseResourceConfig):
    resource_type: Literal[ResourceType.XML] = Field(default=ResourceType.XML, alias="resourceType")


class XmlApiResourceConfig(BaseResourceConfig):
    resource_type: Literal[ResourceType.XML_API] = Field(default=ResourceType.XML_API, alias="resourceType")
    headers: Dict[str, str] = Field(default_factory=dict)


class XlsxResourceConfig(BaseResourceConfig):
    resource_type: Literal[ResourceType.XLSX] = Field(default=ResourceType.XLSX, alias="resourceType")
    sheet: str


ResourceConfig = Union[
    JsonResourceConfig,
    JsonApiResourceConfig,
    XmlResourceConfig,
    XmlApiResourceConfig,
    XlsxResourceConfig,
]
