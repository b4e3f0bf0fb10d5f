from __future__ import annotations
from typing import Callable, Dict, Mapping, Optional

from resource_import.app.core.errors import (
    InvalidHeaderSpecError,
    InvalidResourceTypeError,
    MissingFieldError,
)
from resource_import.app.models.config import (
    JsonApiResourceConfig,
    JsonResourceConfig,
    ResourceConfig,
    ResourceType,
    XlsxResourceConfig,
    XmlApiResourceConfig,
    XmlResourceConfig,
)

HEADER_ENTRY_SEPARATOR = ","
HEADER_KEY_VALUE_SEPARATOR = ":"

Validator = Callable[[Mapping[str, str]], ResourceConfig]


def parse_headers(raw: str) -> Dict[str, str]:
    """Splits `k1:v1,k2:v2` into a header dict; every entry needs exactly one ':'."""
    headers: Dict[str, str] = {}
    for entry in raw.split(HEADER_ENTRY_SEPARATOR):
        kv = entry.split(HEADER_KEY_VALUE_SEPARATOR)
        if len(kv) != 2:
            raise InvalidHeaderSpecError(f"Wrong headers specification in resource config: {entry!r}")
        headers[kv[0].strip()] = kv[1].strip()
    return headers


def _require(raw: Mapping[str, str], field: str, resource_type: Optional[str] = None) -> str:
    value = raw.get(field)
    if value is None:
        raise MissingFieldError(field, resource_type=resource_type)
    return value


def _check_resource_type(raw: Mapping[str, str], expected: ResourceType) -> None:
    declared = _require(raw, "resourceType", expected.value)
    if declared != expected.value:
        raise InvalidResourceTypeError(
            f"Invalid resource type for {expected.value} resource (should be {expected.value} and not {declared})",
            resource_type=expected.value,
        )


def _validate_json(raw: Mapping[str, str]) -> ResourceConfig:
    source = _require(raw, "source", ResourceType.JSON.value)
    _check_resource_type(raw, ResourceType.JSON)
    return JsonResourceConfig(source=source)


def _validate_json_api(raw: Mapping[str, str]) -> ResourceConfig:
    source = _require(raw, "source", ResourceType.JSON_API.value)
    _check_resource_type(raw, ResourceType.JSON_API)
    headers = parse_headers(raw["headers"]) if "headers" in raw else {}
    return JsonApiResourceConfig(source=source, headers=headers)


def _validate_xml(raw: Mapping[str, str]) -> ResourceConfig:
    source = _require(raw, "source", ResourceType.XML.value)
    _check_resource_type(raw, ResourceType.XML)
    return XmlResourceConfig(source=source)


def _validate_xml_api(raw: Mapping[str, str]) -> ResourceConfig:
    source = _require(raw, "source", ResourceType.XML_API.value)
    _check_resource_type(raw, ResourceType.XML_API)
    headers = parse_headers(raw["headers"]) if "headers" in raw else {}
    return XmlApiResourceConfig(source=source, headers=headers)


def _validate_xlsx(raw: Mapping[str, str]) -> ResourceConfig:
    source = _require(raw, "source", ResourceType.XLSX.value)
    _check_resource_type(raw, ResourceType.XLSX)
    sheet = _require(raw, "sheet", ResourceType.XLSX.value)
    return XlsxResourceConfig(source=source, sheet=sheet)


VALIDATORS: Dict[ResourceType, Validator] = {
    ResourceType.JSON: _validate_json,
    ResourceType.JSON_API: _validate_json_api,
    ResourceType.XML: _validate_xml,
    ResourceType.XML_API: _validate_xml_api,
    ResourceType.XLSX: _validate_xlsx,
}


def resolve_resource_type(raw: Mapping[str, str]) -> ResourceType:
    declared = _require(raw, "resourceType")
    try:
        return ResourceType(declared)
    except ValueError:
        allowed = "|".join(t.value for t in ResourceType)
        raise InvalidResourceTypeError(f"Unknown resource type {declared!r} (expected one of {allowed})") from None


def validate_config(raw: Mapping[str, str], expected: Optional[ResourceType] = None) -> ResourceConfig:
    """
    Validates a raw config dict into the typed config of its resource kind.

    With `expected`, the kind's own validator runs and any other declared
    resourceType is an InvalidResourceTypeError. Without it, the kind is
    taken from the declared resourceType.
    """
    if expected is None:
        if "source" not in raw:
            raise MissingFieldError("source")
        expected = resolve_resource_type(raw)
    return VALIDATORS[expected](raw)
