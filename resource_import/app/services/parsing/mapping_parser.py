from __future__ import annotations
from typing import Dict, List, Optional, Tuple

from resource_import.app.core.errors import MappingParseError
from resource_import.app.models.documents import MappingTemplate, ResourceMapping

COMMENT_PREFIX = "#"
KEY_VALUE_SEPARATOR = "="
GROUP_SEPARATOR = "."


def _split_entry(line: str, lineno: int) -> Tuple[str, Optional[str], str]:
    if KEY_VALUE_SEPARATOR not in line:
        raise MappingParseError(f"expected 'name {KEY_VALUE_SEPARATOR} value', got {line!r}", line=lineno)
    k, v = line.split(KEY_VALUE_SEPARATOR, 1)
    name, value = k.strip(), v.strip()
    if not name:
        raise MappingParseError("empty property name", line=lineno)
    if not value:
        raise MappingParseError(f"empty value for {name!r}", line=lineno)

    parts = name.split(GROUP_SEPARATOR)
    if len(parts) == 1:
        return name, None, value
    if len(parts) > 2:
        raise MappingParseError(f"{name!r}: only one level of property grouping is supported", line=lineno)
    group, sub = parts[0].strip(), parts[1].strip()
    if not group or not sub:
        raise MappingParseError(f"{name!r}: empty group or sub-property name", line=lineno)
    return group, sub, value


class _TemplateBuilder:
    def __init__(self) -> None:
        self.entries: MappingTemplate = {}

    def add(self, name: str, sub: Optional[str], value: str, lineno: int) -> None:
        existing = self.entries.get(name)
        if sub is None:
            if isinstance(existing, dict):
                raise MappingParseError(f"{name!r} is already a property group", line=lineno)
            if existing is not None:
                raise MappingParseError(f"duplicate property {name!r}", line=lineno)
            self.entries[name] = value
            return

        if isinstance(existing, str):
            raise MappingParseError(f"{name!r} is already a plain property", line=lineno)
        group: Dict[str, str] = existing if isinstance(existing, dict) else {}
        if sub in group:
            raise MappingParseError(f"duplicate property {name + GROUP_SEPARATOR + sub!r}", line=lineno)
        group[sub] = value
        self.entries[name] = group


def parse_mapping(text: str) -> ResourceMapping:
    """
    Parses mapping text into an ordered list of mapping templates.

    Templates are blocks of `name = value` lines separated by blank lines;
    `group.sub = value` declares one level of nested properties.
    """
    templates: List[MappingTemplate] = []
    current: Optional[_TemplateBuilder] = None

    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            if current is not None:
                templates.append(current.entries)
                current = None
            continue
        if stripped.startswith(COMMENT_PREFIX):
            continue
        name, sub, value = _split_entry(stripped, lineno)
        if current is None:
            current = _TemplateBuilder()
        current.add(name, sub, value, lineno)

    if current is not None:
        templates.append(current.entries)

    if not templates:
        raise MappingParseError("mapping defines no templates")
    return ResourceMapping.of(templates)
