from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Union

import lxml.etree as LET

# String | Number | Boolean | List[Value] | Map[str, Value]
Value = Union[str, int, float, bool, List["Value"], Dict[str, "Value"]]

RAW_VALUE_OPEN = "{{"
RAW_VALUE_CLOSE = "}}"


def is_raw_value(s: str) -> bool:
    return (
        isinstance(s, str)
        and len(s) >= len(RAW_VALUE_OPEN) + len(RAW_VALUE_CLOSE)
        and s.startswith(RAW_VALUE_OPEN)
        and s.endswith(RAW_VALUE_CLOSE)
    )


def get_raw_value(s: str) -> str:
    if not is_raw_value(s):
        raise ValueError(f"not a raw value: {s!r}")
    return s[len(RAW_VALUE_OPEN):-len(RAW_VALUE_CLOSE)]


def raw_value(s: str) -> str:
    """Wraps a literal so the mapping engine uses it verbatim."""
    return f"{RAW_VALUE_OPEN}{s}{RAW_VALUE_CLOSE}"


def _element_to_value(elem: Any) -> Value:
    # comments and processing instructions carry a non-string tag
    if not isinstance(elem.tag, str):
        return (elem.text or "").strip()

    attrs: Dict[str, Value] = {f"@{LET.QName(k).localname}": str(v) for k, v in elem.attrib.items()}
    children = [ch for ch in elem if isinstance(ch.tag, str)]
    text = elem.text.strip() if elem.text and elem.text.strip() else ""

    if not children and not attrs:
        return text

    grouped: Dict[str, Value] = dict(attrs)
    for ch in children:
        key = LET.QName(ch).localname
        val = _element_to_value(ch)
        if key in grouped:
            if not isinstance(grouped[key], list):
                grouped[key] = [grouped[key]]
            grouped[key].append(val)  # type: ignore[union-attr]
        else:
            grouped[key] = val
    if text:
        grouped["#text"] = text
    return grouped


def normalize(value: Any) -> Value:
    """
    Converts any native value (parsed JSON, lxml nodes and XPath results,
    spreadsheet cells) into the Value model, recursively.

    Total and idempotent: normalize(normalize(v)) == normalize(v).
    """
    if value is None:
        return ""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, str):
        # drops lxml smart-string parents
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, LET._Element):
        return _element_to_value(value)
    if isinstance(value, Mapping):
        return {str(k): normalize(v) for k, v in value.items()}
    if isinstance(value, Iterable):
        return [normalize(v) for v in value]
    return str(value)


def is_value(value: Any) -> bool:
    """True when value already belongs to the Value model."""
    if type(value) in (str, bool, int, float):
        return True
    if isinstance(value, list):
        return all(is_value(v) for v in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and is_value(v) for k, v in value.items())
    return False
