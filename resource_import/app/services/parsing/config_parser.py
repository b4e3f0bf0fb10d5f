from __future__ import annotations
from typing import Dict

from resource_import.app.core.errors import ConfigParseError

COMMENT_PREFIX = "#"
KEY_VALUE_SEPARATOR = "="


def parse_config(text: str) -> Dict[str, str]:
    """
    Parses resource config text (one `key=value` per line) into a flat dict.

    Values stay strings; list-like values such as `headers` are split by the
    registry validators, not here.
    """
    config: Dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        if KEY_VALUE_SEPARATOR not in stripped:
            raise ConfigParseError(f"expected 'key{KEY_VALUE_SEPARATOR}value', got {stripped!r}", line=lineno)
        k, v = stripped.split(KEY_VALUE_SEPARATOR, 1)
        key = k.strip()
        if not key:
            raise ConfigParseError("empty key", line=lineno)
        if key in config:
            raise ConfigParseError(f"duplicate key {key!r}", line=lineno)
        config[key] = v.strip()
    return config
