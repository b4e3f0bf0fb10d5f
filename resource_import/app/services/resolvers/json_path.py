from __future__ import annotations
import json
from typing import Any

from jsonpath_ng.ext import parse as jp_parse

from resource_import.app.core.errors import JsonQueryError, NoMatchError, SourceParseError
from resource_import.app.models.config import ResourceType
from resource_import.app.models.values import Value, normalize
from resource_import.app.services.resolvers.base import PathResolver


def parse_json_source(text: str, resource_type: ResourceType = ResourceType.JSON) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SourceParseError(f"json_parse_error: {e}", resource_type=resource_type.value) from e


class JsonPathResolver(PathResolver):
    """
    Evaluates JSONPath (filters, slices, unions and recursive descent
    included). No match is an error; one match gives its value and several
    give a List.
    """
    kind = "jsonpath"

    def __init__(self, tree: Any, resource_type: ResourceType = ResourceType.JSON):
        super().__init__(resource_type)
        self.tree = tree

    def resolve(self, expression: str) -> Value:
        try:
            expr = jp_parse(expression)
        except Exception as e:
            raise JsonQueryError(
                f"Path syntax error: {e}", path=expression, resource_type=self.resource_type.value
            ) from e

        try:
            matches = [m.value for m in expr.find(self.tree)]
        except Exception as e:
            raise JsonQueryError(
                f"Path evaluation error: {e}", path=expression, resource_type=self.resource_type.value
            ) from e

        if not matches:
            raise NoMatchError("Path returned no data", path=expression, resource_type=self.resource_type.value)
        if len(matches) == 1:
            return normalize(matches[0])
        return normalize(matches)
