from __future__ import annotations
from abc import ABC, abstractmethod
from typing import ClassVar

from resource_import.app.models.config import ResourceType
from resource_import.app.models.values import Value


class PathResolver(ABC):
    """Resolves path expressions against one already loaded, immutable source."""

    kind: ClassVar[str]

    def __init__(self, resource_type: ResourceType):
        self.resource_type = resource_type

    @abstractmethod
    def resolve(self, expression: str) -> Value:
        pass
