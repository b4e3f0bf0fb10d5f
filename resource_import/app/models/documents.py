from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple, Union

from resource_import.app.core.errors import ExtractionError
from resource_import.app.models.values import Value

DocumentKind = Literal["vertex", "edge"]

# property -> path/literal, or property -> {sub-property -> path/literal}
MappingTemplate = Dict[str, Union[str, Dict[str, str]]]
ResolvedProperties = Dict[str, Value]


@dataclass(frozen=True)
class Document:
    kind: DocumentKind
    properties: Dict[str, Value]
    label: Optional[str] = None
    # vertex lookup keys
    searchable: Tuple[str, ...] = ()
    # edge endpoint lookup criteria
    out_v: Optional[Dict[str, Value]] = None
    in_v: Optional[Dict[str, Value]] = None

    @property
    def is_vertex(self) -> bool:
        return self.kind == "vertex"

    @property
    def is_edge(self) -> bool:
        return self.kind == "edge"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind, "label": self.label, "properties": self.properties}
        if self.is_vertex:
            out["searchable"] = list(self.searchable)
        else:
            out["out_v"] = self.out_v
            out["in_v"] = self.in_v
        return out


@dataclass(frozen=True)
class ResourceMapping:
    templates: Tuple[MappingTemplate, ...] = ()

    @classmethod
    def of(cls, templates: List[MappingTemplate]) -> "ResourceMapping":
        return cls(templates=tuple(templates))

    def __iter__(self) -> Iterator[MappingTemplate]:
        return iter(self.templates)

    def __len__(self) -> int:
        return len(self.templates)


@dataclass
class ExtractionResult:
    resource_type: Optional[str]
    vertices: List[Document] = field(default_factory=list)
    edges: List[Document] = field(default_factory=list)
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def documents(self) -> List[Document]:
        return self.vertices + self.edges

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"status": "error", "resource_type": self.resource_type, "error": self.error.to_dict()}
        return {
            "status": "success",
            "resource_type": self.resource_type,
            "vertices": [d.to_dict() for d in self.vertices],
            "edges": [d.to_dict() for d in self.edges],
        }
