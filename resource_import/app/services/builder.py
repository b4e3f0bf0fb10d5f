from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from resource_import.app.core.errors import (
    ClassificationError,
    InvalidMappingError,
    InvalidResolvedPropertiesError,
    InvalidSearchableCriteriaError,
    PropertyResolutionError,
    ResolutionError,
)
from resource_import.app.models.documents import Document, DocumentKind, MappingTemplate, ResolvedProperties
from resource_import.app.models.values import Value, get_raw_value, is_raw_value, is_value, normalize
from resource_import.app.services.resolvers.base import PathResolver

logger = logging.getLogger(__name__)

# Reserved properties
SEARCHABLE = "_searchable"
LABEL = "_label"
OUT_V = "_outV"
IN_V = "_inV"
RESERVED = (SEARCHABLE, LABEL, OUT_V, IN_V)
ENDPOINTS = (OUT_V, IN_V)

SEARCHABLE_SEPARATOR = ","


def check_props(props: Any, resolved: bool = False) -> List[str]:
    """
    Checks the shape of a property dict and returns the list of problems.

    Template mode: values are strings or one-level dicts of strings.
    Resolved mode: values belong to the Value model.
    """
    if not isinstance(props, Mapping):
        return [f"expected a property dict, got {type(props).__name__}"]

    problems: List[str] = []
    for key, value in props.items():
        if not isinstance(key, str) or not key:
            problems.append(f"invalid property name {key!r}")
            continue
        if resolved:
            if not is_value(value):
                problems.append(f"{key}: unsupported resolved value of type {type(value).__name__}")
            continue
        if isinstance(value, str):
            continue
        if key == SEARCHABLE:
            problems.append(f"{key}: must be a comma separated list of property names")
            continue
        if not isinstance(value, Mapping):
            problems.append(f"{key}: unexpected value type {type(value).__name__}")
            continue
        if not value:
            problems.append(f"{key}: empty property group")
        for sub, spec in value.items():
            if not isinstance(sub, str) or not sub:
                problems.append(f"{key}: invalid sub-property name {sub!r}")
            elif not isinstance(spec, str):
                problems.append(f"{key}.{sub}: unexpected value type {type(spec).__name__}")
    return problems


def _declared_searchable(spec: str) -> List[str]:
    raw = get_raw_value(spec) if is_raw_value(spec) else spec
    return [name.strip() for name in raw.split(SEARCHABLE_SEPARATOR) if name.strip()]


def valid_searchable_criteria(template: MappingTemplate) -> Tuple[str, ...]:
    """
    Returns the vertex lookup keys of a template.

    Declared `_searchable` names must be plain, non-reserved properties of
    the template. Without it, every plain non-reserved property is a key.
    Endpoint groups (`_outV`/`_inV`) identify edges on their own.
    """
    has_endpoint = False
    for endpoint in ENDPOINTS:
        if endpoint in template:
            if not template[endpoint]:
                raise InvalidSearchableCriteriaError(f"Empty endpoint criteria {endpoint}", property=endpoint)
            has_endpoint = True

    if SEARCHABLE in template:
        names = _declared_searchable(template[SEARCHABLE])  # type: ignore[arg-type]
        if not names:
            raise InvalidSearchableCriteriaError(f"{SEARCHABLE} names no property", property=SEARCHABLE)
        for name in names:
            if name in RESERVED:
                raise InvalidSearchableCriteriaError(f"Reserved property {name} cannot be searchable", property=name)
            if name not in template:
                raise InvalidSearchableCriteriaError(f"Searchable property {name} is not mapped", property=name)
            if not isinstance(template[name], str):
                raise InvalidSearchableCriteriaError(f"Property group {name} cannot be searchable", property=name)
        return tuple(names)

    keys = tuple(k for k, v in template.items() if k not in RESERVED and isinstance(v, str))
    if not keys and not has_endpoint:
        raise InvalidSearchableCriteriaError("Template declares no property usable as a lookup key")
    return keys


def _resolve_spec(spec: str, resolver: PathResolver) -> Value:
    if is_raw_value(spec):
        return normalize(get_raw_value(spec))
    return resolver.resolve(spec)


def resolve_template(template: MappingTemplate, resolver: PathResolver) -> ResolvedProperties:
    resolved: Dict[str, Value] = {}
    for prop, spec in template.items():
        if prop == SEARCHABLE:
            continue
        try:
            if isinstance(spec, str):
                resolved[prop] = _resolve_spec(spec, resolver)
            else:
                resolved[prop] = {sub: _resolve_spec(s, resolver) for sub, s in spec.items()}
        except ResolutionError as e:
            raise PropertyResolutionError(prop, e) from e
    return resolved


def _label(resolved: ResolvedProperties, required: bool) -> Optional[str]:
    if LABEL not in resolved:
        if required:
            raise ClassificationError(f"Edges require a {LABEL} property", property=LABEL)
        return None
    label = resolved[LABEL]
    if not isinstance(label, str) or not label:
        raise ClassificationError(f"{LABEL} must resolve to a non-empty string, got {label!r}", property=LABEL)
    return label


def classify(resolved: ResolvedProperties, declares_searchable: bool = False) -> DocumentKind:
    present = [e for e in ENDPOINTS if e in resolved]
    if not present:
        return "vertex"
    if len(present) == 1:
        missing = IN_V if present[0] == OUT_V else OUT_V
        raise ClassificationError(f"Edge declares {present[0]} but not {missing}", property=missing)
    if declares_searchable:
        raise ClassificationError(f"Edges are identified by their endpoints and cannot declare {SEARCHABLE}")
    for endpoint in ENDPOINTS:
        criteria = resolved[endpoint]
        if not isinstance(criteria, dict) or not criteria:
            raise ClassificationError(
                f"{endpoint} must resolve to a non-empty property map, got {criteria!r}", property=endpoint
            )
    return "edge"


def extract_document(
    resolved: ResolvedProperties,
    searchable: Tuple[str, ...] = (),
    declares_searchable: bool = False,
) -> Document:
    kind = classify(resolved, declares_searchable)
    properties = {k: v for k, v in resolved.items() if k not in RESERVED}
    if kind == "edge":
        return Document(
            kind="edge",
            properties=properties,
            label=_label(resolved, required=True),
            out_v=resolved[OUT_V],  # type: ignore[arg-type]
            in_v=resolved[IN_V],  # type: ignore[arg-type]
        )
    return Document(
        kind="vertex",
        properties=properties,
        label=_label(resolved, required=False),
        searchable=searchable,
    )


def build_document(template: MappingTemplate, resolver: PathResolver) -> Document:
    problems = check_props(template)
    if problems:
        raise InvalidMappingError(f"Invalid document mapping: {'; '.join(problems)}")

    searchable = valid_searchable_criteria(template)
    resolved = resolve_template(template, resolver)

    problems = check_props(resolved, resolved=True)
    if problems:
        raise InvalidResolvedPropertiesError(
            f"An error occurred when checking element properties: {'; '.join(problems)}"
        )

    doc = extract_document(resolved, searchable, declares_searchable=SEARCHABLE in template)
    logger.debug("Built %s with %d properties", doc.kind, len(doc.properties))
    return doc
