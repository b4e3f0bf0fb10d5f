from __future__ import annotations
from typing import Any, Dict, Optional


class ExtractionError(Exception):
    """
    Base error of the extraction engine.

    Carries enough context (resource kind, property, offending path or
    address) to diagnose a failed extraction without re-running it.
    """
    category = "extraction_error"

    def __init__(
        self,
        message: str,
        *,
        resource_type: Optional[str] = None,
        property: Optional[str] = None,
        path: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.resource_type = resource_type
        self.property = property
        self.path = path

    def with_context(self, **context: Any) -> "ExtractionError":
        # fills blanks only; the innermost context wins
        for key, value in context.items():
            if getattr(self, key, None) is None:
                setattr(self, key, value)
        return self

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"category": self.category, "message": self.message}
        for key in ("resource_type", "property", "path"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.__cause__ is not None:
            cause = self.__cause__
            out["cause"] = cause.to_dict() if isinstance(cause, ExtractionError) else str(cause)
        return out

    def __str__(self) -> str:
        parts = [self.message]
        if self.property:
            parts.append(f"property={self.property}")
        if self.path:
            parts.append(f"path={self.path}")
        if self.resource_type:
            parts.append(f"resource_type={self.resource_type}")
        return " | ".join(parts)


# -------------------------------------------------------------------------
# Configuration
# -------------------------------------------------------------------------

class ConfigError(ExtractionError):
    category = "config_error"


class ConfigParseError(ConfigError):
    category = "config_parse_error"

    def __init__(self, message: str, line: Optional[int] = None, **context: Any):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message, **context)
        self.line = line


class MissingFieldError(ConfigError):
    category = "missing_field"

    def __init__(self, field: str, **context: Any):
        super().__init__(f"Missing '{field}' parameter in resource config", **context)
        self.field = field


class InvalidResourceTypeError(ConfigError):
    category = "invalid_resource_type"


class InvalidHeaderSpecError(ConfigError):
    category = "invalid_header_spec"


# -------------------------------------------------------------------------
# Mapping
# -------------------------------------------------------------------------

class MappingParseError(ExtractionError):
    category = "mapping_parse_error"

    def __init__(self, message: str, line: Optional[int] = None, **context: Any):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message, **context)
        self.line = line


# -------------------------------------------------------------------------
# Document building
# -------------------------------------------------------------------------

class BuildError(ExtractionError):
    category = "build_error"


class InvalidMappingError(BuildError):
    category = "invalid_mapping"


class InvalidResolvedPropertiesError(BuildError):
    category = "invalid_resolved_properties"


class InvalidSearchableCriteriaError(BuildError):
    category = "invalid_searchable_criteria"


class PropertyResolutionError(BuildError):
    category = "property_resolution_error"

    def __init__(self, property: str, cause: "ResolutionError"):
        super().__init__(
            f"Could not resolve property '{property}': {cause.message}",
            property=property,
            path=cause.path,
            resource_type=cause.resource_type,
        )
        self.cause = cause


class ClassificationError(BuildError):
    category = "classification_error"


# -------------------------------------------------------------------------
# Path resolution
# -------------------------------------------------------------------------

class ResolutionError(ExtractionError):
    category = "resolution_error"


class InvalidAddressError(ResolutionError):
    category = "invalid_address"

    def __init__(self, message: str, component: Optional[str] = None, **context: Any):
        super().__init__(message, **context)
        self.component = component


class CellNotFoundError(ResolutionError):
    category = "cell_not_found"


class UnsupportedCellTypeError(ResolutionError):
    category = "unsupported_cell_type"


class InvalidFlagError(ResolutionError):
    category = "invalid_flag"


class JsonQueryError(ResolutionError):
    category = "json_query_error"


class NoMatchError(ResolutionError):
    category = "no_match"


class XPathQueryError(ResolutionError):
    category = "xpath_query_error"


# -------------------------------------------------------------------------
# Fetching
# -------------------------------------------------------------------------

class TransportError(ExtractionError):
    category = "transport_error"


class SheetNotFoundError(TransportError):
    category = "sheet_not_found"


class SourceParseError(ExtractionError):
    category = "source_parse_error"


class ResourceTypeMismatchError(ExtractionError):
    category = "resource_type_mismatch"
