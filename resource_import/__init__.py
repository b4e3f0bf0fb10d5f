from resource_import.app.models.config import ResourceType
from resource_import.app.models.documents import Document, ExtractionResult, ResourceMapping
from resource_import.app.services.extractors import extract
from resource_import.app.services.loaders import load_config, load_mapping

__all__ = [
    "Document",
    "ExtractionResult",
    "ResourceMapping",
    "ResourceType",
    "extract",
    "load_config",
    "load_mapping",
]
