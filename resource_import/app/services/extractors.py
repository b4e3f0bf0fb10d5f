from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Dict, List, Optional, Tuple, Type

import httpx

from resource_import.app.core.errors import ExtractionError, ResourceTypeMismatchError
from resource_import.app.core.settings import Settings, get_settings
from resource_import.app.models.config import ResourceConfig, ResourceType
from resource_import.app.models.documents import Document, ExtractionResult, ResourceMapping
from resource_import.app.services.builder import build_document
from resource_import.app.services.fetch import fetch_url, fetch_url_bytes, read_source_bytes, read_source_file
from resource_import.app.services.resolvers.base import PathResolver
from resource_import.app.services.resolvers.cells import CellResolver, load_sheet
from resource_import.app.services.resolvers.json_path import JsonPathResolver, parse_json_source
from resource_import.app.services.resolvers.xpath import XPathResolver, parse_xml_source

logger = logging.getLogger(__name__)


class ResourceExtractor(ABC):
    """
    Extracts (vertices, edges) from one resource kind: fetch once, parse into
    an immutable tree/sheet, then build one Document per mapping template in
    template order.
    """
    resource_type: ClassVar[ResourceType]

    def __init__(self, settings: Optional[Settings] = None, http_client: Optional[httpx.Client] = None):
        self.settings = settings or get_settings()
        self.http_client = http_client

    def check_config(self, config: ResourceConfig) -> None:
        if config.resource_type != self.resource_type:
            raise ResourceTypeMismatchError(
                f"Wrong resource type, must be {self.resource_type.value} for "
                f"{type(self).__name__} (got {config.resource_type.value})",
                resource_type=self.resource_type.value,
            )

    @abstractmethod
    def load(self, config: ResourceConfig) -> PathResolver:
        pass

    def extract_documents(self, config: ResourceConfig, mapping: ResourceMapping) -> Tuple[List[Document], List[Document]]:
        self.check_config(config)
        resolver = self.load(config)

        documents: List[Document] = []
        for idx, template in enumerate(mapping):
            try:
                documents.append(build_document(template, resolver))
            except ExtractionError as e:
                e.with_context(resource_type=self.resource_type.value)
                logger.error("Template %d of %s failed: %s", idx, config.source, e)
                raise

        vertices = [d for d in documents if d.is_vertex]
        edges = [d for d in documents if d.is_edge]
        logger.info(
            "Extracted %d vertices and %d edges from %s (%s)",
            len(vertices), len(edges), config.source, self.resource_type.value,
        )
        return vertices, edges

    def _read(self, config: ResourceConfig) -> str:
        return read_source_file(config.source, self.settings.source_encoding, self.resource_type.value)

    def _fetch(self, config: ResourceConfig) -> str:
        return fetch_url(
            config.source,
            headers=getattr(config, "headers", {}),
            timeout=self.settings.http_timeout,
            client=self.http_client,
            resource_type=self.resource_type.value,
        )

    def _read_bytes(self, config: ResourceConfig) -> bytes:
        return read_source_bytes(config.source, self.resource_type.value)

    def _fetch_bytes(self, config: ResourceConfig) -> bytes:
        return fetch_url_bytes(
            config.source,
            headers=getattr(config, "headers", {}),
            timeout=self.settings.http_timeout,
            client=self.http_client,
            resource_type=self.resource_type.value,
        )


class JsonFileExtractor(ResourceExtractor):
    resource_type = ResourceType.JSON

    def load(self, config: ResourceConfig) -> PathResolver:
        tree = parse_json_source(self._read(config), self.resource_type)
        return JsonPathResolver(tree, self.resource_type)


class JsonApiExtractor(ResourceExtractor):
    resource_type = ResourceType.JSON_API

    def load(self, config: ResourceConfig) -> PathResolver:
        tree = parse_json_source(self._fetch(config), self.resource_type)
        return JsonPathResolver(tree, self.resource_type)


class XmlFileExtractor(ResourceExtractor):
    resource_type = ResourceType.XML

    def load(self, config: ResourceConfig) -> PathResolver:
        document = parse_xml_source(self._read_bytes(config), self.resource_type)
        return XPathResolver(document, self.resource_type)


class XmlApiExtractor(ResourceExtractor):
    resource_type = ResourceType.XML_API

    def load(self, config: ResourceConfig) -> PathResolver:
        document = parse_xml_source(self._fetch_bytes(config), self.resource_type)
        return XPathResolver(document, self.resource_type)


class XlsxExtractor(ResourceExtractor):
    resource_type = ResourceType.XLSX

    def load(self, config: ResourceConfig) -> PathResolver:
        sheet = config.sheet  # type: ignore[union-attr]
        rows = load_sheet(config.source, sheet)
        return CellResolver(rows, sheet_name=sheet, resource_type=self.resource_type)


EXTRACTORS: Dict[ResourceType, Type[ResourceExtractor]] = {
    ResourceType.JSON: JsonFileExtractor,
    ResourceType.JSON_API: JsonApiExtractor,
    ResourceType.XML: XmlFileExtractor,
    ResourceType.XML_API: XmlApiExtractor,
    ResourceType.XLSX: XlsxExtractor,
}


def get_extractor(
    resource_type: ResourceType,
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.Client] = None,
) -> ResourceExtractor:
    return EXTRACTORS[resource_type](settings=settings, http_client=http_client)


def extract(
    config: ResourceConfig,
    mapping: ResourceMapping,
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.Client] = None,
) -> ExtractionResult:
    """
    Extracts the documents of one resource. All-or-nothing: the first error
    anywhere is returned in the result and no document is kept.
    """
    resource_type = config.resource_type.value
    extractor = get_extractor(config.resource_type, settings=settings, http_client=http_client)
    try:
        vertices, edges = extractor.extract_documents(config, mapping)
    except ExtractionError as e:
        logger.warning("Extraction of %s failed: %s", config.source, e)
        return ExtractionResult(resource_type=resource_type, error=e)
    return ExtractionResult(resource_type=resource_type, vertices=vertices, edges=edges)
