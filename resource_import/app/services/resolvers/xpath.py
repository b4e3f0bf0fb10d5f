from __future__ import annotations
from typing import Union

import lxml.etree as LET

from resource_import.app.core.errors import SourceParseError, XPathQueryError
from resource_import.app.models.config import ResourceType
from resource_import.app.models.values import Value, normalize
from resource_import.app.services.resolvers.base import PathResolver


def parse_xml_source(source: Union[str, bytes], resource_type: ResourceType = ResourceType.XML) -> LET._ElementTree:
    """
    Parses an XML document. Bytes are decoded by lxml following the XML
    declaration; text is already decoded, so any declared encoding is ignored.
    """
    if isinstance(source, bytes):
        parser = LET.XMLParser(resolve_entities=False, no_network=True)
        data = source
    else:
        parser = LET.XMLParser(encoding="utf-8", resolve_entities=False, no_network=True)
        data = source.encode("utf-8")
    try:
        root = LET.fromstring(data, parser=parser)
    except LET.XMLSyntaxError as e:
        raise SourceParseError(f"xml_parse_error: {e}", resource_type=resource_type.value) from e
    return LET.ElementTree(root)


class XPathResolver(PathResolver):
    """
    Evaluates XPath selections. Node-sets always come back as a List, and an
    empty selection is an empty List rather than an error.
    """
    kind = "xpath"

    def __init__(self, document: LET._ElementTree, resource_type: ResourceType = ResourceType.XML):
        super().__init__(resource_type)
        self.document = document

    def resolve(self, expression: str) -> Value:
        try:
            result = self.document.xpath(expression)
        except LET.XPathError as e:
            raise XPathQueryError(
                f"XPath error: {e}", path=expression, resource_type=self.resource_type.value
            ) from e
        return normalize(result)
