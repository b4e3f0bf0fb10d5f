from resource_import.app.services.resolvers.base import PathResolver
from resource_import.app.services.resolvers.cells import CellResolver, parse_cell_address
from resource_import.app.services.resolvers.json_path import JsonPathResolver
from resource_import.app.services.resolvers.xpath import XPathResolver

__all__ = ["PathResolver", "CellResolver", "JsonPathResolver", "XPathResolver", "parse_cell_address"]
