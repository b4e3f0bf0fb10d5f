from resource_import.app.services.parsing.config_parser import parse_config
from resource_import.app.services.parsing.mapping_parser import parse_mapping

__all__ = ["parse_config", "parse_mapping"]
