from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from resource_import.app.core.errors import ExtractionError
from resource_import.app.core.settings import Settings, get_settings
from resource_import.app.models.documents import ExtractionResult
from resource_import.app.services.extractors import extract
from resource_import.app.services.loaders import load_config, load_mapping
from resource_import.app.services.parsing.config_parser import parse_config
from resource_import.app.services.parsing.mapping_parser import parse_mapping
from resource_import.app.services.registry import validate_config

logger = logging.getLogger(__name__)

app = FastAPI(title="Resource Import Service", version="0.1.0")


class ExtractRequest(BaseModel):
    config: str
    mapping: str


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok"}


@app.post("/extract")
def extract_endpoint(req: ExtractRequest) -> JSONResponse:
    settings = get_settings()
    try:
        config = validate_config(parse_config(req.config))
        mapping = parse_mapping(req.mapping)
    except ExtractionError as e:
        result = ExtractionResult(resource_type=None, error=e)
    else:
        result = extract(config, mapping, settings=settings)
    return JSONResponse(status_code=200 if result.ok else 422, content=result.to_dict())


def run_extraction(config_path: str, mapping_path: str, settings: Settings) -> ExtractionResult:
    try:
        config = load_config(config_path, settings=settings)
        mapping = load_mapping(mapping_path, settings=settings)
    except ExtractionError as e:
        return ExtractionResult(resource_type=None, error=e)
    return extract(config, mapping, settings=settings)


def cli(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Resource Import CLI")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="Extract vertices and edges from a resource")
    p_extract.add_argument("config", help="Path to the resource config file")
    p_extract.add_argument("mapping", help="Path to the mapping file")
    p_extract.add_argument("--output", default=None, help="Write the JSON result here instead of stdout")

    p_serve = sub.add_parser("serve", help="Run the extraction HTTP API")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.log_level:
        settings.log_level = args.log_level
    settings.configure_logging()

    if args.command == "serve":
        import uvicorn

        uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
        return 0

    result = run_extraction(args.config, args.mapping, settings)
    payload = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
    else:
        print(payload)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(cli())
