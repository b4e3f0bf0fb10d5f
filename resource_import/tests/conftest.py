"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import httpx
import pytest
from openpyxl import Workbook

from resource_import.app.core.settings import Settings

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def settings() -> Settings:
    return Settings(source_encoding="utf-8", http_timeout=None, log_level="DEBUG")


@pytest.fixture
def json_file(tmp_path: Path) -> Callable[[Any], Path]:
    """Writes a JSON document to a temporary file and returns its path."""

    def _write(obj: Any, name: str = "source.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(obj), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def workbook_file(tmp_path: Path) -> Callable[..., Path]:
    """Saves a single-sheet workbook; rows are lists of cell values starting at A1."""

    def _write(rows: list, sheet: str = "Metrics", name: str = "source.xlsx") -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = sheet
        for row in rows:
            ws.append(row)
        path = tmp_path / name
        wb.save(path)
        return path

    return _write


@pytest.fixture
def cells_workbook_file(tmp_path: Path) -> Callable[..., Path]:
    """Saves a single-sheet workbook holding only the given cells, keyed by coordinate ("B2")."""

    def _write(cells: Dict[str, Any], sheet: str = "Metrics", name: str = "cells.xlsx") -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = sheet
        for coordinate, value in cells.items():
            ws[coordinate] = value
        path = tmp_path / name
        wb.save(path)
        return path

    return _write


def mock_client(
    body: Union[str, bytes],
    status_code: int = 200,
    content_type: str = "application/json",
    seen: Optional[Dict[str, Any]] = None,
) -> httpx.Client:
    """httpx client answering every request with `body`; records the last request in `seen`."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
        if isinstance(body, bytes):
            return httpx.Response(status_code, content=body, headers={"content-type": content_type})
        return httpx.Response(status_code, text=body, headers={"content-type": content_type})

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def http_client() -> Callable[..., httpx.Client]:
    return mock_client
