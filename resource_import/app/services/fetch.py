from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

import httpx

from resource_import.app.core.errors import TransportError

logger = logging.getLogger(__name__)


def read_source_file(path: Union[str, Path], encoding: str = "utf-8", resource_type: Optional[str] = None) -> str:
    p = Path(path)
    try:
        return p.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise TransportError(f"Could not read {p}: {e}", resource_type=resource_type, path=str(p)) from e


def read_source_bytes(path: Union[str, Path], resource_type: Optional[str] = None) -> bytes:
    p = Path(path)
    try:
        return p.read_bytes()
    except OSError as e:
        raise TransportError(f"Could not read {p}: {e}", resource_type=resource_type, path=str(p)) from e


def _get(
    url: str,
    headers: Optional[Mapping[str, str]],
    timeout: Optional[float],
    client: Optional[httpx.Client],
    resource_type: Optional[str],
) -> httpx.Response:
    logger.info("Fetching %s", url)
    try:
        if client is not None:
            response = client.get(url, headers=dict(headers or {}), timeout=timeout)
        else:
            with httpx.Client(timeout=timeout) as own_client:
                response = own_client.get(url, headers=dict(headers or {}))
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise TransportError(
            f"{url} answered {e.response.status_code}", resource_type=resource_type, path=url
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportError(f"Could not fetch {url}: {e}", resource_type=resource_type, path=url) from e
    return response


def fetch_url(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
    resource_type: Optional[str] = None,
) -> str:
    """GETs `url` with the configured headers and returns the decoded body."""
    return _get(url, headers, timeout, client, resource_type).text


def fetch_url_bytes(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.Client] = None,
    resource_type: Optional[str] = None,
) -> bytes:
    """Same as fetch_url, but leaves decoding to the caller (XML declares its own encoding)."""
    return _get(url, headers, timeout, client, resource_type).content
