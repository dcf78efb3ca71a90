"""
Schema loading from a local file or an HTTP(S) URL.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .pipeline.errors import SchemaLoadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def load_schema(source: str | Path, headers: dict[str, str] | None = None, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """
    Load and decode a JSON Schema document.

    Args:
        source: Path of a .json file, or an http(s) URL
        headers: Extra HTTP headers (URL sources only)
        timeout: HTTP timeout in seconds

    Returns:
        The decoded JSON value

    Raises:
        SchemaLoadError: If the source cannot be read or is not valid JSON
    """
    source = str(source)
    if is_url(source):
        text = _fetch(source, headers or {}, timeout)
    else:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaLoadError(f"Cannot read schema file {source}: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Schema {source} is not valid JSON: {e}") from e


def _fetch(url: str, headers: dict[str, str], timeout: float) -> str:
    logger.debug("Fetching schema from %s", url)
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise SchemaLoadError(f"Cannot fetch schema from {url}: {e}") from e

    if response.status_code != 200:
        raise SchemaLoadError(f"Cannot fetch schema from {url}: HTTP {response.status_code}")
    return response.text


def parse_headers(values: tuple[str, ...] | list[str]) -> dict[str, str]:
    """
    Parse ``Key:Value`` header options.

    Raises:
        ValueError: If a value has no colon
    """
    headers: dict[str, str] = {}
    for value in values:
        key, sep, content = value.partition(":")
        if not sep or not key.strip():
            raise ValueError(f"Invalid header {value!r}, expected Key:Value")
        headers[key.strip()] = content.strip()
    return headers
