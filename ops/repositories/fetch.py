"""Fetch JSON documents from local files or HTTP(S) URLs."""

import json
from pathlib import Path
from typing import Any, Union

import requests
from loguru import logger

from dashboard.errors import LoadFailure


def is_url(location: Union[str, Path]) -> bool:
    return str(location).startswith(("http://", "https://"))


def join_location(base: Union[str, Path], name: str) -> str:
    """Append a file name to a directory path or URL prefix."""
    base = str(base)
    if is_url(base):
        return f"{base.rstrip('/')}/{name}"
    return str(Path(base) / name)


def fetch_json(location: Union[str, Path], timeout: float = 30) -> Any:
    """
    Load a JSON (or GeoJSON) document.

    Args:
        location: File path or http(s) URL
        timeout: HTTP timeout in seconds

    Returns:
        Decoded JSON value

    Raises:
        LoadFailure: The document could not be retrieved or decoded
    """
    location = str(location)
    logger.debug(f"📥 Fetching {location}")

    if is_url(location):
        try:
            response = requests.get(location, timeout=timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise LoadFailure(location, str(e)) from e
        except ValueError as e:
            raise LoadFailure(location, f"invalid JSON: {e}") from e

    path = Path(location)
    if not path.exists():
        raise LoadFailure(location, "file not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise LoadFailure(location, str(e)) from e
    except ValueError as e:
        raise LoadFailure(location, f"invalid JSON: {e}") from e
