"""
Reading model sources.

A source is either a local file path or an ``http(s)://`` URL. This is the
only place in the package that performs I/O.
"""

import logging
from pathlib import Path

import requests

from ..core.exceptions import LoadError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT_SECONDS = 30


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def read_text(location: str | Path, encoding: str = "utf-8") -> str:
    """
    Read the full text of a local file or remote URL.

    Raises:
        LoadError: The source could not be read or fetched.
    """
    location = str(location)

    if is_url(location):
        try:
            resp = requests.get(location, timeout=FETCH_TIMEOUT_SECONDS)
        except requests.RequestException as e:
            raise LoadError(location, str(e)) from e
        if not resp.ok:
            raise LoadError(location, f"HTTP {resp.status_code}")
        logger.debug(f"Fetched {len(resp.content)} bytes from {location}")
        return resp.text

    path = Path(location)
    if not path.exists():
        raise LoadError(location, "file not found")
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(location, str(e)) from e
