"""Loading of the BibTeX source from disk or over HTTP."""

import logging
from pathlib import Path

import requests

from .exceptions import SourceFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def is_url(source: str | Path) -> bool:
    """Return True when ``source`` names an HTTP(S) resource."""
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def read_bibtex(source: str | Path, *, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Read BibTeX text from a local file or an HTTP(S) URL.

    Args:
        source: File path or ``http(s)://`` URL
        timeout: Seconds to wait for a remote server

    Returns:
        The decoded UTF-8 text

    Raises:
        SourceFetchError: If the source is missing, unreadable or the request fails
    """
    if is_url(source):
        return _download(str(source), timeout=timeout)

    path = Path(source)
    logger.debug(f"Reading BibTeX file: {path}")

    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SourceFetchError(f"Bibliography file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise SourceFetchError(f"Failed to decode {path} as UTF-8: {e}") from e
    except OSError as e:
        raise SourceFetchError(f"Failed to read {path}: {e}") from e


def _download(url: str, *, timeout: float) -> str:
    logger.debug(f"Downloading BibTeX from {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as e:
        raise SourceFetchError(f"Timed out fetching {url} after {timeout}s") from e
    except requests.RequestException as e:
        raise SourceFetchError(f"Failed to fetch {url}: {e}") from e

    try:
        text = response.content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SourceFetchError(f"Failed to decode response from {url} as UTF-8: {e}") from e

    logger.debug(f"Downloaded {len(text)} characters from {url}")
    return text
