"""Read catalog and article sources from disk or over HTTP with retries."""

from __future__ import annotations

import logging
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def is_remote(source: str | Path) -> bool:
    """Return ``True`` when ``source`` is an ``http(s)`` URL.

    Examples
    --------
    >>> is_remote("https://cdn.example.com/catalog.json")
    True
    >>> is_remote("catalogs/techflow.json")
    False
    """
    return str(source).startswith(("http://", "https://"))


def build_session() -> requests.Session:
    """Return a session that retries idempotent requests on 5xx responses."""
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def fetch_bytes(url: str, *, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Download ``url`` and return the response body.

    Raises
    ------
    requests.HTTPError
        If the server responds with an error status after retries.
    """
    logger.info("fetching %s", url)
    session = build_session()
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.content
    finally:
        session.close()


def read_source(source: str | Path) -> bytes:
    """Return the raw bytes of a local file or ``http(s)`` URL.

    Raises
    ------
    FileNotFoundError
        If a local source does not exist.
    """
    if is_remote(source):
        return fetch_bytes(str(source))
    path = Path(source)
    if not path.exists():
        msg = f"Source file '{path}' not found."
        raise FileNotFoundError(msg)
    logger.debug("reading %s", path)
    return path.read_bytes()


def read_text_source(source: str | Path) -> str:
    """Return a local file or remote document decoded as UTF-8."""
    return read_source(source).decode("utf-8")


__all__ = [
    "DEFAULT_TIMEOUT",
    "build_session",
    "fetch_bytes",
    "is_remote",
    "read_source",
    "read_text_source",
]
