from __future__ import annotations

import logging
import os
from pathlib import Path

import httpx

from .errors import FetchError


logger = logging.getLogger(__name__)


def is_url(location: str | os.PathLike[str]) -> bool:
    return str(location).lower().startswith(("http://", "https://"))


def fetch_text(url: str, *, timeout_s: float = 30.0, client: httpx.Client | None = None) -> str:
    """GET `url` and return the body as text; anything but a 200 is a FetchError."""
    logger.info("Fetching %s", url)
    try:
        if client is not None:
            r = client.get(url)
        else:
            with httpx.Client(timeout=float(timeout_s), follow_redirects=True) as c:
                r = c.get(url)
    except Exception as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    if r.status_code != 200:
        raise FetchError(f"HTTP error {r.status_code} fetching {url}", status_code=r.status_code)
    return r.text


def read_text(path: str | os.PathLike[str]) -> str:
    p = Path(path).expanduser()
    logger.info("Reading %s", p)
    try:
        return p.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FetchError(f"Failed to read {p}: {e}") from e


def load_text(location: str | os.PathLike[str], *, timeout_s: float = 30.0, client: httpx.Client | None = None) -> str:
    if is_url(location):
        return fetch_text(str(location), timeout_s=timeout_s, client=client)
    return read_text(location)
