"""Remote PDF download."""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

import requests

from pdf_chat_rag.errors import DownloadError, InvalidSourceError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = {"http", "https"}
_UNSAFE_CHARS = re.compile(r"[^\w. -]")
_MAX_NAME_LENGTH = 200
_CHUNK_BYTES = 64 * 1024


def validate_url(url: str) -> str:
    """Return *url* stripped, or raise :class:`InvalidSourceError`.

    Only absolute ``http``/``https`` URLs with a host are accepted.
    """
    candidate = url.strip()
    try:
        parsed = urlparse(candidate)
        host = parsed.hostname
    except ValueError as exc:
        raise InvalidSourceError(f"Malformed URL {url!r}: {exc}") from exc

    if parsed.scheme.lower() not in _ALLOWED_SCHEMES or not host:
        raise InvalidSourceError(f"Not a valid http(s) URL: {url!r}")
    return candidate


def file_name_for(url: str) -> str:
    """Local file name for a downloaded *url* (last path segment, ``.pdf`` enforced).

    Characters outside word characters, spaces, dots and dashes become ``_``,
    so decoded control bytes such as ``%00`` never reach the filesystem.
    """
    raw = PurePosixPath(unquote(urlparse(url).path)).name
    name = _UNSAFE_CHARS.sub("_", raw).strip(". ")[:_MAX_NAME_LENGTH] or "download"
    if not name.lower().endswith(".pdf"):
        name += ".pdf"
    return name


def download_pdf(url: str, dest_dir: Path, *, timeout: float = 30.0) -> Path:
    """Stream *url* into *dest_dir* and return the written path.

    A partially written file is removed when the transfer fails.
    """
    logger.info("Downloading %s", url)
    target = dest_dir / file_name_for(url)
    written = 0
    try:
        with requests.get(url, stream=True, timeout=timeout) as resp:
            resp.raise_for_status()
            with open(target, "wb") as fh:
                for block in resp.iter_content(chunk_size=_CHUNK_BYTES):
                    fh.write(block)
                    written += len(block)
    except requests.RequestException as exc:
        target.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {exc}") from exc

    logger.debug("Saved %d bytes from %s to %s", written, url, target)
    return target
