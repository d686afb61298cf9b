"""Load documents from a URL, local file, or stdin into a node tree.

This module handles all I/O for fetching raw API-description documents and
composing them into :mod:`specfront.nodes` trees. Everything is parsed as
YAML, which is a superset of JSON, so no format detection is needed.

The public surface is :class:`DocumentSource`, :func:`parse_document` and
the :func:`load_document` convenience wrapper. A ``DocumentSource`` holds
only configuration and keeps no state between calls: every cache, in memory
or on disk, belongs to
:class:`~specfront.document.resolver.ReferenceResolver`.

Failure modes, all fatal:

* URL that cannot be fetched or answers non-2xx -- :class:`FetchError`.
  There is exactly one attempt per locator.
* Path that does not exist -- :class:`FileNotFoundError_`.
* Unreadable file or malformed content -- :class:`ParseError`, with
  line/column when the YAML parser supplies one.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import httpx

from specfront.document.locators import STDIN_LOCATOR, is_url, normalize_locator
from specfront.exceptions import FetchError, FileNotFoundError_, ParseError
from specfront.models import FetchConfig
from specfront.nodes import Node, compose

logger = logging.getLogger(__name__)


class DocumentSource:
    """Resolves locators to bytes and parses them into node trees.

    Args:
        fetch: How URLs are fetched. Defaults to no timeout and following
            redirects.

    Example::

        source = DocumentSource()
        root = source.load("openapi.yaml")
        info = root.get("info")
    """

    def __init__(self, fetch: Optional[FetchConfig] = None) -> None:
        self._fetch = fetch or FetchConfig()

    def load(self, locator: str) -> Node:
        """Load and parse the document named by *locator*.

        Args:
            locator: A URL (http/https), a file path or ``file://`` URL, or
                ``-`` for stdin.

        Returns:
            The root node of the document.

        Raises:
            FetchError: If a URL cannot be fetched.
            FileNotFoundError_: If a path does not exist.
            ParseError: If the content cannot be read or parsed.
        """
        identity = normalize_locator(locator)
        return parse_document(self.read_bytes(identity), identity)

    def read_bytes(self, locator: str) -> bytes:
        """Return the raw bytes of the document named by *locator*."""
        if locator == STDIN_LOCATOR:
            return self.read_stdin_bytes()
        if is_url(locator):
            return self.fetch_bytes(locator)
        return self.read_file_bytes(locator)

    def fetch_bytes(self, url: str) -> bytes:
        """Fetch *url* with a single HTTP GET.

        Raises:
            FetchError: On network failure or a non-2xx response.
        """
        logger.debug("fetching %s", url)
        try:
            response = httpx.get(
                url,
                timeout=self._fetch.timeout,
                follow_redirects=self._fetch.follow_redirects,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(
                f"HTTP {status} fetching {url}", url=url, status_code=status
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}", url=url) from exc

        return response.content

    def read_file_bytes(self, path: str) -> bytes:
        """Read the local file at *path*.

        Raises:
            FileNotFoundError_: If nothing exists at *path*.
            ParseError: If *path* exists but cannot be read.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError_(f"File not found: {path}", path=path)

        logger.debug("reading %s", path)
        try:
            return file_path.read_bytes()
        except OSError as exc:
            raise ParseError(f"Failed to read {path}: {exc}", locator=path) from exc

    def read_stdin_bytes(self) -> bytes:
        """Read a document from standard input until EOF."""
        try:
            stream = getattr(sys.stdin, "buffer", None)
            if stream is not None:
                return stream.read()
            return sys.stdin.read().encode("utf-8")
        except OSError as exc:
            raise ParseError(
                f"Failed to read from stdin: {exc}", locator=STDIN_LOCATOR
            ) from exc


def parse_document(data: bytes, locator: str) -> Node:
    """Parse bytes already in hand; *locator* is used for error reporting."""
    return compose(data, locator)


def load_document(locator: str, fetch: Optional[FetchConfig] = None) -> Node:
    """Load *locator* with a default :class:`DocumentSource`."""
    return DocumentSource(fetch=fetch).load(locator)
