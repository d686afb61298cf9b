"""Locator syntax: telling URLs from paths, normalizing, and joining.

A *locator* names a document. A locator with a URL scheme (``http://``,
``https://``) is fetched over HTTP; ``file://`` URLs and everything else are
filesystem paths; ``-`` means standard input.

Normalization gives every document a single canonical identity so that the
reference cache neither misses (``./a/../b.yaml`` vs ``b.yaml``) nor
collides (``a.yaml#/x`` vs ``b.yaml#/x``).
"""

from __future__ import annotations

import os
import posixpath
import re
from urllib.parse import unquote, urljoin, urlsplit, urlunsplit

STDIN_LOCATOR = "-"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_DEFAULT_PORTS = {"http": 80, "https": 443}


def is_url(locator: str) -> bool:
    """Return True if *locator* must be fetched over the network."""
    return bool(_SCHEME_RE.match(locator)) and not locator.lower().startswith("file://")


def normalize_locator(locator: str) -> str:
    """Return the canonical identity of *locator*.

    * URLs: scheme and host lower-cased, default ports dropped, dot
      segments removed, fragment stripped.
    * ``file://`` URLs and paths: absolute, normalized filesystem paths.
    * ``-`` is returned unchanged.
    """
    if locator == STDIN_LOCATOR:
        return locator
    if is_url(locator):
        return _normalize_url(locator)
    if locator.lower().startswith("file://"):
        locator = unquote(urlsplit(locator).path)
    return os.path.abspath(os.path.expanduser(locator))


def join_locator(base: str, relative: str) -> str:
    """Resolve *relative* against the directory of the document *base*.

    Absolute paths and URLs are returned normalized and ignore *base*.
    """
    if is_url(relative) or relative.lower().startswith("file://"):
        return normalize_locator(relative)
    if is_url(base):
        return _normalize_url(urljoin(base, relative))
    if os.path.isabs(os.path.expanduser(relative)):
        return normalize_locator(relative)
    if base == STDIN_LOCATOR:
        return normalize_locator(relative)
    base_dir = os.path.dirname(normalize_locator(base))
    return os.path.normpath(os.path.join(base_dir, relative))


def _normalize_url(url: str) -> str:
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    netloc = host
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{parts.port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo += f":{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parts.path or "/"
    normalized = posixpath.normpath(path)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if path.endswith("/") and not normalized.endswith("/"):
        normalized += "/"
    return urlunsplit((scheme, netloc, normalized, parts.query, ""))
