"""Canonical Pydantic models shared across all specfront modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`FetchConfig`, :class:`CacheConfig`, :class:`ExtensionsConfig`,
    :class:`OutputConfig`, and :class:`GlobalConfig`.

**Extension wire models** -- exchanged with extension handler processes:
    :class:`Version`, :class:`Wrapper`, :class:`ExtensionRequest`, and
    :class:`ExtensionResponse`. See :mod:`specfront.extensions.wire` for
    the binary encoding.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class FetchConfig(BaseModel):
    """How URL locators are fetched.

    There is no timeout by default: a hung server blocks the compilation.
    Setting ``timeout`` turns a hang into a :class:`~specfront.exceptions.FetchError`.
    """

    timeout: Optional[float] = Field(
        default=None, description="Seconds to wait for a remote document (None = forever)"
    )
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")


class CacheConfig(BaseModel):
    """Persistent on-disk cache for fetched URL documents.

    Disabled by default, so each run fetches every remote document exactly
    once. The in-memory reference cache is always on and is not configured
    here.
    """

    enabled: bool = Field(default=False, description="Cache fetched documents on disk")
    ttl_seconds: int = Field(default=3600, description="Cache TTL in seconds")


class ExtensionsConfig(BaseModel):
    """Vendor-extension handlers.

    ``handlers`` lists executables (names on ``$PATH`` or paths) invoked in
    order. ``enabled``/``disabled`` filter handlers discovered through the
    ``specfront.extensions`` entry-point group.
    """

    handlers: list[str] = Field(default_factory=list)
    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class OutputConfig(BaseModel):
    """Output format preferences."""

    format: str = Field(default="auto", description="auto, json, yaml, plain, rich")


class GlobalConfig(BaseModel):
    """Top-level configuration persisted as ``config.json``.

    Loaded by :func:`~specfront.config.load_global_config` and saved by
    :func:`~specfront.config.save_global_config`. Fields here have the
    lowest precedence and are overridden by project config, environment
    variables and CLI flags (see :func:`~specfront.config.resolve_config`).
    """

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    extensions: ExtensionsConfig = Field(default_factory=ExtensionsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Extension wire messages ---


class Version(BaseModel):
    """A ``major.minor.patch`` version triple."""

    major: int = 0
    minor: int = 0
    patch: int = 0


class Wrapper(BaseModel):
    """The named, versioned payload handed to an extension handler.

    ``yaml`` holds the raw extension value re-rendered as YAML text.
    """

    name: str = ""
    version: str = "unknown"
    yaml: str = ""


class ExtensionRequest(BaseModel):
    """Request written to an extension handler's standard input."""

    model_config = ConfigDict(extra="ignore")

    compiler_version: Version = Field(default_factory=Version)
    wrapper: Wrapper = Field(default_factory=Wrapper)
    extension_name: str
    parameter: str = ""


class ExtensionResponse(BaseModel):
    """Response read from an extension handler's standard output.

    ``value`` is opaque to the compiler: it becomes the compiled
    representation of the extension field when ``handled`` is true.
    ``type_url`` optionally names the type of ``value`` for consumers.
    """

    model_config = ConfigDict(extra="ignore")

    handled: bool = False
    value: Optional[bytes] = None
    type_url: str = ""
    errors: list[str] = Field(default_factory=list)
