from __future__ import annotations


class MirrorMDError(Exception):
    """Base class for errors raised by MirrorMD services."""


class ValidationError(MirrorMDError):
    """User-correctable input problem (maps to a 4xx response)."""


class RenderError(MirrorMDError):
    """Markdown or PDF rendering failed downstream (maps to a 5xx response)."""


class ResourceNotFound(MirrorMDError):
    """A referenced saved file does not exist."""


class ServerUnreachableError(MirrorMDError):
    """The editor could not reach the MirrorMD server at all."""
