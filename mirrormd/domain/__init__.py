"""Domain layer: interfaces, errors and simple models (dataclasses)."""

from .errors import (
    MirrorMDError,
    RenderError,
    ResourceNotFound,
    ServerUnreachableError,
    ValidationError,
)
from .interfaces import (
    IExporter,
    IFileService,
    IMarkdownRenderer,
    IRenderEngine,
    ISettingsService,
)
from .models import Document, ExportRequest, PdfArtifact

__all__ = [
    "IMarkdownRenderer",
    "IFileService",
    "ISettingsService",
    "IExporter",
    "IRenderEngine",
    "Document",
    "ExportRequest",
    "PdfArtifact",
    "MirrorMDError",
    "ValidationError",
    "RenderError",
    "ResourceNotFound",
    "ServerUnreachableError",
]
