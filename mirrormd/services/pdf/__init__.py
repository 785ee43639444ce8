"""PDF export: theme catalog, document shell, headless engine and pipeline."""

from .document import build_document
from .engine import HeadlessRenderEngine, PageOptions
from .pipeline import PdfExportPipeline, derive_pdf_filename
from .themes import PdfTheme, PdfThemeCatalog

__all__ = [
    "PdfTheme",
    "PdfThemeCatalog",
    "build_document",
    "HeadlessRenderEngine",
    "PageOptions",
    "PdfExportPipeline",
    "derive_pdf_filename",
]
