from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from mirrormd.di.server_container import ServerContainer
from mirrormd.domain.errors import RenderError
from mirrormd.services.pdf.pipeline import DEFAULT_PDF_NAME
from mirrormd.web.schemas import ConvertBody, GeneratePdfBody, SaveFileBody

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_container(request: Request) -> ServerContainer:
    return request.app.state.container


def content_disposition(filename: str) -> str:
    """attachment header with an ASCII fallback plus RFC 5987 filename* for non-ASCII names."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").strip()
    stem, dot, _ext = ascii_name.rpartition(".")
    if not (stem if dot else ascii_name).strip(" ."):
        ascii_name = DEFAULT_PDF_NAME
    header = f'attachment; filename="{ascii_name}"'
    if ascii_name != filename:
        header += f"; filename*=UTF-8''{quote(filename)}"
    return header


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "message": "MirrorMD Backend is running!"}


@router.get("/hello")
def hello() -> dict[str, str]:
    return {"message": "Hello from MirrorMD!"}


@router.post("/convert")
def convert(body: ConvertBody, c: ServerContainer = Depends(get_container)):
    html = c.renderer.render(body.markdown)
    return {
        "success": True,
        "html": html,
        "stats": {"markdownLength": len(body.markdown), "htmlLength": len(html)},
    }


@router.get("/pdf-themes")
def pdf_themes(c: ServerContainer = Depends(get_container)):
    return {
        "success": True,
        "themes": [t.summary() for t in c.catalog.all()],
        "default": c.catalog.default_id,
    }


@router.post("/generate-pdf")
async def generate_pdf(body: GeneratePdfBody, c: ServerContainer = Depends(get_container)):
    export_request = body.to_export_request(c.catalog.default_id)
    # reject bad input before the pipeline (and the browser) is touched
    c.pipeline.validate(export_request)

    try:
        artifact = await c.pipeline.export(export_request)
    except RenderError:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to generate PDF",
                "message": "PDF rendering failed. Please try again.",
            },
        )

    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": content_disposition(artifact.filename)},
    )


# ---------- saved files ----------


@router.get("/files")
def list_files(c: ServerContainer = Depends(get_container)):
    return {"success": True, "files": [f.to_dict() for f in c.file_store.list_files()]}


@router.post("/files")
def save_file(body: SaveFileBody, c: ServerContainer = Depends(get_container)):
    name = c.file_store.save(body.filename, body.content)
    log.info("Saved %s (%d chars)", name, len(body.content))
    return {"success": True, "filename": name}


@router.get("/files/{name}")
def load_file(name: str, c: ServerContainer = Depends(get_container)):
    filename, content = c.file_store.load(name)
    return {"success": True, "filename": filename, "content": content}


@router.delete("/files/{name}")
def delete_file(name: str, c: ServerContainer = Depends(get_container)):
    filename = c.file_store.delete(name)
    log.info("Deleted %s", filename)
    return {"success": True, "filename": filename}
