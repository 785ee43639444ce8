from __future__ import annotations

import logging
from typing import Any

import requests

from mirrormd.domain.errors import RenderError, ServerUnreachableError, ValidationError
from mirrormd.domain.models import ExportRequest, PdfArtifact
from mirrormd.services.pdf.pipeline import derive_pdf_filename
from mirrormd.utils.constants import DEFAULT_SERVER_URL

log = logging.getLogger(__name__)

NETWORK_ERROR = "Network error. Please check your connection."


class PdfApiClient:
    """
    Editor-side client for the MirrorMD server.

    Transport problems raise ServerUnreachableError; error responses raise
    ValidationError (4xx) or RenderError (5xx) carrying the server's message.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SERVER_URL,
        *,
        timeout_s: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self.timeout_s, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as e:
            log.warning("Request to %s failed: %s", url, e)
            raise ServerUnreachableError(NETWORK_ERROR) from e

        if resp.status_code < 400:
            return resp

        message = self._error_message(resp)
        if resp.status_code < 500:
            raise ValidationError(message)
        raise RenderError(message)

    @staticmethod
    def _error_message(resp: Any) -> str:
        try:
            data = resp.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            msg = data.get("message") or data.get("error")
            if isinstance(msg, str) and msg:
                return msg
        return f"Server responded with HTTP {resp.status_code}"

    # ---------- endpoints ----------

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/api/health").json()

    def list_themes(self) -> tuple[list[dict[str, str]], str]:
        data = self._request("GET", "/api/pdf-themes").json()
        return list(data.get("themes", [])), str(data.get("default", ""))

    def generate_pdf(self, request: ExportRequest) -> PdfArtifact:
        payload = {
            "markdown": request.markdown,
            "filename": request.filename,
            "theme": request.theme,
            "title": request.title,
        }
        resp = self._request("POST", "/api/generate-pdf", json=payload)
        return PdfArtifact(
            content=resp.content,
            filename=self._filename_from(resp) or derive_pdf_filename(request.filename),
            media_type=resp.headers.get("content-type", "application/pdf"),
        )

    @staticmethod
    def _filename_from(resp: Any) -> str | None:
        header = resp.headers.get("content-disposition", "")
        for part in header.split(";"):
            key, _, value = part.strip().partition("=")
            if key.lower() == "filename" and value:
                return value.strip('"')
        return None
