from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, StrictStr

from mirrormd.domain.models import ExportRequest


class ConvertBody(BaseModel):
    markdown: StrictStr


class GeneratePdfBody(BaseModel):
    markdown: StrictStr
    filename: Optional[StrictStr] = None
    theme: Optional[StrictStr] = None
    title: Optional[StrictStr] = None

    def to_export_request(self, default_theme: str) -> ExportRequest:
        return ExportRequest(
            markdown=self.markdown,
            filename=self.filename,
            theme=self.theme or default_theme,
            title=self.title,
        )


class SaveFileBody(BaseModel):
    filename: StrictStr
    content: StrictStr
