import pytest

from mirrormd.domain.errors import ServerUnreachableError, ValidationError
from mirrormd.domain.models import PdfArtifact
from mirrormd.services.exporters.pdf_exporter import PdfExporter


class FakeClient:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.requests = []

    def generate_pdf(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return PdfArtifact(content=b"%PDF-1.7 ok", filename="x.pdf")


def test_pdf_exporter_metadata():
    exp = PdfExporter(FakeClient())
    assert exp.name == "pdf"
    assert exp.file_ext == "pdf"
    assert exp.needs_options is True


def test_pdf_exporter_writes_server_bytes(tmp_path):
    client = FakeClient()
    out = tmp_path / "notes.pdf"
    PdfExporter(client).export("# Notes", out, title="Notes", theme="printer")

    assert out.read_bytes() == b"%PDF-1.7 ok"
    [req] = client.requests
    assert req.markdown == "# Notes"
    assert req.filename == "notes.pdf"
    assert req.title == "Notes"
    assert req.theme == "printer"


def test_pdf_exporter_default_theme(tmp_path):
    client = FakeClient()
    PdfExporter(client).export("x", tmp_path / "a.pdf")
    assert client.requests[0].theme == "solarized-light"


def test_pdf_exporter_rejects_blank_before_request(tmp_path):
    client = FakeClient()
    with pytest.raises(ValidationError):
        PdfExporter(client).export("   ", tmp_path / "a.pdf")
    assert client.requests == []


def test_pdf_exporter_propagates_client_errors(tmp_path):
    out = tmp_path / "a.pdf"
    client = FakeClient(error=ServerUnreachableError("Network error"))
    with pytest.raises(ServerUnreachableError):
        PdfExporter(client).export("x", out)
    assert not out.exists()
