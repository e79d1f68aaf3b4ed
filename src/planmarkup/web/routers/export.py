"""Export format endpoints."""

from fastapi import APIRouter
from fastapi.responses import Response

from planmarkup.application import MarkupSession
from planmarkup.application.config import load_document_from_dict
from planmarkup.infrastructure.exporters import ExporterRegistry
from planmarkup.web.exceptions import UnsupportedFormatError
from planmarkup.web.schemas.requests import DocumentRequest
from planmarkup.web.schemas.responses import ExportFormatsSchema

router = APIRouter(prefix="/export", tags=["export"])

_MEDIA_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
    "txt": "text/plain",
}


@router.get("/formats", response_model=ExportFormatsSchema)
async def list_export_formats() -> ExportFormatsSchema:
    """List all available export formats."""
    return ExportFormatsSchema(formats=ExporterRegistry.available_formats())


@router.post("/{format_name}")
async def export_document(format_name: str, request: DocumentRequest) -> Response:
    """Export a floor-plan document to any registered format.

    Raises:
        UnsupportedFormatError: If format is not registered.
    """
    if not ExporterRegistry.is_registered(format_name):
        raise UnsupportedFormatError(format_name, ExporterRegistry.available_formats())

    session = MarkupSession.from_document(load_document_from_dict(request.document))
    exporter = ExporterRegistry.create(format_name)
    content = exporter.export_string(session.state())
    return Response(
        content=content,
        media_type=_MEDIA_TYPES.get(exporter.file_extension, "text/plain"),
    )
