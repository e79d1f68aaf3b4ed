"""Document validation endpoints."""

from fastapi import APIRouter

from planmarkup.application.config import (
    ConfigError,
    load_document_from_dict,
    result_from_error,
    validate_document,
)
from planmarkup.web.schemas.requests import DocumentRequest
from planmarkup.web.schemas.responses import ValidationResultSchema

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("", response_model=ValidationResultSchema)
async def validate_floor_plan(request: DocumentRequest) -> ValidationResultSchema:
    """Validate a floor-plan document without opening a session.

    Schema failures are reported as errors rather than a 422 so that clients
    get every problem in one response.
    """
    try:
        result = validate_document(load_document_from_dict(request.document))
    except ConfigError as e:
        result = result_from_error(e)

    return ValidationResultSchema(
        is_valid=result.is_valid,
        exit_code=result.exit_code,
        errors=[{"message": e.message, "path": e.path} for e in result.errors],
        warnings=[
            {"message": w.message, "path": w.path, "suggestion": w.suggestion}
            for w in result.warnings
        ],
    )
