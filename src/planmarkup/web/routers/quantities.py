"""Bill of quantities endpoints."""

from fastapi import APIRouter

from planmarkup.application.config import document_to_snapshot, load_document_from_dict
from planmarkup.web.dependencies import QuantityCalculatorDep
from planmarkup.web.schemas.requests import QuantitiesRequest
from planmarkup.web.schemas.responses import QuantityReportSchema

router = APIRouter(prefix="/quantities", tags=["quantities"])


@router.post("", response_model=QuantityReportSchema)
async def calculate_quantities(
    request: QuantitiesRequest,
    calculator: QuantityCalculatorDep,
) -> QuantityReportSchema:
    """Aggregate equipment counts, cable and containment lengths, zone areas
    and PV totals for a floor-plan document.

    Args:
        request: Request containing the document and an optional scale override.
        calculator: Injected QuantityCalculator.

    Returns:
        Quantity report.

    Raises:
        ConfigError: If the document is invalid (handled by exception handler).
        PrerequisiteMissing: If measured items exist without a scale.
    """
    document = load_document_from_dict(request.document)
    snapshot = document_to_snapshot(document)
    report = calculator.calculate(snapshot, request.meters_per_pixel)
    return QuantityReportSchema(**report.to_dict())
