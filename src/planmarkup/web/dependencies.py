"""FastAPI dependency injection for markup services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from planmarkup.domain.services import QuantityCalculator


@lru_cache(maxsize=1)
def get_quantity_calculator() -> QuantityCalculator:
    """Get cached QuantityCalculator instance."""
    return QuantityCalculator()


# Type aliases for cleaner endpoint signatures
QuantityCalculatorDep = Annotated[QuantityCalculator, Depends(get_quantity_calculator)]
