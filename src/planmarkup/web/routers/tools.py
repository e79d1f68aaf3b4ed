"""Tool catalog endpoints."""

from fastapi import APIRouter

from planmarkup.domain import catalog
from planmarkup.domain.value_objects import DesignPurpose, ToolCategory
from planmarkup.web.schemas.responses import ToolListSchema, ToolSchema

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("", response_model=ToolListSchema)
async def list_tools(
    purpose: DesignPurpose = DesignPurpose.BUDGET_MARKUP,
    category: ToolCategory | None = None,
) -> ToolListSchema:
    """List the tools enabled for a design purpose, optionally by category."""
    tools = [
        ToolSchema(
            id=tool.id,
            name=tool.name,
            icon=tool.icon,
            category=tool.category.value,
            purposes=sorted(p.value for p in tool.purposes),
        )
        for tool in catalog.tools_for(purpose, category)
    ]
    return ToolListSchema(purpose=purpose.value, tools=tools)
