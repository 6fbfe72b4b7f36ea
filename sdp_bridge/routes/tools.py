"""
Tool API routes

- GET /api/tools - tool definitions (name, description, input schema)
- POST /api/tools/{name} - invoke a tool with a JSON object of arguments

Domain failures come back as 200 with isError set; only a body that is
not a JSON object is rejected at the HTTP level.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from sdp_bridge.routes.dependencies import get_bridge
from sdp_bridge.tools.bridge import ToolBridge, ToolResult

router = APIRouter(prefix="/api/tools", tags=["tools"])


@router.get("", summary="List supported tools")
async def list_tools() -> List[Dict[str, Any]]:
    return ToolBridge.tool_definitions()


@router.post(
    "/{name}",
    response_model=ToolResult,
    response_model_by_alias=True,
    summary="Invoke a tool",
)
async def invoke_tool(
    name: str,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
    bridge: ToolBridge = Depends(get_bridge),
) -> ToolResult:
    return await bridge.invoke(name, arguments)
