"""
Shared route dependencies
"""
from fastapi import HTTPException, Request, status

from sdp_bridge.tools.bridge import ToolBridge


def get_bridge(request: Request) -> ToolBridge:
    """ToolBridge created at startup"""
    bridge = getattr(request.app.state, "bridge", None)
    if bridge is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tool bridge is not initialised",
        )
    return bridge
