"""Tool bridge: dispatch and text rendering"""
from sdp_bridge.tools.bridge import TOOLS, TextContent, ToolBridge, ToolResult

__all__ = ["TOOLS", "TextContent", "ToolBridge", "ToolResult"]
