"""File-facing tools wrapping the pure import domain."""

from .base import BaseTool, ToolResult
from .cv_import import CvImportTool

__all__ = [
    "BaseTool",
    "ToolResult",
    "CvImportTool",
]
