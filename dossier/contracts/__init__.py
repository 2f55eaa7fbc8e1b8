"""Public response contracts."""

from .cv_import import (
    BasicsResponse,
    ParsedDocumentResponse,
    ParsedItemResponse,
    ParsedSectionResponse,
    SkillResponse,
)

__all__ = [
    "BasicsResponse",
    "ParsedDocumentResponse",
    "ParsedItemResponse",
    "ParsedSectionResponse",
    "SkillResponse",
]
