"""CV import tool - read a résumé file and return its parsed sections and items."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..contracts.cv_import import ParsedDocumentResponse
from ..core.config import DEFAULT_CONFIG, HeuristicsConfig
from ..domain.cv_import import build_items, parse_document
from ..domain.models import ParsedDocument
from .base import BaseTool, ToolResult

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".md", ".txt", ".docx")

# Word paragraph style -> markdown heading prefix understood by the markdown importer.
_DOCX_HEADING_PREFIXES = {
    "Title": "# ",
    "Subtitle": "## ",
    "Heading 1": "### ",
    "Heading 2": "#### ",
    "Heading 3": "#### ",
}


class CvImportTool(BaseTool):
    """Parse a résumé file into basics, sections and section items."""

    name = "cv_import"
    description = """Import a resume file (MD, TXT, DOCX) into structured sections.
Returns the detected contact basics and, per section, the raw blocks and the
items built from them (title, subtitle, date range, description).
Supported formats: .md, .txt, .docx"""
    parameters = {
        "path": {
            "type": "string",
            "description": "Path to the resume file",
            "required": True,
        },
    }

    def __init__(self, workspace_dir: str = ".", config: HeuristicsConfig = DEFAULT_CONFIG):
        self.workspace_dir = Path(workspace_dir).resolve()
        self.config = config
        # Cache: path -> (mtime, parsed_result)
        self._cache: Dict[str, Tuple[float, ToolResult]] = {}

    async def execute(self, path: str) -> ToolResult:
        try:
            file_path = self._resolve_path(path)
            if not file_path.exists():
                return ToolResult(success=False, output="", error=f"File not found: {path}")

            current_mtime = file_path.stat().st_mtime
            cache_key = str(file_path)
            if cache_key in self._cache:
                cached_mtime, cached_result = self._cache[cache_key]
                if cached_mtime == current_mtime:
                    logger.debug("Import cache hit for %s", cache_key)
                    return cached_result

            suffix = file_path.suffix.lower()
            if suffix == ".docx":
                text, markdown = self._read_docx(file_path)
            elif suffix == ".md":
                # plain-text fallback is derived from the markdown itself
                text, markdown = "", file_path.read_text(encoding="utf-8")
            elif suffix == ".txt":
                text, markdown = file_path.read_text(encoding="utf-8"), None
            else:
                return ToolResult(
                    success=False,
                    output="",
                    error=f"Unsupported file format: {suffix}. Supported: {', '.join(SUPPORTED_SUFFIXES)}",
                )

            document = parse_document(text, markdown=markdown, config=self.config)
            items = [build_items(section, self.config) for section in document.sections]
            response = ParsedDocumentResponse.from_document(
                document,
                items,
                source=str(file_path),
                format=suffix,
                default_skill_level=self.config.default_skill_level,
            )
            logger.info("Imported %s: %d section(s)", file_path.name, len(document.sections))

            result = ToolResult(
                success=True,
                output=self._summarize(document, items),
                data=response.model_dump(),
            )
            self._cache[cache_key] = (current_mtime, result)
            return result

        except Exception as e:
            logger.warning("CV import failed for %s: %s", path, e)
            return ToolResult(success=False, output="", error=str(e))

    def _read_docx(self, path: Path) -> Tuple[str, Optional[str]]:
        """Return ``(plain_text, markdown)`` for a DOCX file.

        Heading styles become markdown headings and list styles become ``- ``
        bullets; table rows are appended as tab-separated lines.
        """
        try:
            from docx import Document
        except ImportError:
            raise ImportError("python-docx not installed. Run: pip install python-docx")

        doc = Document(str(path))
        text_parts: List[str] = []
        markdown_parts: List[str] = []

        for para in doc.paragraphs:
            content = para.text.strip()
            if not content:
                continue
            style = para.style.name if para.style is not None else ""
            prefix = _DOCX_HEADING_PREFIXES.get(style, "")
            if not prefix and style.startswith("Heading"):
                prefix = "#### "
            if not prefix and style.startswith("List"):
                prefix = "- "
            text_parts.append(f"- {content}" if prefix == "- " else content)
            markdown_parts.append(f"{prefix}{content}")

        for table in doc.tables:
            for row in table.rows:
                row_text = "\t".join(cell.text.strip() for cell in row.cells if cell.text.strip())
                if row_text:
                    text_parts.append(row_text)
                    markdown_parts.append(row_text)

        markdown = "\n".join(markdown_parts)
        has_headings = any(line.startswith("### ") for line in markdown_parts)
        return "\n".join(text_parts), markdown if has_headings else None

    def _summarize(self, document: ParsedDocument, items: List[list]) -> str:
        basics = document.basics.to_dict()
        output = "=== Basics ===\n"
        for key, value in basics.items():
            output += f"{key}: {value}\n"
        output += "\n=== Detected Sections ===\n"
        for section, section_items in zip(document.sections, items):
            output += f"\n[{section.kind.value}] {section.title} ({len(section_items)} item(s))\n"
            for item in section_items:
                line = " | ".join(part for part in (item.title, item.subtitle, item.date_range) if part)
                output += f"- {line[:200]}{'...' if len(line) > 200 else ''}\n"
        return output

    def _resolve_path(self, path: str) -> Path:
        p = Path(path)
        if p.is_absolute():
            return p
        return self.workspace_dir / p
