"""
Report text extraction - Word (.docx) and plain-text reports to plain text.
"""
from io import BytesIO

from docx import Document

SUPPORTED_EXTENSIONS = (".docx", ".txt")


class DocumentService:
    """Reads uploaded intervention reports."""

    @staticmethod
    def is_supported(file_name: str) -> bool:
        return bool(file_name) and file_name.lower().endswith(SUPPORTED_EXTENSIONS)

    @staticmethod
    def extract_text(content: bytes, file_name: str) -> str:
        """
        Return the plain text of a report.
        Paragraphs come first, then table rows (cells joined by " | ").
        """
        name = (file_name or "").lower()
        if name.endswith(".txt"):
            return content.decode("utf-8", errors="replace")
        if not name.endswith(".docx"):
            raise ValueError(f"Unsupported report format: {file_name}")

        doc = Document(BytesIO(content))
        parts = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [c.text.strip() for c in row.cells if c.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))
        return "\n".join(parts)
