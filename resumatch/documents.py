"""Plain-text extraction for uploaded job descriptions and resumes."""

import re
from pathlib import Path

from bs4 import BeautifulSoup
from pdfminer.high_level import extract_text as pdf_extract_text

ALLOWED_EXTENSIONS = {".txt", ".md", ".pdf", ".html", ".htm"}
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

_BLANK_LINES = re.compile(r"\n{3,}")


class DocumentError(ValueError):
    """A file could not be turned into text."""


def validate_file_type(file_name: str) -> bool:
    return Path(file_name).suffix.lower() in ALLOWED_EXTENSIONS


def validate_file_size(size: int) -> bool:
    return size <= MAX_FILE_SIZE


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return _BLANK_LINES.sub("\n\n", soup.get_text("\n")).strip()


def extract_text(path: Path) -> str:
    """
    Read a document from disk as plain text.

    Raises:
        DocumentError: If the file is missing, too large, of an unsupported
            type, or unreadable
    """
    path = Path(path)
    if not path.exists():
        raise DocumentError(f"File not found: {path}")
    if not validate_file_type(path.name):
        raise DocumentError(
            f"Unsupported file type: {path.name}. Use {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )
    if not validate_file_size(path.stat().st_size):
        raise DocumentError(f"File too large (max 5MB): {path.name}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".pdf":
            return pdf_extract_text(str(path)).strip()
        text = path.read_text(encoding="utf-8", errors="replace")
    except Exception as e:
        raise DocumentError(f"Failed to read {path.name}: {e}") from e

    if suffix in (".html", ".htm"):
        return html_to_text(text)
    return text
