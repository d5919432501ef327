"""
PDF text extraction for uploaded resumes.

Uses pdfplumber to pull page text and the document info dictionary.
"""

import io
import logging
from typing import Any, Dict, Optional

import pdfplumber

logger = logging.getLogger(__name__)


class PDFParseError(Exception):
    """Raised when a PDF cannot be opened or read."""
    pass


def _info_value(metadata: Dict[str, Any], key: str) -> Optional[str]:
    value = metadata.get(key)
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    return str(value) if value else None


def parse_pdf(data: bytes) -> Dict[str, Any]:
    """
    Parse a PDF and extract its text and metadata.

    Args:
        data: PDF file content

    Returns:
        {text, numPages, info: {title, author, creator}}

    Raises:
        PDFParseError: If the file is not a readable PDF
    """
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
            metadata = pdf.metadata or {}
            num_pages = len(pdf.pages)
    except Exception as e:
        logger.error(f"Error parsing PDF: {e}")
        raise PDFParseError("Failed to parse PDF file") from e

    text = "\n".join(pages).strip()
    logger.info(f"Parsed PDF: {num_pages} page(s), {len(text)} chars")
    return {
        "text": text,
        "numPages": num_pages,
        "info": {
            "title": _info_value(metadata, "Title"),
            "author": _info_value(metadata, "Author"),
            "creator": _info_value(metadata, "Creator"),
        },
    }


def extract_text_from_pdf(data: bytes) -> str:
    """Extract only the text of a PDF."""
    return parse_pdf(data)["text"]
