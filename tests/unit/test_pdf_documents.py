"""
Tests for resume PDF generation (reportlab) and parsing (pdfplumber).
"""

from datetime import date

import pytest

from src.common.errors import ErrorCode
from src.services.pdf_generator import (
    PDFGenerationError,
    build_flowables,
    generate_pdf_filename,
    generate_resume_pdf,
)
from src.services.pdf_parser import PDFParseError, extract_text_from_pdf, parse_pdf
from tests.helpers.factories import make_resume_content


# ===== TESTS: Generation =====

class TestGenerateResumePdf:
    """Rendering resume content."""

    def test_renders_pdf_bytes(self):
        pdf = generate_resume_pdf(make_resume_content())
        assert pdf.startswith(b"%PDF")

    def test_generated_pdf_is_parseable(self):
        parsed = parse_pdf(generate_resume_pdf(make_resume_content()))

        assert parsed["numPages"] == 1
        assert "Jane Doe" in parsed["text"]
        assert "Acme Payments" in parsed["text"]
        assert parsed["info"]["title"] == "Jane Doe - Resume"
        assert parsed["info"]["author"] == "Jane Doe"

    def test_escapes_markup_characters(self):
        content = make_resume_content(summary="R&D lead for <payments> & ledgers")
        assert generate_resume_pdf(content).startswith(b"%PDF")

    def test_missing_contact(self):
        with pytest.raises(PDFGenerationError) as exc_info:
            generate_resume_pdf(make_resume_content(contact={"name": "Jane", "email": " "}))
        assert exc_info.value.code == ErrorCode.INVALID_CONTENT

    def test_skips_empty_sections(self):
        content = make_resume_content(summary=None, experiences=[], education=[], skills={"technical": [], "soft": []})
        # header only: name, contact line, spacer
        assert len(build_flowables(content)) == 3


class TestGeneratePdfFilename:
    """Download filenames."""

    def test_slug(self):
        content = make_resume_content(contact={"name": "  Jane  O'Doe ", "email": "jane@gmail.com"})
        assert generate_pdf_filename(content, today=date(2024, 5, 1)) == "jane-o-doe-resume-2024-05-01.pdf"


# ===== TESTS: Parsing =====

class TestParsePdf:
    """Text extraction from uploads."""

    def test_extract_text(self):
        text = extract_text_from_pdf(generate_resume_pdf(make_resume_content()))
        assert "Reduced API latency by 40%" in text

    def test_not_a_pdf(self):
        with pytest.raises(PDFParseError):
            parse_pdf(b"definitely not a pdf")
