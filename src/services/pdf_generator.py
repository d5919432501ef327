"""
Resume PDF generation.

Renders ResumeContent to a single-column Letter-size PDF with reportlab's
platypus layout engine: a header (name and contact line), then Summary,
Experience, Education, Skills and Projects sections when present.
"""

import io
import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

from src.common.errors import ErrorCode

logger = logging.getLogger(__name__)

ACCENT = HexColor("#1f2937")
MUTED = HexColor("#4b5563")


class PDFGenerationError(Exception):
    """Raised when a resume PDF cannot be generated."""

    def __init__(self, message: str, code: str, cause: Optional[BaseException] = None):
        self.message = message
        self.code = code
        self.cause = cause
        super().__init__(message)


# ===== STYLES =====

STYLES = {
    "name": ParagraphStyle(
        name="Name", fontName="Helvetica-Bold", fontSize=20, leading=24,
        textColor=ACCENT, alignment=TA_LEFT, spaceAfter=4,
    ),
    "contact": ParagraphStyle(
        name="Contact", fontName="Helvetica", fontSize=9.5, leading=12,
        textColor=MUTED, alignment=TA_LEFT,
    ),
    "section": ParagraphStyle(
        name="Section", fontName="Helvetica-Bold", fontSize=11, leading=14,
        textColor=ACCENT, spaceBefore=10, spaceAfter=2,
    ),
    "body": ParagraphStyle(
        name="Body", fontName="Helvetica", fontSize=10, leading=13,
    ),
    "entry_title": ParagraphStyle(
        name="EntryTitle", fontName="Helvetica-Bold", fontSize=10.5, leading=13, spaceBefore=6,
    ),
    "entry_meta": ParagraphStyle(
        name="EntryMeta", fontName="Helvetica-Oblique", fontSize=9.5, leading=12, textColor=MUTED,
    ),
    "bullet": ParagraphStyle(
        name="Bullet", fontName="Helvetica", fontSize=10, leading=13,
        leftIndent=14, firstLineIndent=-9,
    ),
}


def _clean_bullet_text(text: str) -> str:
    """Drop a leading bullet marker the author typed themselves."""
    return re.sub(r"^\s*[-•*]\s*", "", text or "").strip()


def _p(text: str, style: str) -> Paragraph:
    return Paragraph(escape(text), STYLES[style])


def _section(title: str) -> List[Any]:
    return [
        _p(title.upper(), "section"),
        HRFlowable(width="100%", thickness=0.6, color=ACCENT, spaceAfter=4),
    ]


# ===== SECTIONS =====

def _header(contact: Dict[str, Any]) -> List[Any]:
    parts = [contact.get(key) for key in ("email", "phone", "location", "linkedin", "github")]
    return [
        _p(contact["name"], "name"),
        _p("  |  ".join(part for part in parts if part), "contact"),
        Spacer(1, 4),
    ]


def _experience(experiences: List[Dict[str, Any]]) -> List[Any]:
    flowables = _section("Experience")
    for exp in experiences:
        flowables.append(_p(f"{exp.get('title', '')}, {exp.get('company', '')}", "entry_title"))
        dates = f"{exp.get('startDate', '')} - {exp.get('endDate') or 'Present'}"
        meta = f"{dates}  |  {exp['location']}" if exp.get("location") else dates
        flowables.append(_p(meta, "entry_meta"))
        for bullet in exp.get("bullets") or []:
            text = _clean_bullet_text(bullet.get("text", ""))
            if text:
                flowables.append(_p(f"• {text}", "bullet"))
    return flowables


def _education(education: List[Dict[str, Any]]) -> List[Any]:
    flowables = _section("Education")
    for edu in education:
        degree = edu.get("degree", "")
        if edu.get("field"):
            degree = f"{degree} in {edu['field']}"
        flowables.append(_p(f"{degree}, {edu.get('institution', '')}", "entry_title"))
        meta = [part for part in (edu.get("graduationDate"), f"GPA {edu['gpa']}" if edu.get("gpa") else None) if part]
        if meta:
            flowables.append(_p("  |  ".join(meta), "entry_meta"))
    return flowables


def _skills(skills: Dict[str, Any]) -> List[Any]:
    lines = []
    for key, label in (("technical", "Technical"), ("soft", "Soft Skills"), ("languages", "Languages"), ("certifications", "Certifications")):
        values = skills.get(key) or []
        if values:
            lines.append(Paragraph(f"<b>{label}:</b> {escape(', '.join(values))}", STYLES["body"]))
    return _section("Skills") + lines if lines else []


def _projects(projects: List[Dict[str, Any]]) -> List[Any]:
    flowables = _section("Projects")
    for project in projects:
        flowables.append(_p(project.get("name", ""), "entry_title"))
        if project.get("description"):
            flowables.append(_p(project["description"], "body"))
        details = []
        if project.get("technologies"):
            details.append(", ".join(project["technologies"]))
        if project.get("link"):
            details.append(project["link"])
        if details:
            flowables.append(_p("  |  ".join(details), "entry_meta"))
    return flowables


def build_flowables(content: Dict[str, Any]) -> List[Any]:
    """Layout for a resume, skipping empty sections."""
    flowables = _header(content["contact"])
    if content.get("summary"):
        flowables += _section("Summary") + [_p(content["summary"], "body")]
    if content.get("experiences"):
        flowables += _experience(content["experiences"])
    if content.get("education"):
        flowables += _education(content["education"])
    flowables += _skills(content.get("skills") or {})
    if content.get("projects"):
        flowables += _projects(content["projects"])
    return flowables


def generate_resume_pdf(content: Dict[str, Any]) -> bytes:
    """
    Render resume content to PDF bytes.

    Args:
        content: Resume content dict (camelCase)

    Returns:
        PDF file content

    Raises:
        PDFGenerationError: INVALID_CONTENT without a contact name and
            email, GENERATION_ERROR when rendering fails
    """
    contact = content.get("contact") or {}
    if not (contact.get("name") or "").strip() or not (contact.get("email") or "").strip():
        raise PDFGenerationError("Resume must have contact name and email", ErrorCode.INVALID_CONTENT)

    buffer = io.BytesIO()
    try:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            leftMargin=0.6 * inch,
            rightMargin=0.6 * inch,
            topMargin=0.5 * inch,
            bottomMargin=0.5 * inch,
            title=f"{contact['name']} - Resume",
            author=contact["name"],
        )
        doc.build(build_flowables(content))
    except Exception as e:
        logger.error(f"PDF generation failed: {e}")
        raise PDFGenerationError("Failed to generate PDF", ErrorCode.GENERATION_ERROR, e) from e

    pdf = buffer.getvalue()
    logger.info(f"Generated resume PDF for {contact['name']} ({len(pdf)} bytes)")
    return pdf


def generate_pdf_filename(content: Dict[str, Any], today: Optional[date] = None) -> str:
    """
    Download filename like "john-doe-resume-2024-05-01.pdf".

    Runs of characters outside a-z and 0-9 become a single dash.
    """
    name = ((content.get("contact") or {}).get("name") or "").strip().lower()
    slug = re.sub(r"[^a-z0-9]+", "-", name)
    return f"{slug}-resume-{(today or date.today()).isoformat()}.pdf"
