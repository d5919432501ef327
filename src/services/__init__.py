"""
Services used by the API routes.

Each service wraps an external dependency (MongoDB, Apify, PDF libraries)
or combines repositories with analyzers for one feature.
"""

from src.services.company_research_service import CompanyResearchService
from src.services.linkedin_client import (
    LinkedInNotConfiguredError,
    LinkedInRateLimitError,
    LinkedInSearchError,
    LinkedInTimeoutError,
    search_linkedin_jobs,
    validate_api_key,
)
from src.services.linkedin_transform import to_job_insert, transform_apify_jobs
from src.services.pdf_generator import PDFGenerationError, generate_pdf_filename, generate_resume_pdf
from src.services.pdf_parser import PDFParseError, extract_text_from_pdf, parse_pdf
from src.services.tailor_service import tailor_resume
from src.services.user_service import (
    delete_user_cascade,
    export_user_data,
    get_or_create_local_user,
    get_or_create_settings,
)

__all__ = [
    # Company research
    "CompanyResearchService",
    # LinkedIn
    "LinkedInSearchError",
    "LinkedInNotConfiguredError",
    "LinkedInRateLimitError",
    "LinkedInTimeoutError",
    "search_linkedin_jobs",
    "validate_api_key",
    "to_job_insert",
    "transform_apify_jobs",
    # PDF
    "PDFGenerationError",
    "generate_pdf_filename",
    "generate_resume_pdf",
    "PDFParseError",
    "extract_text_from_pdf",
    "parse_pdf",
    # Tailoring
    "tailor_resume",
    # Users
    "delete_user_cascade",
    "export_user_data",
    "get_or_create_local_user",
    "get_or_create_settings",
]
