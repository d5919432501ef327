"""
API route modules.

Each module owns one resource or feature area under /api.
"""

from .applications import router as applications_router
from .companies import router as companies_router
from .health import router as health_router
from .jobs import router as jobs_router
from .linkedin import router as linkedin_router
from .modules import router as modules_router
from .resumes import router as resumes_router
from .soft_skills import router as soft_skills_router
from .users import router as users_router

__all__ = [
    "applications_router",
    "companies_router",
    "health_router",
    "jobs_router",
    "linkedin_router",
    "modules_router",
    "resumes_router",
    "soft_skills_router",
    "users_router",
]
