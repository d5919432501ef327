"""
Version information for the Resume Tailor service.

This file is the single source of truth for version numbers.
setup.py reads __version__ from here and the API health endpoint imports it.
"""

__version__ = "0.1.0"
__version_info__ = (0, 1, 0)

# Build metadata (set by CI/CD or manually)
BUILD_DATE = "2026-10-18"
GIT_COMMIT = None  # Will be set at runtime if available
