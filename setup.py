"""
Setup script for resume-tailor project.

Allows development installation with `pip install -e .`
"""

import re
from pathlib import Path

from setuptools import setup, find_namespace_packages


def read_version() -> str:
    """Read __version__ from version.py without importing it."""
    text = (Path(__file__).parent / "version.py").read_text()
    return re.search(r'^__version__ = "([^"]+)"', text, re.MULTILINE).group(1)


setup(
    name="resume-tailor",
    version=read_version(),
    packages=find_namespace_packages(include=["src", "src.*", "api_service", "api_service.*"]),
    py_modules=["version"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "python-multipart>=0.0.9",
        "pydantic>=2.6",
        "pydantic-settings>=2.2",
        "email-validator>=2.1",
        "python-dotenv>=1.0",
        "pymongo>=4.6",
        "redis>=5.0",
        "tenacity>=8.2",
        "langchain-core>=0.2",
        "langchain-anthropic>=0.1",
        "langchain-openai>=0.1",
        "json-repair>=0.25",
        "requests>=2.31",
        "beautifulsoup4>=4.12",
        "pdfplumber>=0.11",
        "reportlab>=4.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-mock>=3.12",
            "httpx>=0.27",
        ],
    },
)
