"""LLM-backed resume and job analyzers."""

from .company_researcher import research_company
from .context_analyzer import analyze_context
from .impact_analyzer import analyze_impact
from .pre_analysis import run_pre_analysis, summarize_pre_analysis
from .resume_parser import has_valid_content, parse_resume_text
from .soft_skills_coach import continue_assessment, start_assessment
from .uniqueness_analyzer import analyze_uniqueness

__all__ = [
    "research_company",
    "analyze_context",
    "analyze_impact",
    "run_pre_analysis",
    "summarize_pre_analysis",
    "has_valid_content",
    "parse_resume_text",
    "continue_assessment",
    "start_assessment",
    "analyze_uniqueness",
]
