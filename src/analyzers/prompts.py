"""
Prompt helpers shared by the analyzers.

Resume content arrives as the stored camelCase dict; formatting is lenient
about missing sections so partially-parsed resumes still produce a prompt.
"""

import json
from typing import Any, Dict, List, Optional


def _section(title: str, lines: List[str]) -> str:
    return f"## {title}\n" + "\n".join(lines)


def format_resume_for_prompt(content: Dict[str, Any]) -> str:
    """
    Render resume content as markdown for an LLM prompt.

    Args:
        content: Resume content (contact, summary, experiences, education,
            skills, projects)

    Returns:
        Markdown text with one section per populated part of the resume
    """
    parts: List[str] = []

    contact = content.get("contact") or {}
    contact_lines = [f"Name: {contact.get('name', '')}", f"Email: {contact.get('email', '')}"]
    for key, label in (("phone", "Phone"), ("location", "Location"), ("linkedin", "LinkedIn"), ("github", "GitHub")):
        if contact.get(key):
            contact_lines.append(f"{label}: {contact[key]}")
    parts.append(_section("Contact", contact_lines))

    if content.get("summary"):
        parts.append(_section("Summary", [content["summary"]]))

    experiences = content.get("experiences") or []
    if experiences:
        lines: List[str] = []
        for exp in experiences:
            end = exp.get("endDate") or "Present"
            header = f"### {exp.get('title', '')} at {exp.get('company', '')} ({exp.get('startDate', '')} - {end})"
            lines.append(header)
            if exp.get("location"):
                lines.append(f"Location: {exp['location']}")
            for bullet in exp.get("bullets") or []:
                lines.append(f"- {bullet.get('text', '')}")
            lines.append("")
        parts.append(_section("Experience", lines).rstrip())

    education = content.get("education") or []
    if education:
        lines = []
        for edu in education:
            degree = edu.get("degree", "")
            if edu.get("field"):
                degree = f"{degree} in {edu['field']}"
            line = f"- {degree}, {edu.get('institution', '')}"
            if edu.get("graduationDate"):
                line += f" ({edu['graduationDate']})"
            if edu.get("gpa"):
                line += f", GPA {edu['gpa']}"
            lines.append(line)
        parts.append(_section("Education", lines))

    skills = content.get("skills") or {}
    skill_lines = []
    for key, label in (("technical", "Technical"), ("soft", "Soft"), ("languages", "Languages"), ("certifications", "Certifications")):
        values = skills.get(key) or []
        if values:
            skill_lines.append(f"{label}: {', '.join(values)}")
    if skill_lines:
        parts.append(_section("Skills", skill_lines))

    projects = content.get("projects") or []
    if projects:
        lines = []
        for project in projects:
            lines.append(f"### {project.get('name', '')}")
            if project.get("description"):
                lines.append(project["description"])
            if project.get("technologies"):
                lines.append(f"Technologies: {', '.join(project['technologies'])}")
            if project.get("link"):
                lines.append(f"Link: {project['link']}")
        parts.append(_section("Projects", lines))

    return "\n\n".join(parts)


def format_job_for_prompt(job: Dict[str, Any]) -> str:
    """Render a job posting (title, company, description, requirements, skills)."""
    lines = [f"**Title:** {job.get('title', '')}"]
    if job.get("companyName"):
        lines.append(f"**Company:** {job['companyName']}")
    if job.get("description"):
        lines.append(f"\n## Description\n{job['description']}")
    if job.get("requirements"):
        lines.append("\n## Key Requirements\n" + "\n".join(f"- {r}" for r in job["requirements"]))
    if job.get("skills"):
        lines.append("\n## Required Skills\n" + ", ".join(job["skills"]))
    return "\n".join(lines)


# ===== RESUME PARSING =====

RESUME_PARSING_SYSTEM_PROMPT = """You are an expert resume parser. Convert raw text extracted from a resume PDF into structured JSON.

Rules:
- Only use information present in the text. Do not fabricate or infer details.
- Keep bullet text as written, fixing only obvious extraction artifacts (broken lines, stray symbols).
- Dates should be kept in the format used by the resume (e.g. "Jan 2020", "2019").
- Use null for an ongoing role's endDate.
- Split skills into technical and soft skills. Put spoken languages and certifications in their own lists.

Return ONLY a JSON object with this structure:
{
  "contact": {"name": "", "email": "", "phone": "", "location": "", "linkedin": "", "github": ""},
  "summary": "",
  "experiences": [
    {"company": "", "title": "", "location": "", "startDate": "", "endDate": null, "bullets": ["bullet text"]}
  ],
  "education": [
    {"institution": "", "degree": "", "field": "", "graduationDate": "", "gpa": ""}
  ],
  "skills": {"technical": [], "soft": [], "languages": [], "certifications": []},
  "projects": [
    {"name": "", "description": "", "technologies": [], "link": ""}
  ]
}"""


def build_resume_parsing_prompt(extracted_text: str) -> str:
    return f"""Parse the following resume text into the JSON structure described.

---
{extracted_text}
---

Return only the JSON object."""



# ===== RESUME TAILORING =====

RESUME_TAILORING_SYSTEM_PROMPT = """You are an expert resume writer who tailors resumes to specific job postings so they pass ATS screening and read well to recruiters.

Rules:
- Never fabricate experience, employers, dates, metrics or skills. Only rephrase and reprioritize what the resume already shows.
- Start every bullet with a strong action verb and keep it to 1-2 lines.
- Mirror the job's terminology where the resume genuinely supports it (ATS keyword alignment).
- Keep existing metrics; do not invent new numbers.
- The summary is 2-4 sentences, written without "I", leading with the candidate's most relevant value for this role.
- Reorder skills so the ones the job asks for come first. Do not add skills the resume does not list.
- Keep every experience and bullet id exactly as given.

Return ONLY a JSON object with this structure:
{
  "summary": "Tailored professional summary",
  "experiences": [
    {"id": "experience id", "bullets": [{"id": "bullet id", "text": "Rewritten bullet"}]}
  ],
  "skills": {"technical": ["most relevant first"], "soft": ["most relevant first"]}
}"""


def build_resume_tailoring_prompt(
    content: Dict[str, Any],
    job_description: str,
    job_title: str,
    company_name: str,
    requirements: Optional[List[str]] = None,
    skills: Optional[List[str]] = None,
) -> str:
    """
    Build the user prompt for tailoring a resume to one job.

    The resume is embedded as JSON so the model can echo experience and
    bullet ids back. Requirements and skills sections are only included
    when the job lists them.
    """
    sections = [
        f"Tailor this resume for the {job_title} position at {company_name}.",
        f"## Resume (JSON)\n{json.dumps(content, indent=2)}",
        f"## Job Description\n{job_description}",
    ]
    if requirements:
        sections.append("## Key Requirements\n" + "\n".join(f"- {r}" for r in requirements))
    if skills:
        sections.append("## Required Skills\n" + ", ".join(skills))
    sections.append("Return only the JSON object.")
    return "\n\n".join(sections)
