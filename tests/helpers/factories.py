"""
Sample documents shared by unit and API tests.

Each factory returns a fresh dict so tests can mutate freely.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def make_resume_content(**overrides: Any) -> Dict[str, Any]:
    content = {
        "contact": {
            "name": "Jane Doe",
            "email": "jane.doe@gmail.com",
            "phone": "+1 555 0100",
            "location": "Seattle, WA",
            "linkedin": "linkedin.com/in/janedoe",
        },
        "summary": "Backend engineer focused on payments infrastructure.",
        "experiences": [
            {
                "id": "exp-1",
                "company": "Acme Payments",
                "title": "Senior Software Engineer",
                "location": "Remote",
                "startDate": "2021-03",
                "endDate": None,
                "bullets": [
                    {"id": "b-1", "text": "Led migration of the ledger service to event sourcing"},
                    {"id": "b-2", "text": "Mentored four engineers and collaborated with product on the roadmap"},
                ],
            },
            {
                "id": "exp-2",
                "company": "Globex",
                "title": "Software Engineer",
                "startDate": "2018-06",
                "endDate": "2021-02",
                "bullets": [
                    {"id": "b-3", "text": "Reduced API latency by 40% through query optimization"},
                ],
            },
        ],
        "education": [
            {
                "id": "edu-1",
                "institution": "University of Washington",
                "degree": "BS",
                "field": "Computer Science",
                "graduationDate": "2018",
            }
        ],
        "skills": {
            "technical": ["Python", "PostgreSQL", "Kafka"],
            "soft": ["Leadership", "Communication"],
        },
    }
    content.update(overrides)
    return content


def make_resume(user_id: str, content: Optional[Dict[str, Any]] = None, **overrides: Any) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    resume = {
        "_id": str(uuid.uuid4()),
        "user_id": user_id,
        "name": "Backend Resume",
        "content": make_resume_content() if content is None else content,
        "template_id": None,
        "is_master": False,
        "created_at": now,
        "updated_at": now,
    }
    resume.update(overrides)
    return resume


def make_job(**overrides: Any) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    job = {
        "_id": str(uuid.uuid4()),
        "platform": "manual",
        "external_id": None,
        "title": "Staff Backend Engineer",
        "company_name": "Stripe",
        "location": "Seattle, WA",
        "description": "Build and scale payment APIs used by millions of businesses.",
        "requirements": ["5+ years backend experience", "Distributed systems"],
        "skills": ["Python", "Kafka", "Go"],
        "salary": None,
        "url": None,
        "posted_at": None,
        "cached_at": now,
        "created_at": now,
        "updated_at": now,
    }
    job.update(overrides)
    return job


def make_user(**overrides: Any) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    user = {
        "_id": str(uuid.uuid4()),
        "email": "local@resume-tailor.dev",
        "name": "Local User",
        "created_at": now,
        "updated_at": now,
    }
    user.update(overrides)
    return user


def make_company_research(**overrides: Any) -> Dict[str, Any]:
    research = {
        "companyName": "Stripe",
        "industry": "Financial Technology",
        "summary": "Payments infrastructure for the internet.",
        "cultureDimensions": [
            {"dimension": "Innovation", "score": 5, "description": "Ships fast"},
        ],
        "cultureOverview": "Rigorous, writing-heavy culture.",
        "glassdoorData": {"overallRating": 4.1, "pros": ["Smart peers"], "cons": ["Intense pace"]},
        "fundingData": {"stage": "Late Stage", "notableInvestors": ["Sequoia"]},
        "competitors": [{"name": "Adyen", "relationship": "Direct competitor"}],
        "interviewTips": [{"category": "technical", "tip": "Practice API design", "priority": "high"}],
        "commonInterviewTopics": ["API design"],
        "coreValues": ["Users first"],
        "valuesAlignment": [{"value": "Users first", "howToDemo": "Customer impact stories"}],
        "keyTakeaways": ["Strong engineering brand"],
    }
    research.update(overrides)
    return research
