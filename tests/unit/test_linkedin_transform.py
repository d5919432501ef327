"""
Tests for Apify item normalization.
"""

from datetime import datetime, timedelta, timezone

from src.services.linkedin_transform import (
    clean_description,
    parse_posted_at,
    to_job_insert,
    transform_apify_job,
    transform_apify_jobs,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestTransformApifyJob:
    """Field fallbacks and filtering."""

    def test_primary_fields(self):
        job = transform_apify_job({
            "jobId": 3812345678,
            "title": "Backend Engineer",
            "company": "Acme",
            "location": "Berlin",
            "salary": "€80k",
            "postedTime": "2 days ago",
            "description": "<p>Build <b>APIs</b></p>\n<ul><li>Python</li></ul>",
            "link": "https://www.linkedin.com/jobs/view/3812345678",
        })

        assert job["externalId"] == "3812345678"
        assert job["companyName"] == "Acme"
        assert job["description"] == "Build APIs Python"
        assert job["postedAt"] == "2 days ago"
        assert job["id"]

    def test_alternate_fields_and_id_from_url(self):
        job = transform_apify_job({
            "jobTitle": "Data Engineer",
            "companyName": "Globex",
            "jobUrl": "https://www.linkedin.com/jobs/view/42?trk=abc",
            "descriptionText": "Plain text",
        })
        assert job["title"] == "Data Engineer"
        assert job["externalId"] == "42"
        assert job["url"] == "https://www.linkedin.com/jobs/view/42?trk=abc"
        assert job["location"] is None

    def test_missing_company_dropped(self):
        assert transform_apify_job({"title": "Engineer"}) is None

    def test_list_drops_incomplete(self):
        jobs = transform_apify_jobs([{"title": "A", "company": "B"}, {"company": "C"}])
        assert len(jobs) == 1


class TestHelpers:
    """Description cleanup, posted dates, job documents."""

    def test_clean_description_entities(self):
        assert clean_description("R&amp;D&nbsp;team") == "R&D team"
        assert clean_description("") is None
        assert clean_description("<br/>") is None

    def test_relative_posted_at(self):
        assert parse_posted_at("3 hours ago", now=NOW) == NOW - timedelta(hours=3)
        assert parse_posted_at("1 month ago", now=NOW) == NOW - timedelta(days=30)

    def test_iso_posted_at(self):
        assert parse_posted_at("2024-01-15", now=NOW) == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_unparseable_posted_at(self):
        assert parse_posted_at("recently", now=NOW) is None
        assert parse_posted_at(None) is None

    def test_to_job_insert(self):
        job = {
            "externalId": "42",
            "title": "Engineer",
            "companyName": "Acme",
            "salary": "$150k",
            "postedAt": "2024-01-15",
            "url": "https://www.linkedin.com/jobs/view/42",
        }
        doc = to_job_insert(job)
        assert doc["platform"] == "linkedin"
        assert doc["external_id"] == "42"
        assert doc["salary"] == {"raw": "$150k"}
        assert doc["posted_at"] == datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert doc["requirements"] == []
