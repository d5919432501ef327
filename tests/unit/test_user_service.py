"""
Tests for local user management: creation, settings, cascade delete, export.
"""

import pytest

from src.common.repositories import Collections
from src.services.user_service import (
    delete_user_cascade,
    export_user_data,
    get_or_create_local_user,
    get_or_create_settings,
)
from tests.helpers.factories import make_job, make_resume


@pytest.fixture
def user():
    return get_or_create_local_user()


class TestLocalUser:
    """Single local account."""

    def test_created_once(self, fake_repositories):
        first = get_or_create_local_user()
        second = get_or_create_local_user()

        assert first["_id"] == second["_id"]
        assert first["email"] == "local@resume-tailor.dev"
        assert fake_repositories[Collections.USERS].count_documents({}) == 1


class TestSettings:
    """Default settings on first read."""

    def test_defaults_created(self, user, fake_repositories):
        document = get_or_create_settings(user["_id"])
        assert document["settings"]["appearance"]["theme"] == "dark"
        assert fake_repositories[Collections.USER_SETTINGS].count_documents({"user_id": user["_id"]}) == 1

    def test_partial_stored_settings_filled(self, user, fake_repositories):
        fake_repositories[Collections.USER_SETTINGS].insert_one(
            {"_id": "s-1", "user_id": user["_id"], "settings": {"appearance": {"theme": "light"}}}
        )
        settings = get_or_create_settings(user["_id"])["settings"]
        assert settings["appearance"]["theme"] == "light"
        assert settings["ai"]["provider"] == "anthropic"


class TestCascadeAndExport:
    """Owned data."""

    @pytest.fixture
    def owned_data(self, user, fake_repositories):
        job = make_job()
        resume = make_resume(user["_id"])
        fake_repositories[Collections.JOBS].insert_one(job)
        fake_repositories[Collections.JOBS].insert_one(make_job(title="Unrelated"))
        fake_repositories[Collections.RESUMES].insert_one(resume)
        fake_repositories[Collections.APPLICATIONS].insert_one(
            {"_id": "app-1", "user_id": user["_id"], "job_id": job["_id"], "status": "applied"}
        )
        fake_repositories[Collections.SOFT_SKILLS].insert_one(
            {"_id": "skill-1", "user_id": user["_id"], "skill_name": "Leadership", "evidence_score": 4}
        )
        get_or_create_settings(user["_id"])
        return {"job": job, "resume": resume}

    def test_export(self, user, owned_data):
        export = export_user_data(user)

        assert export["user"]["id"] == user["_id"]
        assert [r["id"] for r in export["resumes"]] == [owned_data["resume"]["_id"]]
        assert export["applications"][0]["jobId"] == owned_data["job"]["_id"]
        assert [j["title"] for j in export["jobs"]] == ["Staff Backend Engineer"]
        assert export["settings"]["appearance"]["theme"] == "dark"
        assert export["softSkills"][0]["skillName"] == "Leadership"
        assert export["exportedAt"]

    def test_export_sections_optional(self, user, owned_data):
        export = export_user_data(user, include_resumes=False, include_applications=False, include_settings=False)
        assert "resumes" not in export
        assert "applications" not in export
        assert "settings" not in export
        assert len(export["jobs"]) == 1

    def test_cascade_delete(self, user, owned_data, fake_repositories):
        counts = delete_user_cascade(user["_id"])

        assert counts == {
            Collections.APPLICATIONS: 1,
            Collections.SOFT_SKILLS: 1,
            Collections.RESUMES: 1,
            Collections.USER_SETTINGS: 1,
            Collections.USERS: 1,
        }
        # jobs are shared and survive
        assert fake_repositories[Collections.JOBS].count_documents({}) == 2
