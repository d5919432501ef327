"""
Tests for /api/users: account, profile, settings, deletion and export.
"""

from src.common.repositories import Collections
from tests.helpers.factories import make_resume, make_user


class TestAccount:
    """GET/PATCH /api/users/me"""

    def test_local_user_created_on_first_request(self, client, repos):
        data = client.get("/api/users/me").json()["data"]
        assert data["email"] == "local@resume-tailor.dev"
        assert repos[Collections.USERS].count_documents({}) == 1

    def test_update_name_and_email(self, client, user):
        data = client.patch("/api/users/me", json={"name": "Jane", "email": "Jane@Example.com"}).json()["data"]
        assert data["name"] == "Jane"
        assert data["email"] == "jane@example.com"

    def test_email_in_use(self, client, repos, user):
        repos[Collections.USERS].insert_one(make_user(email="taken@example.com"))
        response = client.patch("/api/users/me", json={"email": "taken@example.com"})
        assert response.status_code == 409

    def test_invalid_email(self, client):
        assert client.patch("/api/users/me", json={"email": "nope"}).status_code == 400


class TestProfile:
    """GET/PATCH /api/users/profile"""

    def test_defaults(self, client):
        data = client.get("/api/users/profile").json()["data"]
        assert data["skills"] == []
        assert data["preferredIndustries"] == []
        assert data["jobTitle"] is None

    def test_update(self, client):
        data = client.patch("/api/users/profile", json={
            "jobTitle": "Staff Engineer",
            "experienceLevel": "senior",
            "skills": ["Python", "Kafka"],
            "linkedinUrl": "https://linkedin.com/in/jane",
        }).json()["data"]

        assert data["jobTitle"] == "Staff Engineer"
        assert data["experienceLevel"] == "senior"
        assert data["skills"] == ["Python", "Kafka"]

    def test_bad_github_url(self, client):
        response = client.patch("/api/users/profile", json={"githubUrl": "https://gitlab.com/jane"})
        assert response.status_code == 400
        assert "GitHub" in response.json()["error"]["message"]


class TestSettings:
    """Settings with defaults and deep merge."""

    def test_defaults_on_first_read(self, client):
        settings = client.get("/api/users/settings").json()["data"]["settings"]
        assert settings["appearance"]["theme"] == "dark"
        assert settings["ai"]["maxTokens"] == 4000

    def test_patch_merges(self, client):
        client.patch("/api/users/settings", json={"appearance": {"theme": "light"}})
        settings = client.put("/api/users/settings", json={"notifications": {"weeklyDigest": True}}).json()["data"]["settings"]

        assert settings["appearance"]["theme"] == "light"
        assert settings["notifications"]["weeklyDigest"] is True
        assert settings["notifications"]["emailNotifications"] is True

    def test_invalid_value(self, client):
        response = client.patch("/api/users/settings", json={"ai": {"maxTokens": 50}})
        assert response.status_code == 400


class TestDeleteAndExport:
    """Account deletion and data export."""

    def test_delete_requires_confirmation(self, client, repos, user):
        response = client.post("/api/users/delete", json={"confirmation": "yes"})
        assert response.status_code == 400
        assert repos[Collections.USERS].count_documents({}) == 1

    def test_delete_cascades(self, client, repos, user):
        repos[Collections.RESUMES].insert_one(make_resume(user["_id"]))

        response = client.post("/api/users/delete", json={"confirmation": "DELETE MY ACCOUNT"})

        assert response.json()["data"]["message"] == "Account deleted successfully"
        assert repos[Collections.RESUMES].count_documents({}) == 0
        assert repos[Collections.USERS].count_documents({"_id": user["_id"]}) == 0

    def test_export_download(self, client, repos, user):
        repos[Collections.RESUMES].insert_one(make_resume(user["_id"], name="Exported"))

        response = client.post("/api/users/export", json={"includeJobs": False})

        assert response.status_code == 200
        assert response.headers["content-disposition"].startswith('attachment; filename="resume-tailor-export-')
        export = response.json()
        assert export["format"] == "json"
        assert export["resumes"][0]["name"] == "Exported"
        assert "jobs" not in export
        assert export["softSkills"] == []
