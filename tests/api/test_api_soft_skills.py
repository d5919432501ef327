"""
Tests for /api/soft-skills record routes.
"""

from datetime import datetime, timedelta, timezone

from src.common.repositories import Collections


def _skill(user_id, name, updated_at, **overrides):
    skill = {
        "_id": f"skill-{name.lower()}",
        "user_id": user_id,
        "skill_name": name,
        "evidence_score": None,
        "statement": None,
        "conversation": [],
        "created_at": updated_at,
        "updated_at": updated_at,
    }
    skill.update(overrides)
    return skill


# ===== TESTS: List =====

class TestListSoftSkills:
    """GET /api/soft-skills"""

    def test_most_recent_first(self, client, repos, user):
        now = datetime.now(timezone.utc)
        repo = repos[Collections.SOFT_SKILLS]
        repo.insert_one(_skill(user["_id"], "Leadership", now - timedelta(days=1)))
        repo.insert_one(_skill(user["_id"], "Communication", now, evidence_score=4))
        repo.insert_one(_skill("someone-else", "Teamwork", now))

        body = client.get("/api/soft-skills").json()

        assert body["meta"] == {"total": 2}
        assert [s["skillName"] for s in body["data"]] == ["Communication", "Leadership"]
        assert body["data"][0]["evidenceScore"] == 4

    def test_fetch_error(self, client, repos, user):
        repos[Collections.SOFT_SKILLS].fail_with = RuntimeError("mongo down")
        response = client.get("/api/soft-skills")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "FETCH_ERROR"


# ===== TESTS: Create =====

class TestCreateSoftSkill:
    """POST /api/soft-skills"""

    def test_creates(self, client, repos):
        response = client.post(
            "/api/soft-skills",
            json={
                "skillName": " Leadership ",
                "evidenceScore": 4,
                "statement": "Led a team of four.",
                "conversation": [{"role": "assistant", "content": "Tell me about leading."}],
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["skillName"] == "Leadership"
        assert data["conversation"] == [{"role": "assistant", "content": "Tell me about leading."}]
        assert repos[Collections.SOFT_SKILLS].count_documents({"skill_name": "Leadership"}) == 1

    def test_duplicate(self, client):
        client.post("/api/soft-skills", json={"skillName": "Leadership"})
        response = client.post("/api/soft-skills", json={"skillName": "Leadership"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE"

    def test_score_out_of_range(self, client):
        response = client.post("/api/soft-skills", json={"skillName": "Leadership", "evidenceScore": 6})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
