"""
Tests for /api/modules: AI analyses, company research, soft skills
interviews and recruiter readiness.

Analyzer entry points are patched in the route module namespace.
"""

import uuid
from unittest.mock import MagicMock, patch

import pytest

from api_service.app import app
from api_service.routes.modules import get_company_research_service
from src.common.errors import (
    CompanyResearchError,
    ContextAnalysisError,
    ErrorCode,
    PreAnalysisError,
    SoftSkillsError,
    UniquenessAnalysisError,
)
from src.common.repositories import Collections
from tests.helpers.factories import make_company_research, make_job, make_resume, make_resume_content

MODULES = "api_service.routes.modules"


@pytest.fixture
def resume(repos, user):
    document = make_resume(user["_id"])
    repos[Collections.RESUMES].insert_one(document)
    return document


@pytest.fixture
def job(repos):
    document = make_job()
    repos[Collections.JOBS].insert_one(document)
    return document


@pytest.fixture
def pair(resume, job):
    return {"resumeId": resume["_id"], "jobId": job["_id"]}


@pytest.fixture
def research_service():
    service = MagicMock()
    app.dependency_overrides[get_company_research_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_company_research_service, None)


# ===== TESTS: Context / uniqueness / impact =====

class TestContextModule:
    """POST /api/modules/context"""

    def test_success(self, client, pair):
        with patch(f"{MODULES}.analyze_context", return_value={"score": 80}) as analyze:
            response = client.post("/api/modules/context", json=pair)

        assert response.json() == {"success": True, "data": {"score": 80}}
        content, job = analyze.call_args.args
        assert content["contact"]["name"] == "Jane Doe"
        assert job["companyName"] == "Stripe"

    def test_invalid_ids(self, client):
        response = client.post("/api/modules/context", json={"resumeId": "x", "jobId": "y"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "resumeId: Invalid resume ID, jobId: Invalid job ID"

    def test_resume_not_found(self, client, job):
        response = client.post("/api/modules/context", json={"resumeId": str(uuid.uuid4()), "jobId": job["_id"]})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RESUME_NOT_FOUND"

    def test_job_not_found(self, client, resume):
        response = client.post("/api/modules/context", json={"resumeId": resume["_id"], "jobId": str(uuid.uuid4())})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "JOB_NOT_FOUND"

    def test_job_without_details(self, client, repos, resume):
        bare = make_job(description=None, requirements=[], skills=[])
        repos[Collections.JOBS].insert_one(bare)
        response = client.post("/api/modules/context", json={"resumeId": resume["_id"], "jobId": bare["_id"]})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_JOB"

    def test_resume_without_contact(self, client, repos, user, job):
        empty = make_resume(user["_id"], content={})
        repos[Collections.RESUMES].insert_one(empty)
        response = client.post("/api/modules/context", json={"resumeId": empty["_id"], "jobId": job["_id"]})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_RESUME"

    @pytest.mark.parametrize(
        "code,status",
        [
            (ErrorCode.AI_NOT_CONFIGURED, 503),
            (ErrorCode.RATE_LIMIT, 429),
            (ErrorCode.AUTH_ERROR, 401),
            (ErrorCode.API_ERROR, 502),
            (ErrorCode.PARSE_ERROR, 500),
        ],
    )
    def test_analysis_errors(self, client, pair, code, status):
        with patch(f"{MODULES}.analyze_context", side_effect=ContextAnalysisError("failed", code)):
            response = client.post("/api/modules/context", json=pair)
        assert response.status_code == status
        assert response.json()["error"] == {"code": code, "message": "failed"}

    def test_unexpected_error(self, client, pair):
        with patch(f"{MODULES}.analyze_context", side_effect=RuntimeError("boom")):
            response = client.post("/api/modules/context", json=pair)
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "ANALYSIS_ERROR"


class TestUniquenessAndImpact:
    """POST /api/modules/uniqueness and /impact"""

    def test_uniqueness(self, client, resume):
        with patch(f"{MODULES}.analyze_uniqueness", return_value={"score": 70}):
            response = client.post("/api/modules/uniqueness", json={"resumeId": resume["_id"]})
        assert response.json()["data"] == {"score": 70}

    def test_uniqueness_insufficient_content(self, client, resume):
        error = UniquenessAnalysisError("Not enough content", ErrorCode.INSUFFICIENT_CONTENT)
        with patch(f"{MODULES}.analyze_uniqueness", side_effect=error):
            response = client.post("/api/modules/uniqueness", json={"resumeId": resume["_id"]})
        assert response.status_code == 400

    def test_impact(self, client, resume):
        with patch(f"{MODULES}.analyze_impact", return_value={"score": 55, "totalBullets": 3}):
            response = client.post("/api/modules/impact", json={"resumeId": resume["_id"]})
        assert response.json()["data"]["totalBullets"] == 3

    def test_impact_without_bullets(self, client, repos, user):
        document = make_resume(user["_id"], content=make_resume_content(experiences=[]))
        repos[Collections.RESUMES].insert_one(document)
        with patch(f"{MODULES}.analyze_impact") as analyze:
            response = client.post("/api/modules/impact", json={"resumeId": document["_id"]})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_RESUME"
        analyze.assert_not_called()


# ===== TESTS: Company research =====

class TestCompanyModule:
    """Company research routes."""

    def test_research(self, client, research_service):
        research_service.research.return_value = {"data": make_company_research(), "cached": True}

        body = client.post("/api/modules/company", json={"companyName": "  Stripe "}).json()

        assert body["success"] is True
        assert body["cached"] is True
        assert body["data"]["companyName"] == "Stripe"
        research_service.research.assert_called_once_with("Stripe")

    def test_research_error(self, client, research_service):
        research_service.research.side_effect = CompanyResearchError("limited", ErrorCode.RATE_LIMIT)
        response = client.post("/api/modules/company", json={"companyName": "Stripe"})
        assert response.status_code == 429

    def test_research_unexpected(self, client, research_service):
        research_service.research.side_effect = RuntimeError("boom")
        response = client.post("/api/modules/company", json={"companyName": "Stripe"})
        assert response.json()["error"]["code"] == "RESEARCH_ERROR"

    def test_process(self, client, research_service):
        research_service.process.return_value = make_company_research()
        request_id = str(uuid.uuid4())

        response = client.post("/api/modules/company/process", json={"requestId": request_id, "companyName": "Stripe"})

        assert response.json()["data"]["companyName"] == "Stripe"
        research_service.process.assert_called_once_with(request_id, "Stripe")

    def test_process_missing_fields(self, client, research_service):
        response = client.post("/api/modules/company/process", json={"companyName": "Stripe"})
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Missing requestId or companyName"

    def test_process_failure(self, client, research_service):
        research_service.process.side_effect = RuntimeError("provider down")
        response = client.post("/api/modules/company/process", json={"requestId": "r-1", "companyName": "Stripe"})
        assert response.status_code == 500
        assert response.json()["error"] == {"code": "RESEARCH_FAILED", "message": "Processing failed"}

    def test_status_flow(self, client, repos):
        request_id = str(uuid.uuid4())
        with patch("src.services.company_research_service.research_company", return_value=make_company_research()):
            client.post("/api/modules/company/process", json={"requestId": request_id, "companyName": "Stripe"})

        body = client.get(f"/api/modules/company/status/{request_id}").json()

        assert body["success"] is True
        assert body["status"] == "completed"
        assert body["data"]["industry"] == "Financial Technology"

    def test_status_failed(self, client, repos):
        request_id = str(uuid.uuid4())
        repos[Collections.COMPANIES].insert_one(
            {"_id": request_id, "name": "acme", "status": "failed", "error_message": "provider down"}
        )

        response = client.get(f"/api/modules/company/status/{request_id}")

        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "status": "failed",
            "error": {"code": "RESEARCH_FAILED", "message": "provider down"},
        }

    def test_status_pending(self, client, repos):
        request_id = str(uuid.uuid4())
        repos[Collections.COMPANIES].insert_one({"_id": request_id, "name": "acme", "status": "processing"})
        assert client.get(f"/api/modules/company/status/{request_id}").json() == {"success": True, "status": "processing"}

    def test_status_invalid_and_missing(self, client):
        assert client.get("/api/modules/company/status/not-a-uuid").json()["error"]["code"] == "INVALID_ID"
        assert client.get(f"/api/modules/company/status/{uuid.uuid4()}").status_code == 404


# ===== TESTS: Soft skills interview =====

class TestSoftSkillsInterview:
    """Start and chat."""

    def _start(self, client, skill="Leadership"):
        response = {
            "message": "Tell me about a time you led a team.",
            "isComplete": False,
            "questionNumber": 1,
            "evidenceScore": None,
            "statement": None,
        }
        with patch(f"{MODULES}.start_assessment", return_value=response):
            return client.post("/api/modules/soft-skills/start", json={"skillName": skill}).json()["data"]

    def test_start_creates_record(self, client, repos):
        data = self._start(client)

        assert data["questionNumber"] == 1
        stored = repos[Collections.SOFT_SKILLS].find_one({"_id": data["skillId"]})
        assert stored["skill_name"] == "Leadership"
        assert stored["conversation"] == [{"role": "assistant", "content": "Tell me about a time you led a team."}]

    def test_restart_resets_same_record(self, client, repos):
        first = self._start(client)
        repos[Collections.SOFT_SKILLS].update_one({"_id": first["skillId"]}, {"$set": {"evidence_score": 4}})

        second = self._start(client)

        assert second["skillId"] == first["skillId"]
        assert repos[Collections.SOFT_SKILLS].count_documents({}) == 1
        assert repos[Collections.SOFT_SKILLS].find_one({"_id": first["skillId"]})["evidence_score"] is None

    def test_start_ai_error(self, client):
        with patch(f"{MODULES}.start_assessment", side_effect=SoftSkillsError("nope", ErrorCode.AI_NOT_CONFIGURED)):
            response = client.post("/api/modules/soft-skills/start", json={"skillName": "Leadership"})
        assert response.status_code == 503

    def test_chat_appends_and_completes(self, client, repos):
        skill_id = self._start(client)["skillId"]
        final = {
            "message": "Thanks!",
            "isComplete": True,
            "questionNumber": 1,
            "evidenceScore": 4,
            "statement": "Led a team of four.",
        }

        with patch(f"{MODULES}.continue_assessment", return_value=final) as chat:
            response = client.post("/api/modules/soft-skills/chat", json={"skillId": skill_id, "message": "I led four people."})

        assert response.json()["data"]["skillId"] == skill_id
        skill_name, _, message, question_count = chat.call_args.args
        assert (skill_name, message, question_count) == ("Leadership", "I led four people.", 1)
        stored = repos[Collections.SOFT_SKILLS].find_one({"_id": skill_id})
        assert [turn["role"] for turn in stored["conversation"]] == ["assistant", "user", "assistant"]
        assert stored["evidence_score"] == 4
        assert stored["statement"] == "Led a team of four."

    def test_chat_completed_assessment(self, client, repos):
        skill_id = self._start(client)["skillId"]
        repos[Collections.SOFT_SKILLS].update_one({"_id": skill_id}, {"$set": {"evidence_score": 3}})

        response = client.post("/api/modules/soft-skills/chat", json={"skillId": skill_id, "message": "More"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ALREADY_COMPLETE"

    def test_chat_unknown_skill(self, client):
        response = client.post("/api/modules/soft-skills/chat", json={"skillId": str(uuid.uuid4()), "message": "Hi"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SKILL_NOT_FOUND"


# ===== TESTS: Recruiter readiness =====

class TestRecruiterReadiness:
    """POST /api/modules/recruiter-readiness"""

    def test_score(self, client, pair):
        pre_analysis = {
            "impact": {"score": 70},
            "uniqueness": {"score": 80, "differentiators": []},
            "context": {"score": 60, "keywordCoverage": {"percentage": 40}},
            "company": {"isWellKnown": True},
            "softSkills": [],
            "resumeId": pair["resumeId"],
            "jobId": pair["jobId"],
        }
        with patch(f"{MODULES}.run_pre_analysis", return_value=pre_analysis) as run:
            data = client.post("/api/modules/recruiter-readiness", json=pair).json()["data"]

        assert run.call_args.args[2:] == (pair["resumeId"], pair["jobId"])
        assert 0 <= data["score"]["composite"] <= 100
        assert data["summary"].startswith(f"Your resume scores {data['score']['composite']}/100")
        assert data["overview"]["issueScores"]["impact"] == 70
        assert data["preAnalysis"]["jobId"] == pair["jobId"]

    def test_all_analyses_failed(self, client, pair):
        error = PreAnalysisError("All analyses failed", ErrorCode.ALL_ANALYSES_FAILED)
        with patch(f"{MODULES}.run_pre_analysis", side_effect=error):
            response = client.post("/api/modules/recruiter-readiness", json=pair)
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "ALL_ANALYSES_FAILED"


# ===== TESTS: Feature flags =====

class TestFeatureFlags:
    """Disabled AI features answer 503 before any analysis runs."""

    def test_context_disabled(self, client, monkeypatch, pair):
        monkeypatch.setenv("ENABLE_AI_JOB_MATCH", "false")
        with patch(f"{MODULES}.analyze_context") as analyze:
            response = client.post("/api/modules/context", json=pair)

        assert response.status_code == 503
        assert response.json()["error"] == {
            "code": "FEATURE_DISABLED",
            "message": "This AI feature is disabled",
        }
        analyze.assert_not_called()

    def test_impact_disabled(self, client, monkeypatch, resume):
        monkeypatch.setenv("ENABLE_AI_BULLET_OPTIMIZATION", "false")
        with patch(f"{MODULES}.analyze_impact") as analyze:
            response = client.post("/api/modules/impact", json={"resumeId": resume["_id"]})

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "FEATURE_DISABLED"
        analyze.assert_not_called()

    def test_other_flags_leave_route_open(self, client, monkeypatch, resume):
        monkeypatch.setenv("ENABLE_AI_JOB_MATCH", "false")
        with patch(f"{MODULES}.analyze_impact", return_value={"score": 55}):
            response = client.post("/api/modules/impact", json={"resumeId": resume["_id"]})
        assert response.status_code == 200

    def test_recruiter_readiness_disabled(self, client, monkeypatch, pair):
        monkeypatch.setenv("ENABLE_AI_JOB_MATCH", "false")
        with patch(f"{MODULES}.run_pre_analysis") as run:
            response = client.post("/api/modules/recruiter-readiness", json=pair)
        assert response.status_code == 503
        run.assert_not_called()
