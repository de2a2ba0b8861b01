"""
Tests for the HTTP API using Flask's test client.
"""

import logging
import threading

import pytest

from hireprep import create_app
from hireprep.database import Database
from hireprep.storage import SQLiteStorage


def _create(client, **fields):
    body = {"company": "Acme", "role": "Engineer", **fields}
    response = client.post("/api/applications", json=body)
    assert response.status_code == 201
    return response.get_json()


# ===== APPLICATIONS =====


def test_create_application(client):
    """Test POST returns 201 with defaults applied."""
    data = _create(client, jobUrl="https://acme.example/jobs/1")

    assert data["id"]
    assert data["status"] == "applied"
    assert data["tag"] == "target"
    assert data["jobUrl"] == "https://acme.example/jobs/1"
    assert data["notes"] == ""
    assert data["interviewNotes"] == []
    assert data["createdAt"] == data["updatedAt"]


@pytest.mark.parametrize(
    "body",
    [
        {"company": "Acme"},
        {"company": "Acme", "role": "Engineer", "status": "hired"},
        ["not", "an", "object"],
    ],
)
def test_create_application_validation(client, body):
    response = client.post("/api/applications", json=body)

    assert response.status_code == 400
    assert "message" in response.get_json()


def test_create_application_rejects_non_json(client):
    """Test that a non-JSON body is a validation failure."""
    response = client.post("/api/applications", data="company=Acme", content_type="text/plain")

    assert response.status_code == 400


def test_list_applications_pagination(client):
    """Test page/limit translate to offset and totalPages."""
    for i in range(5):
        _create(client, company=f"Company {i}")

    response = client.get("/api/applications?page=2&limit=2")
    data = response.get_json()

    assert response.status_code == 200
    assert data["total"] == 5
    assert data["page"] == 2
    assert data["totalPages"] == 3
    assert [a["company"] for a in data["applications"]] == ["Company 2", "Company 1"]


def test_list_applications_filters(client):
    _create(client, company="Acme Corp", status="interview")
    _create(client, company="Globex", status="interview", tag="dream")
    _create(client, company="Initech")

    by_search = client.get("/api/applications?search=acme").get_json()
    by_status = client.get("/api/applications?status=interview&tag=All").get_json()

    assert [a["company"] for a in by_search["applications"]] == ["Acme Corp"]
    assert by_status["total"] == 2


def test_list_applications_empty(client):
    data = client.get("/api/applications").get_json()

    assert data == {"applications": [], "total": 0, "page": 1, "totalPages": 0}


def test_list_applications_huge_page_on_sqlite(memory_config, coach, tmp_path):
    """Test that a page number past 64-bit range is an empty page, not a 500."""
    storage = SQLiteStorage(Database(str(tmp_path / "hireprep.db")))
    client = create_app(memory_config, storage=storage, coach=coach).test_client()
    _create(client)

    response = client.get("/api/applications?page=99999999999999999999")
    data = response.get_json()

    assert response.status_code == 200
    assert data["applications"] == []
    assert data["total"] == 1
    storage.close()


@pytest.mark.parametrize(
    "query", ["page=0", "limit=0", "limit=abc", "status=pending", "tag=reach"]
)
def test_list_applications_bad_params(client, query):
    response = client.get(f"/api/applications?{query}")

    assert response.status_code == 400


def test_get_application_includes_sessions(client):
    """Test that the detail view merges in practice sessions."""
    created = _create(client)
    client.post(
        "/api/sessions",
        json={"applicationId": created["id"], "questions": [{"question": "Why Acme?"}]},
    )

    data = client.get(f"/api/applications/{created['id']}").get_json()

    assert data["company"] == "Acme"
    assert len(data["sessions"]) == 1
    assert data["sessions"][0]["questions"] == [{"question": "Why Acme?"}]
    assert data["interviewNotes"][0]["questionCount"] == 1


def test_get_missing_application(client):
    response = client.get("/api/applications/missing")

    assert response.status_code == 404
    assert response.get_json() == {"message": "Application not found"}


def test_patch_application(client):
    created = _create(client)

    response = client.patch(
        f"/api/applications/{created['id']}", json={"status": "interview", "id": "other"}
    )
    data = response.get_json()

    assert response.status_code == 200
    assert data["id"] == created["id"]
    assert data["status"] == "interview"
    assert data["company"] == "Acme"


def test_patch_application_errors(client):
    """Test 400 on invalid fields and 404 on unknown ids."""
    created = _create(client)

    assert client.patch(f"/api/applications/{created['id']}", json={"tag": "x"}).status_code == 400
    assert client.patch("/api/applications/missing", json={"status": "offer"}).status_code == 404


def test_delete_application(client):
    created = _create(client)
    client.post("/api/sessions", json={"applicationId": created["id"], "questions": []})

    response = client.delete(f"/api/applications/{created['id']}")

    assert response.status_code == 204
    assert client.get(f"/api/applications/{created['id']}").status_code == 404
    assert client.get(f"/api/sessions/{created['id']}").get_json() == []
    assert client.delete(f"/api/applications/{created['id']}").status_code == 404


def test_stats(client):
    for status in ["applied", "applied", "interview", "offer"]:
        _create(client, status=status)

    data = client.get("/api/stats").get_json()

    assert data == {"total": 4, "interviews": 1, "offers": 1, "responseRate": 100}


# ===== AI + SESSIONS =====


def test_ai_questions(client, mock_provider):
    response = client.post("/api/ai/questions", json={"role": "Engineer", "company": "Acme"})

    assert response.status_code == 200
    assert response.get_json() == {"questions": mock_provider.generate_questions.return_value}
    mock_provider.generate_questions.assert_called_once_with("Engineer", "Acme")


def test_ai_questions_requires_role(client):
    response = client.post("/api/ai/questions", json={"company": "Acme"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Role is required"


def test_ai_feedback(client):
    response = client.post(
        "/api/ai/feedback", json={"question": "Why us?", "answer": "Mission.", "role": "Engineer"}
    )

    assert response.status_code == 200
    assert response.get_json()["clarity"] == 4


def test_ai_feedback_falls_back_on_provider_failure(client, mock_provider):
    """Test that an AI outage still returns 200 with usable feedback."""
    mock_provider.evaluate_answer.side_effect = TimeoutError("deadline exceeded")

    response = client.post("/api/ai/feedback", json={"question": "Why us?", "answer": "Mission."})
    data = response.get_json()

    assert response.status_code == 200
    assert 1 <= data["clarity"] <= 5
    assert 1 <= data["relevance"] <= 5
    assert data["suggestions"]


def test_ai_feedback_requires_question_and_answer(client):
    response = client.post("/api/ai/feedback", json={"question": "Why us?"})

    assert response.status_code == 400


def test_sessions_create_and_list(client):
    response = client.post(
        "/api/sessions", json={"applicationId": "unknown-app", "questions": ["Why?"]}
    )
    session = response.get_json()

    assert response.status_code == 201
    assert session["applicationId"] == "unknown-app"
    assert client.get("/api/sessions/unknown-app").get_json() == [session]


def test_sessions_validation(client):
    assert client.post("/api/sessions", json={"questions": []}).status_code == 400
    assert (
        client.post("/api/sessions", json={"applicationId": "a", "questions": "x"}).status_code
        == 400
    )


# ===== HEALTH, ERRORS, FRONTEND =====


def test_health(client):
    response = client.get("/api/health")
    data = response.get_json()

    assert response.status_code == 200
    assert data["status"] == "ok"
    assert data["storage"]["backend"] == "memory"
    assert data["ai"] == {"provider": "gemini", "configured": False}


def test_unconfigured_database_returns_503(memory_config, coach):
    """Test that a missing database is reported explicitly, not as a 500."""
    app = create_app(memory_config, storage=SQLiteStorage(Database(None)), coach=coach)
    client = app.test_client()

    listing = client.get("/api/applications")
    stats = client.get("/api/stats")
    health = client.get("/api/health")

    assert listing.status_code == 503
    assert "Database not configured" in listing.get_json()["message"]
    assert stats.status_code == 503
    assert health.status_code == 503
    assert health.get_json()["status"] == "degraded"


def test_validation_before_storage_error(memory_config, coach):
    """Test that bad input is a 400 even when the store is down."""
    app = create_app(memory_config, storage=SQLiteStorage(Database(None)), coach=coach)

    response = app.test_client().get("/api/applications?limit=0")

    assert response.status_code == 400


def test_unexpected_error_returns_500(app, client):
    """Test that unhandled exceptions become a generic JSON 500."""
    storage = app.extensions["hireprep"]["storage"]
    storage.get_stats = lambda: 1 / 0

    response = client.get("/api/stats")

    assert response.status_code == 500
    assert response.get_json() == {"message": "Internal server error"}


def test_unknown_api_route_is_json_404(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert "message" in response.get_json()


def test_method_not_allowed_is_json(client):
    response = client.put("/api/stats")

    assert response.status_code == 405
    assert "message" in response.get_json()


def test_frontend_served_from_dist(app, client, tmp_path):
    """Test index.html and static files, with SPA fallback."""
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "index.html").write_text("<html>HirePrep</html>")
    (dist / "app.js").write_text("console.log('hi')")

    assert b"HirePrep" in client.get("/").data
    assert b"console.log" in client.get("/app.js").data
    assert b"HirePrep" in client.get("/applications/123").data


def test_frontend_not_built(client):
    response = client.get("/")

    assert response.status_code == 404


def test_cors_headers(client):
    response = client.get("/api/stats", headers={"Origin": "http://localhost:5173"})

    assert response.headers.get("Access-Control-Allow-Origin") in ("*", "http://localhost:5173")


def test_overlapping_requests_log_their_own_fields(app, caplog):
    """Test that concurrent requests keep request fields on their own log records."""
    caplog.set_level(logging.INFO, logger="hireprep")
    factory = logging.getLogRecordFactory()
    storage = app.extensions["hireprep"]["storage"]
    barrier = threading.Barrier(2)
    list_applications, get_stats = storage.list_applications, storage.get_stats

    def wait_then(func):
        def wrapper(*args, **kwargs):
            barrier.wait(timeout=5)
            return func(*args, **kwargs)

        return wrapper

    storage.list_applications = wait_then(list_applications)
    storage.get_stats = wait_then(get_stats)
    statuses = {}

    def fetch(path):
        statuses[path] = app.test_client().get(path).status_code

    threads = [threading.Thread(target=fetch, args=(p,)) for p in ("/api/applications", "/api/stats")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert statuses == {"/api/applications": 200, "/api/stats": 200}
    request_records = [r for r in caplog.records if hasattr(r, "extra_data")]
    assert sorted(r.extra_data["path"] for r in request_records) == ["/api/applications", "/api/stats"]
    for record in request_records:
        assert record.getMessage().startswith(f"GET {record.extra_data['path']} 200")

    assert logging.getLogRecordFactory() is factory
    fresh = factory("hireprep", logging.INFO, __file__, 1, "after", None, None)
    assert not hasattr(fresh, "extra_data")
