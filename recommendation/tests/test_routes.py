import pytest
from fastapi.testclient import TestClient

from main import app
from recommendation.logic.config import EngineSettings
from recommendation.logic.engine import RecommendationEngine
from recommendation.routes import get_engine


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _test_rows():
    return [
        {"test_id": 1, "test_type": "interest",
         "result_details": {"answers": {"q1": 5, "q2": 2}, "categories": {"q1": "investigative", "q2": "artistic"}}},
        {"test_id": 2, "test_type": "aptitude",
         "result_details": {"answers": {"a1": 5}, "categories": {"a1": "logical"}}},
        {"test_id": 3, "test_type": "personality",
         "result_details": {"answers": {"p1": 4}, "categories": {"p1": "conscientiousness"}}},
    ]


CAREERS = [
    {"career_id": 1, "name": "Zhvillues Software", "average_salary": 900},
    {"career_id": 2, "name": "Dizajner Grafik"},
]

PROGRAMS = [
    {"program_id": 10, "name": "Shkenca Kompjuterike", "minimum_grade": 7.0},
    {"program_id": 12, "name": "Histori", "minimum_grade": 6.0, "university_type": "Private"},
]

GRADES = [
    {"subject_name": "Matematike", "grade": 9, "is_core_subject": True},
    {"subject_name": "Fizike", "grade": 8},
]


def test_health(client):
    response = client.get("/recommendations/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "engine": "recommendation", "version": "1.0.0"}


def test_root(client):
    assert client.get("/").json()["service"] == "career-guidance-engine"


# ------------------------------------------------------------------
# Careers
# ------------------------------------------------------------------

def test_careers_without_data_returns_fallback(client):
    response = client.post("/recommendations/careers", json={})
    body = response.json()

    assert response.status_code == 200
    assert body["is_fallback"] is True
    assert body["count"] == len(body["careers"]) >= 5
    assert body["completed_assessments"] == 0
    assert any("assessment" in w for w in body["warnings"])
    assert not any("grades" in w for w in body["warnings"])


def test_careers_with_data(client):
    response = client.post("/recommendations/careers", json={
        "user_id": "u-1", "test_results": _test_rows(), "careers": CAREERS,
    })
    body = response.json()

    assert response.status_code == 200
    assert body["is_fallback"] is False
    assert body["careers"][0]["title"] == "Zhvillues Software"
    assert body["careers"][0]["salary_range"] == "900 - 1350 EUR/month"
    assert body["warnings"] == []


@pytest.mark.parametrize("payload", [
    {"limit": 0},
    {"limit": "many"},
    {"test_results": "not a list"},
])
def test_invalid_career_request(client, payload):
    response = client.post("/recommendations/careers", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid request")


# ------------------------------------------------------------------
# Programs
# ------------------------------------------------------------------

def test_programs_grades_mode(client):
    response = client.post("/recommendations/programs", json={
        "grades": GRADES, "programs": PROGRAMS, "mode": "grades",
    })
    body = response.json()

    assert response.status_code == 200
    assert body["program_mode"] == "grades"
    assert [p["entity_id"] for p in body["programs"]] == [12, 10]
    assert body["programs"][0]["tuition_fee"] == 2000.0
    assert body["programs"][0]["eligibility_status"] == "eligible"
    assert body["grade_summary"]["overall"] == 8.5
    assert body["is_fallback"] is False


def test_programs_mode_switch_is_reported(client):
    response = client.post("/recommendations/programs", json={
        "grades": GRADES, "programs": PROGRAMS, "mode": "tests",
    })
    body = response.json()

    assert body["program_mode"] == "grades"
    assert any("'grades' mode" in w for w in body["warnings"])
    assert not any("assessment(s) to unlock" in w for w in body["warnings"])


def test_programs_without_catalog_returns_fallback(client):
    body = client.post("/recommendations/programs", json={"grades": GRADES, "mode": "grades"}).json()
    assert body["is_fallback"] is True
    assert all(p["is_fallback"] for p in body["programs"])


def test_invalid_mode(client):
    response = client.post("/recommendations/programs", json={"mode": "magic"})
    assert response.status_code == 400


# ------------------------------------------------------------------
# Grades & combined
# ------------------------------------------------------------------

def test_grade_summary(client):
    response = client.post("/recommendations/grades/summary", json={
        "grades": GRADES + [{"grade": 7.5, "grade_type": "vkm"}, {"grade": 42}],
    })
    summary = response.json()["grade_summary"]

    assert response.status_code == 200
    assert summary["overall"] == 8.5
    assert summary["core_subjects"] == 9.0
    assert summary["exam_board"] == 7.5
    assert summary["total_grades"] == 3


def test_combined_recommendations(client):
    response = client.post("/recommendations", json={
        "user_id": "u-1",
        "test_results": _test_rows(),
        "grades": GRADES,
        "careers": CAREERS,
        "programs": PROGRAMS,
    })
    body = response.json()

    assert response.status_code == 200
    assert set(body) >= {"request_id", "careers", "programs", "grade_summary", "profile", "meta", "warnings"}
    assert body["user_id"] == "u-1"
    assert body["meta"]["program_mode"] == "both"
    assert body["careers"][0]["title"] == "Zhvillues Software"
    assert body["programs"]
    assert body["warnings"] == []


def test_engine_dependency_can_be_overridden(client):
    app.dependency_overrides[get_engine] = lambda: RecommendationEngine(
        EngineSettings(min_completed_assessments=1)
    )
    response = client.post("/recommendations/careers", json={
        "test_results": _test_rows()[:1], "careers": CAREERS,
    })
    body = response.json()

    assert body["is_fallback"] is False
    assert body["completed_assessments"] == 1
