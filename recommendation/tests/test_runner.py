import pytest

from recommendation.logic.config import EngineSettings
from recommendation.logic.runner import InMemoryRecordSource, run_recommendations


def _interest_row(test_id, answers, categories):
    return {
        "TEST_RESULT_ID": test_id,
        "TEST_TYPE": "Interest",
        "RESULT_DETAILS": {"answers": answers, "categories": categories},
    }


@pytest.fixture
def source():
    tests = [
        _interest_row(1, {"q1": 5, "q2": 1}, {"q1": "investigative", "q2": "artistic"}),
        {"TEST_RESULT_ID": 2, "TEST_TYPE": "Aptitude",
         "RESULT_DETAILS": {"answers": {"a1": 5}, "categories": {"a1": "logical"}}},
        {"TEST_RESULT_ID": 3, "TEST_TYPE": "Personality",
         "RESULT_DETAILS": {"answers": {"p1": "agree"}, "categories": {"p1": "conscientiousness"}}},
    ]
    grades = [
        {"SUBJECT_NAME": "Matematike", "GRADE": 9, "IS_MATURA_SUBJECT": 1},
        {"SUBJECT_NAME": "Fizike", "GRADE": "8,0"},
        {"SUBJECT_NAME": "Histori", "GRADE": 15},              # out of range, skipped
    ]
    careers = [
        {"CAREER_ID": 1, "NAME": "Zhvillues Software", "AVERAGE_SALARY": 900},
        {"CAREER_ID": 2, "NAME": "Dizajner Grafik"},
    ]
    programs = [
        {"PROGRAM_ID": 10, "PROGRAM_NAME": "Shkenca Kompjuterike", "MIN_GRADE": 7.0},
        {"PROGRAM_ID": 11, "PROGRAM_NAME": "Histori", "MIN_GRADE": 6.0},
    ]
    return InMemoryRecordSource(
        test_results={"user-1": tests},
        grades={"user-1": grades},
        careers=careers,
        programs=programs,
    )


class FailingSource(InMemoryRecordSource):
    def fetch_careers(self):
        raise ConnectionError("catalog database unreachable")

    def fetch_programs(self):
        raise ConnectionError("catalog database unreachable")

    def fetch_grades(self, user_id):
        raise TimeoutError("grades query timed out")


def test_full_pipeline(source, settings):
    output = run_recommendations(source, "user-1", settings=settings)

    assert output.user_id == "user-1"
    assert output.meta.completed_assessments == 3
    assert output.meta.grade_count == 2
    assert output.careers[0].title == "Zhvillues Software"
    assert not output.meta.careers_from_fallback
    assert [p.entity_id for p in output.programs][0] in (10, 11)
    assert output.grade_summary.overall == 8.5
    assert output.warnings == []


def test_unknown_user_gets_fallback_careers(source, settings):
    output = run_recommendations(source, "someone-else", settings=settings)

    assert output.meta.careers_from_fallback
    assert all(c.is_fallback for c in output.careers)
    assert output.programs == []
    assert any("Add your grades" in w for w in output.warnings)


def test_failing_source_degrades(settings, caplog):
    output = run_recommendations(FailingSource(), "user-1", settings=settings)

    assert output.meta.careers_from_fallback
    assert output.meta.programs_from_fallback
    assert all(c.is_fallback for c in output.careers)
    assert all(p.is_fallback for p in output.programs)
    assert "Failed to fetch careers" in caplog.text
    assert "Failed to fetch grades" in caplog.text


def test_careers_only(source, settings):
    output = run_recommendations(source, "user-1", kind="careers", settings=settings)
    assert output.careers
    assert output.programs == []


def test_programs_only_in_grades_mode(source, settings):
    output = run_recommendations(source, "user-1", kind="programs", mode="grades", settings=settings)

    assert output.careers == []
    # Computer Science (7.0): 70 + 1.5 * 15 = 92.5; History (6.0) caps at 100
    assert [(p.entity_id, p.match_score) for p in output.programs] == [(11, 100), (10, 93)]
    assert output.meta.program_mode == "grades"


def test_settings_are_honored(source):
    settings = EngineSettings(min_completed_assessments=5)
    output = run_recommendations(source, "user-1", settings=settings)

    assert output.meta.careers_from_fallback
    assert output.meta.program_mode == "grades"
    assert any("Complete 2 more assessment(s)" in w for w in output.warnings)


def test_invalid_kind(source):
    with pytest.raises(ValueError):
        run_recommendations(source, "user-1", kind="everything")
