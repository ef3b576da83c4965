import logging

import pytest

from recommendation.logic.config import EngineSettings
from recommendation.logic.contracts import CareerSource, GradeSummary
from recommendation.logic.engine import (
    RecommendationEngine,
    match_careers,
    match_programs,
    summarize_grades,
    get_recommendations,
)


@pytest.fixture
def strong_grades(grade):
    return [
        grade(8.5, subject="Matematike", core=True),
        grade(8.5, subject="Fizike", core=True),
        grade(8.5, subject="Biologji"),
    ]


# ------------------------------------------------------------------
# Careers
# ------------------------------------------------------------------

def test_analytical_profile_ranks_software_first(engine, tech_results, career_catalog):
    results = engine.match_careers(tech_results, career_catalog)

    assert results[0].title == "Zhvillues Software"
    assert results[0].match_score == 88
    assert results[0].match_reason == "Matches your strong interest in analysis and research"
    assert results[0].salary_range == "900 - 1350 EUR/month"
    assert results[0].skills == ["Programim", "Analize"]

    scores = [r.match_score for r in results]
    assert scores == sorted(scores, reverse=True)
    assert all(not r.is_fallback and r.source == "catalog" for r in results)
    assert all(r.eligibility_status is None for r in results)


def test_no_assessments_returns_fallback(engine, career_catalog):
    results = engine.match_careers([], career_catalog)

    assert len(results) >= 5
    assert all(r.is_fallback for r in results)
    assert all(70 <= r.match_score <= 90 for r in results)


def test_too_few_assessments_returns_fallback(engine, tech_results, career_catalog):
    results = engine.match_careers(tech_results[:2], career_catalog)
    assert all(r.is_fallback for r in results)


@pytest.mark.parametrize("catalog", [None, []])
def test_missing_career_catalog_returns_fallback(engine, tech_results, catalog):
    results = engine.match_careers(tech_results, catalog)
    assert results
    assert all(r.is_fallback for r in results)


def test_career_limit_is_clamped(engine, tech_results):
    catalog = [CareerSource(career_id=i, name=f"Software Developer {i}") for i in range(15)]

    assert len(engine.match_careers(tech_results, catalog, limit=3)) == 8
    assert len(engine.match_careers(tech_results, catalog)) == 10
    assert len(engine.match_careers(tech_results, catalog, limit=30)) == 12


def test_matching_is_deterministic(engine, tech_results, career_catalog):
    first = engine.match_careers(tech_results, career_catalog)
    second = engine.match_careers(tech_results, career_catalog)
    assert first == second


def test_lower_assessment_requirement(answer_set, career_catalog):
    engine = RecommendationEngine(EngineSettings(min_completed_assessments=1))
    interest = answer_set(
        "interest-1", "interest",
        answers={"q1": 5, "q2": 1},
        categories={"q1": "investigative", "q2": "artistic"},
    )

    results = engine.match_careers([interest], career_catalog)
    assert not results[0].is_fallback
    assert results[0].title == "Zhvillues Software"


# ------------------------------------------------------------------
# Programs
# ------------------------------------------------------------------

def test_grades_mode_ranks_by_eligibility(engine, strong_grades, program_catalog):
    results = engine.match_programs(strong_grades, [], program_catalog, mode="grades")

    # History (6.0) caps at 100, Computer Science (7.0) 92.5, Medicine (8.0) 77.5
    assert [r.entity_id for r in results] == [12, 10, 11]
    assert [r.match_score for r in results] == [100, 93, 78]
    assert all(r.eligibility_status == "eligible" for r in results)

    medicine = results[2]
    assert medicine.minimum_grade == 8.0
    assert medicine.missing_subjects == ["kimia"]
    assert medicine.user_average == 8.5


def test_tests_based_mode_switches_to_grades(engine, tech_results, strong_grades, program_catalog):
    results = engine.match_programs(strong_grades, tech_results[:1], program_catalog, mode="both")
    assert [r.entity_id for r in results] == [12, 10, 11]
    assert all("requirement" in r.match_reason for r in results)
    assert all(r.test_average is None for r in results)


def test_resolve_program_mode(engine):
    assert engine.resolve_program_mode("both", 2) == "grades"
    assert engine.resolve_program_mode("tests", 0) == "grades"
    assert engine.resolve_program_mode("both", 3) == "both"
    assert engine.resolve_program_mode("grades", 0) == "grades"
    assert engine.resolve_program_mode("magic", 3) == "grades"


def test_unknown_mode_matches_on_grades(engine, tech_results, strong_grades, program_catalog, caplog):
    with caplog.at_level(logging.WARNING):
        results = engine.match_programs(strong_grades, tech_results, program_catalog, mode="magic")

    expected = engine.match_programs(strong_grades, tech_results, program_catalog, mode="grades")
    assert [r.entity_id for r in results] == [r.entity_id for r in expected]
    assert all(r.test_average is None for r in results)
    assert "Unknown program mode 'magic'" in caplog.text


def test_recommend_with_unknown_mode(engine, tech_results, strong_grades, career_catalog, program_catalog):
    output = engine.recommend(tech_results, strong_grades, career_catalog, program_catalog, mode="magic")

    assert output.meta.program_mode == "grades"
    assert len(output.programs) > 0


def test_tests_mode_without_grades(engine, tech_results, program_catalog):
    results = engine.match_programs([], tech_results, program_catalog, mode="tests")

    ids = [r.entity_id for r in results]
    assert 10 in ids
    computer_science = results[ids.index(10)]
    assert computer_science.eligibility_status is None
    assert computer_science.score_breakdown["field_bonus"] == 10.0


def test_no_grades_returns_empty_programs(engine, tech_results, program_catalog):
    assert engine.match_programs([], tech_results, program_catalog, mode="both") == []
    assert engine.match_programs([], [], program_catalog, mode="grades") == []


@pytest.mark.parametrize("catalog", [None, []])
def test_missing_program_catalog_returns_fallback(engine, strong_grades, catalog):
    results = engine.match_programs(strong_grades, [], catalog, mode="grades")
    assert len(results) >= 5
    assert all(r.is_fallback and r.kind == "program" for r in results)


def test_program_limit(engine, strong_grades, program_catalog):
    results = engine.match_programs(strong_grades, [], program_catalog, mode="grades", limit=1)
    assert [r.entity_id for r in results] == [12]


# ------------------------------------------------------------------
# Grades
# ------------------------------------------------------------------

def test_summarize_grades(engine, grade):
    summary = engine.summarize_grades([grade(8), grade(9, core=True), grade(7.5, grade_type="exam_board")])
    assert summary.overall == 8.5
    assert summary.core_subjects == 9.0
    assert summary.exam_board == 7.5
    assert summary.total_grades == 3


def test_summarize_no_grades(engine):
    assert engine.summarize_grades([]) == GradeSummary()


# ------------------------------------------------------------------
# Combined
# ------------------------------------------------------------------

def test_recommend_with_complete_data(engine, tech_results, strong_grades, career_catalog, program_catalog):
    output = engine.recommend(tech_results, strong_grades, career_catalog, program_catalog,
                              mode="both", user_id="user-1")

    assert output.request_id
    assert output.user_id == "user-1"
    assert output.careers[0].title == "Zhvillues Software"
    assert output.programs
    assert output.warnings == []
    assert output.profile.completed_assessments == 3

    meta = output.meta
    assert meta.completed_assessments == 3
    assert meta.grade_count == 3
    assert meta.can_get_career_recommendations
    assert meta.can_get_program_recommendations
    assert meta.program_mode == "both"
    assert not meta.careers_from_fallback
    assert not meta.programs_from_fallback
    assert meta.processing_time_ms >= 0
    assert meta.engine_version == "1.0.0"


def test_recommend_reports_missing_data(engine, tech_results, career_catalog, program_catalog):
    output = engine.recommend(tech_results[:1], [], career_catalog, program_catalog, mode="both")

    assert output.meta.program_mode == "grades"
    assert output.meta.careers_from_fallback
    assert output.programs == []
    assert any("Complete 2 more assessment(s)" in w for w in output.warnings)
    assert any("Add your grades" in w for w in output.warnings)
    assert any("'grades' mode" in w for w in output.warnings)


def test_recommend_careers_only(engine, career_catalog):
    output = engine.recommend([], [], career_catalog, None, include_programs=False)

    assert output.programs == []
    assert not output.meta.programs_from_fallback
    assert not any("grades" in w for w in output.warnings)


def test_recommend_is_deterministic(engine, tech_results, strong_grades, career_catalog, program_catalog):
    first = engine.recommend(tech_results, strong_grades, career_catalog, program_catalog)
    second = engine.recommend(tech_results, strong_grades, career_catalog, program_catalog)

    assert first.careers == second.careers
    assert first.programs == second.programs
    assert first.request_id != second.request_id


# ------------------------------------------------------------------
# Convenience functions
# ------------------------------------------------------------------

def test_convenience_functions(tech_results, strong_grades, career_catalog, program_catalog):
    assert match_careers(tech_results, career_catalog)[0].title == "Zhvillues Software"
    assert [r.entity_id for r in match_programs(strong_grades, [], program_catalog, mode="grades")] == [12, 10, 11]
    assert summarize_grades(strong_grades).overall == 8.5

    output = get_recommendations(tech_results, strong_grades, career_catalog, program_catalog)
    assert output.careers and output.programs
