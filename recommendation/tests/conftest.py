import pytest

from recommendation.logic.config import EngineSettings
from recommendation.logic.contracts import TestAnswerSet, GradeRecord, CareerSource, ProgramSource
from recommendation.logic.engine import RecommendationEngine


@pytest.fixture
def answer_set():
    """
    Fixture that returns a function building a TestAnswerSet.
    answers/categories are keyed by question id.
    """
    def _make(test_id, test_category="generic", answers=None, categories=None, weights=None, score=None):
        return TestAnswerSet(
            test_id=test_id,
            test_name=f"Test {test_id}",
            test_category=test_category,
            answers=answers or {},
            categories=categories or {},
            weights=weights or {},
            score=score,
        )
    return _make


@pytest.fixture
def grade():
    """Fixture that returns a function building a GradeRecord."""
    def _make(value, grade_type="subject", subject="", core=False, year=None):
        return GradeRecord(
            subject_name=subject,
            grade=value,
            grade_type=grade_type,
            is_core_subject=core,
            year_taken=year,
        )
    return _make


@pytest.fixture
def tech_results(answer_set):
    """
    Three completed assessments of an analytically minded person:
    interests realistic 80 / investigative 100 / others 40,
    aptitudes verbal 60 / numerical 80 / logical 100,
    personality openness 80 / conscientiousness 100.
    """
    interest = answer_set(
        "interest-1", "interest",
        answers={"q1": 4, "q2": 5, "q3": 2, "q4": 2, "q5": 2, "q6": 2},
        categories={
            "q1": "realistic", "q2": "investigative", "q3": "artistic",
            "q4": "social", "q5": "enterprising", "q6": "conventional",
        },
    )
    aptitude = answer_set(
        "aptitude-1", "aptitude",
        answers={"a1": 3, "a2": 4, "a3": 5},
        categories={"a1": "verbal", "a2": "numerical", "a3": "logical"},
    )
    personality = answer_set(
        "personality-1", "personality",
        answers={"p1": "agree", "p2": "strongly agree"},
        categories={"p1": "openness", "p2": "conscientiousness"},
    )
    return [interest, aptitude, personality]


@pytest.fixture
def scored_results(answer_set):
    """Three assessments carrying only a pre-computed score of 75."""
    return [answer_set(f"scored-{i}", score=75) for i in range(3)]


@pytest.fixture
def career_catalog():
    return [
        CareerSource(career_id=1, name="Zhvillues Software", category="Teknologji", average_salary=900,
                     skills=["Programim", "Analize"]),
        CareerSource(career_id=2, name="Dizajner Grafik", category="Arte", average_salary=600),
        CareerSource(career_id=3, name="Mësues Fillor", category="Arsim", average_salary=500),
        CareerSource(career_id=4, name="Infermier", category="Shendetesi", average_salary=550),
        CareerSource(career_id=5, name="Astronaut", category="Tjeter"),
    ]


@pytest.fixture
def program_catalog():
    return [
        ProgramSource(program_id=10, name="Shkenca Kompjuterike", university_name="Universiteti i Tiranes",
                      faculty="Fakulteti i Shkencave te Natyres", minimum_grade=7.0),
        ProgramSource(program_id=11, name="Mjekësi e Përgjithshme", university_name="Universiteti i Mjekesise",
                      faculty="Fakulteti i Mjekesise"),
        ProgramSource(program_id=12, name="Histori", university_name="Universiteti i Tiranes",
                      faculty="Fakulteti i Historise", minimum_grade=6.0, university_type="private"),
    ]


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def engine(settings):
    return RecommendationEngine(settings)
