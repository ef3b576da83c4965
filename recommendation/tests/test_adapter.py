import json
import logging
from datetime import datetime

import pytest

from recommendation.logic.adapter import (
    normalize_test_category,
    normalize_grade_type,
    normalize_category_score,
    transform_test_result,
    transform_test_results,
    transform_grade,
    transform_grades,
    transform_career,
    transform_careers,
    transform_program,
)
from recommendation.logic.errors import MalformedRecordError
from recommendation.logic.profile_extractor import extract_profile


@pytest.mark.parametrize("raw, expected", [
    ("Personality (Big Five)", "personality"),
    ("Testi i Personalitetit", "personality"),
    ("Interest - RIASEC", "interest"),
    ("Holland Code", "interest"),
    ("Skills", "aptitude"),
    ("Aftesi Numerike", "aptitude"),
    ("Career Values", "generic"),
    (None, "generic"),
])
def test_normalize_test_category(raw, expected):
    assert normalize_test_category(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("Matura", "exit_exam"),
    ("exit-exam", "exit_exam"),
    ("VKM", "exam_board"),
    ("exam-board", "exam_board"),
    ("average", "average"),
    ("", "subject"),
])
def test_normalize_grade_type(raw, expected):
    assert normalize_grade_type(raw) == expected


def test_unknown_grade_type_is_malformed():
    with pytest.raises(MalformedRecordError):
        normalize_grade_type("semester")


# ------------------------------------------------------------------
# Assessment results
# ------------------------------------------------------------------

def test_uppercase_row_with_structured_details():
    row = {
        "TEST_RESULT_ID": 42,
        "TEST_NAME": "RIASEC",
        "TEST_TYPE": "Interest (RIASEC)",
        "RESULT_DETAILS": json.dumps({
            "answers": {"q1": "agree", "q2": 5},
            "categories": {"q1": "social", "q2": "investigative"},
            "weights": {"q2": 2},
        }),
        "SCORE": "72,5",
        "CREATED_AT": "2024-05-01 10:30:00",
    }
    result = transform_test_result(row)

    assert result.test_id == 42
    assert result.test_category == "interest"
    assert result.answers == {"q1": "agree", "q2": 5}
    assert result.categories == {"q1": "social", "q2": "investigative"}
    assert result.weights == {"q2": 2.0}
    assert result.score == 72.5
    assert result.completed_at == datetime(2024, 5, 1, 10, 30)


def test_flat_answer_map():
    row = {"test_id": "t-1", "test_type": "personality", "result_details": {"p1": 4, "p2": "disagree"},
           "categories": '{"p1": "openness", "p2": "neuroticism"}'}
    result = transform_test_result(row)

    assert result.answers == {"p1": 4, "p2": "disagree"}
    assert result.categories == {"p1": "openness", "p2": "neuroticism"}


@pytest.mark.parametrize("row", [
    {"result_details": {"q1": 3}},                       # no id
    {"test_id": 1, "result_details": "{not json"},
    {"test_id": 1, "result_details": "[1, 2]"},
    {"test_id": 1, "result_details": {"answers": {"q1": 5}, "weights": [1, 2]}},
    {"test_id": 1, "result_details": {"answers": {"q1": 5}, "categories": ["social"]}},
    {"test_id": 1, "result_details": {"answers": {"q1": 5}, "scores": [40, 60]}},
    {"test_id": 1, "result_details": {"q1": 5}, "weights": "[1, 2]"},
])
def test_malformed_results_raise(row):
    with pytest.raises(MalformedRecordError):
        transform_test_result(row)


def test_list_valued_weights_are_skipped_in_batch():
    rows = [
        {"test_id": 1, "result_details": {"answers": {"q1": 5}, "weights": [1, 2]}},
        {"test_id": 2, "result_details": {"answers": {"q1": 5}}},
    ]
    assert [r.test_id for r in transform_test_results(rows)] == [2]


# ------------------------------------------------------------------
# Stored results: {answers, scores} details and an aggregate SCORE
# ------------------------------------------------------------------

def _stored_row(result_id, test_type, score, scores, **extra):
    details = {"answers": {"1": 4, "2": 5, "3": 3}, "scores": scores}
    details.update(extra)
    return {
        "RESULT_ID": result_id,
        "TEST_ID": result_id,
        "TEST_TYPE": test_type,
        "SCORE": score,
        "RESULT_DETAILS": json.dumps(details),
        "COMPLETED_AT": "2024-03-10T09:00:00",
    }


@pytest.fixture
def stored_rows():
    return [
        _stored_row(1, "interest", 170, {"Realistic": 80, "Investigative": 90}),
        _stored_row(2, "aptitude", 190, {"Logical": 100, "Numerical": 90}),
        _stored_row(3, "personality", 8.5, {"Openness": 4.5, "Conscientiousness": 4.0}),
    ]


def test_stored_rows_with_aggregate_score_are_kept(stored_rows):
    results = transform_test_results(stored_rows)
    assert [r.test_id for r in results] == [1, 2, 3]
    assert all(r.score is None for r in results)


def test_stored_scores_become_category_scores(stored_rows):
    interest, aptitude, personality = transform_test_results(stored_rows)

    assert interest.category_scores == {"realistic": 80.0, "investigative": 90.0}
    assert aptitude.category_scores == {"logical": 100.0, "numerical": 90.0}
    # Likert means are scaled onto 0-100
    assert personality.category_scores == {"openness": 90.0, "conscientiousness": 80.0}
    assert interest.answers == {"1": 4, "2": 5, "3": 3}


@pytest.mark.parametrize("raw, expected", [
    (0.75, 75.0),
    (3, 60.0),
    (42, 42.0),
    (130, 100.0),
    (-5, 0.0),
])
def test_normalize_category_score(raw, expected):
    assert normalize_category_score(raw) == pytest.approx(expected)


def test_overall_score_from_details():
    row = _stored_row(4, "interest", 170, {"Social": 70}, overallScore=64)
    assert transform_test_result(row).score == 64.0


def test_stored_score_within_range_is_used_without_category_scores():
    row = {"test_id": 5, "result_details": {"answers": {"q1": 4}}, "score": 70}
    assert transform_test_result(row).score == 70.0


@pytest.mark.parametrize("score", [130, "high"])
def test_unusable_stored_score_keeps_the_answers(score):
    row = {"test_id": 6, "result_details": {"answers": {"q1": 4}}, "score": score}
    result = transform_test_result(row)
    assert result.score is None
    assert result.answers == {"q1": 4}


def test_category_map_takes_precedence_over_scores():
    row = {"test_id": 7, "result_details": {
        "answers": {"q1": 5}, "categories": {"q1": "social"}, "scores": {"Social": 1},
    }}
    result = transform_test_result(row)
    assert result.categories == {"q1": "social"}
    assert result.category_scores == {}


def test_stored_rows_build_a_full_profile(stored_rows):
    profile = extract_profile(transform_test_results(stored_rows))

    assert profile.completed_assessments == 3
    assert profile.interests == {"realistic": 80.0, "investigative": 90.0}
    assert profile.aptitudes == {"logical": 100.0, "numerical": 90.0}
    assert profile.personality == {"openness": 90.0, "conscientiousness": 80.0}
    assert "general" not in profile.interests


def test_batch_skips_malformed_results(caplog):
    rows = [
        {"test_id": 1, "test_type": "interest", "result_details": {"q1": 5}},
        {"test_id": 2, "result_details": "{broken"},
        "not a row",
        {"test_id": 3, "score": 80},
    ]
    with caplog.at_level(logging.WARNING):
        results = transform_test_results(rows)

    assert [r.test_id for r in results] == [1, 3]
    assert "Skipping malformed assessment result" in caplog.text
    assert "Skipping assessment result row of type str" in caplog.text


# ------------------------------------------------------------------
# Grades
# ------------------------------------------------------------------

def test_uppercase_grade_row():
    row = {"GRADE_ID": 7, "SUBJECT_NAME": "Matematike", "GRADE": "8,5", "GRADE_TYPE": "matura",
           "IS_MATURA_SUBJECT": 1, "YEAR_TAKEN": "2023"}
    record = transform_grade(row)

    assert record.grade == 8.5
    assert record.grade_type == "exit_exam"
    assert record.is_core_subject is True
    assert record.year_taken == 2023
    assert record.subject_name == "Matematike"


@pytest.mark.parametrize("flag, expected", [("po", True), ("Yes", True), ("0", False), (False, False)])
def test_core_subject_flag(flag, expected):
    record = transform_grade({"grade": 9, "is_core_subject": flag})
    assert record.is_core_subject is expected


def test_exam_board_alias():
    record = transform_grade({"value": 7.8, "type": "VKM"})
    assert record.grade_type == "exam_board"


@pytest.mark.parametrize("row", [
    {"subject": "Fizike"},                              # no grade
    {"grade": "tete"},
    {"grade": True},
    {"grade": 11},
    {"grade": 4.5, "grade_type": "yearly"},            # yearly starts at 5
    {"grade": 8, "grade_type": "semester"},
])
def test_malformed_grades_raise(row):
    with pytest.raises(MalformedRecordError):
        transform_grade(row)


def test_batch_skips_malformed_grades():
    records = transform_grades([{"grade": 8}, {"grade": 12}, {"grade": "9,0", "type": "average"}])
    assert [(r.grade, r.grade_type) for r in records] == [(8.0, "subject"), (9.0, "average")]


# ------------------------------------------------------------------
# Catalogs
# ------------------------------------------------------------------

@pytest.mark.parametrize("skills, expected", [
    ('["Programim", "Analize"]', ["Programim", "Analize"]),
    ("Programim, Analize", ["Programim", "Analize"]),
    (["Programim", ""], ["Programim"]),
    (None, []),
])
def test_career_skills(skills, expected):
    career = transform_career({"CAREER_ID": 1, "NAME": "Zhvillues Software", "SKILLS_REQUIRED": skills})
    assert career.skills == expected


def test_career_row_fields():
    career = transform_career({"id": 3, "title": "Infermier", "career_category": "Shendetesi",
                               "salary": 550, "outlook": "Growing"})
    assert career.career_id == 3
    assert career.name == "Infermier"
    assert career.category == "Shendetesi"
    assert career.average_salary == 550
    assert career.job_outlook == "Growing"


def test_batch_skips_careers_without_name():
    careers = transform_careers([{"career_id": 1}, {"career_id": 2, "name": "Mjek"}])
    assert [c.career_id for c in careers] == [2]


def test_program_row():
    row = {
        "PROGRAM_ID": 10,
        "PROGRAM_NAME": "Shkenca Kompjuterike",
        "UNIVERSITY_NAME": "Universiteti i Tiranes",
        "UNIVERSITY_TYPE": "Public",
        "FACULTY_NAME": "Fakulteti i Shkencave te Natyres",
        "CITY": "Tirane",
        "MIN_GRADE": "7,5",
        "REQUIRED_SUBJECTS": "Matematike, Fizike",
        "TUITION": 0,
        "DURATION": 3,
    }
    program = transform_program(row)

    assert program.program_id == 10
    assert program.name == "Shkenca Kompjuterike"
    assert program.university_type == "public"
    assert program.faculty == "Fakulteti i Shkencave te Natyres"
    assert program.location == "Tirane"
    assert program.minimum_grade == 7.5
    assert program.required_subjects == ["Matematike", "Fizike"]
    assert program.tuition_fee == 0.0
    assert program.duration_years == 3.0
    assert program.language is None


def test_program_without_minimum_grade():
    program = transform_program({"id": 1, "name": "Histori"})
    assert program.minimum_grade is None
    assert program.required_subjects == []
