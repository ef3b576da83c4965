"""
Fallback Provider

Fixed, hand-authored careers and programs returned when the live catalog is
unavailable or there is not enough data to personalize. Every entry carries a
score between 70 and 90 and is flagged as a fallback.
"""

from typing import Any, Dict, List, Optional, Tuple

from .contracts import MatchResult
from .constants import DEFAULT_LANGUAGE
from .output_assembler import format_salary

FALLBACK_SOURCE = "fallback"

FALLBACK_CAREERS: Tuple[Dict[str, Any], ...] = (
    {
        "career_id": "fallback-software-developer",
        "name": "Software Developer",
        "category": "Technology",
        "description": "Designs and builds applications and software systems",
        "average_salary": 800,
        "job_outlook": "Very high",
        "required_education": "Bachelor",
        "skills": ["Programming", "Problem solving", "Teamwork"],
        "score": 85,
        "reason": "A fast-growing field with strong demand for new graduates",
    },
    {
        "career_id": "fallback-physician",
        "name": "General Physician",
        "category": "Healthcare",
        "description": "Provides primary medical care and diagnoses illness",
        "average_salary": 1200,
        "job_outlook": "Very high",
        "required_education": "Master",
        "skills": ["Diagnosis", "Communication", "Critical thinking"],
        "score": 80,
        "reason": "A stable, respected profession with lasting demand",
    },
    {
        "career_id": "fallback-civil-engineer",
        "name": "Civil Engineer",
        "category": "Engineering",
        "description": "Designs and supervises the construction of infrastructure",
        "average_salary": 900,
        "job_outlook": "High",
        "required_education": "Bachelor",
        "skills": ["Mathematics", "Design", "Project management"],
        "score": 78,
        "reason": "Combines analytical work with visible, practical results",
    },
    {
        "career_id": "fallback-marketing-manager",
        "name": "Marketing Manager",
        "category": "Business",
        "description": "Develops and runs marketing strategies for products and services",
        "average_salary": 700,
        "job_outlook": "High",
        "required_education": "Bachelor",
        "skills": ["Communication", "Creativity", "Analysis"],
        "score": 76,
        "reason": "Suits people who enjoy creativity, people and business",
    },
    {
        "career_id": "fallback-registered-nurse",
        "name": "Registered Nurse",
        "category": "Healthcare",
        "description": "Provides care and support to patients in healthcare settings",
        "average_salary": 500,
        "job_outlook": "Very high",
        "required_education": "Bachelor",
        "skills": ["Patient care", "Communication", "Critical thinking"],
        "score": 74,
        "reason": "Meaningful work helping others, with steady demand",
    },
    {
        "career_id": "fallback-primary-teacher",
        "name": "Primary School Teacher",
        "category": "Education",
        "description": "Teaches and supports young pupils in their academic and personal growth",
        "average_salary": 400,
        "job_outlook": "Moderate",
        "required_education": "Bachelor",
        "skills": ["Teaching", "Communication", "Patience"],
        "score": 72,
        "reason": "A rewarding path for people who enjoy explaining and mentoring",
    },
)

FALLBACK_PROGRAMS: Tuple[Dict[str, Any], ...] = (
    {
        "program_id": "fallback-computer-science",
        "name": "Computer Science",
        "university_name": "University of Tirana",
        "university_type": "public",
        "faculty": "Faculty of Natural Sciences",
        "location": "Tirana",
        "duration_years": 3,
        "tuition_fee": 0.0,
        "score": 88,
        "reason": "One of the most sought-after programs, leading to high-demand careers",
    },
    {
        "program_id": "fallback-business-administration",
        "name": "Business Administration",
        "university_name": "University of Tirana",
        "university_type": "public",
        "faculty": "Faculty of Economics",
        "location": "Tirana",
        "duration_years": 3,
        "tuition_fee": 0.0,
        "score": 84,
        "reason": "A flexible degree that opens doors across many industries",
    },
    {
        "program_id": "fallback-civil-engineering",
        "name": "Civil Engineering",
        "university_name": "Polytechnic University of Tirana",
        "university_type": "public",
        "faculty": "Faculty of Civil Engineering",
        "location": "Tirana",
        "duration_years": 3,
        "tuition_fee": 0.0,
        "score": 80,
        "reason": "Strong job prospects in construction and infrastructure",
    },
    {
        "program_id": "fallback-nursing",
        "name": "Nursing",
        "university_name": "University of Medicine, Tirana",
        "university_type": "public",
        "faculty": "Faculty of Technical Medical Sciences",
        "location": "Tirana",
        "duration_years": 3,
        "tuition_fee": 0.0,
        "score": 77,
        "reason": "Direct path to a profession with steady demand",
    },
    {
        "program_id": "fallback-psychology",
        "name": "Psychology",
        "university_name": "University of Tirana",
        "university_type": "public",
        "faculty": "Faculty of Social Sciences",
        "location": "Tirana",
        "duration_years": 3,
        "tuition_fee": 0.0,
        "score": 74,
        "reason": "A good choice for people interested in understanding and helping others",
    },
    {
        "program_id": "fallback-economics",
        "name": "Economics",
        "university_name": "University of Tirana",
        "university_type": "public",
        "faculty": "Faculty of Economics",
        "location": "Tirana",
        "duration_years": 3,
        "tuition_fee": 0.0,
        "score": 70,
        "reason": "Builds analytical skills valued in finance, business and government",
    },
)


def fallback_careers(limit: Optional[int] = None) -> List[MatchResult]:
    """Fresh fallback career results, highest score first."""
    results = [
        MatchResult(
            entity_id=entry["career_id"],
            title=entry["name"],
            kind="career",
            match_score=entry["score"],
            match_reason=entry["reason"],
            category=entry["category"],
            is_fallback=True,
            source=FALLBACK_SOURCE,
            description=entry["description"],
            salary_range=format_salary(entry["average_salary"]),
            job_outlook=entry["job_outlook"],
            education_level=entry["required_education"],
            skills=list(entry["skills"]),
        )
        for entry in FALLBACK_CAREERS
    ]
    return results[:limit] if limit else results


def fallback_programs(limit: Optional[int] = None) -> List[MatchResult]:
    """Fresh fallback program results, highest score first. No eligibility status."""
    results = [
        MatchResult(
            entity_id=entry["program_id"],
            title=entry["name"],
            kind="program",
            match_score=entry["score"],
            match_reason=entry["reason"],
            category=entry["faculty"],
            is_fallback=True,
            source=FALLBACK_SOURCE,
            university_name=entry["university_name"],
            university_type=entry["university_type"],
            faculty=entry["faculty"],
            location=entry["location"],
            duration_years=entry["duration_years"],
            tuition_fee=entry["tuition_fee"],
            language=DEFAULT_LANGUAGE,
        )
        for entry in FALLBACK_PROGRAMS
    ]
    return results[:limit] if limit else results
