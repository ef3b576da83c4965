"""
Reference Profile Lookup

Maps a career or program name to an idealized target profile through ordered
keyword buckets. Buckets are checked in priority order and the first bucket
with a matching keyword wins; no match yields a flat default profile.

Lookups are pure and deterministic. A fresh ReferenceProfile is built on every
call so callers can never share mutable state through it.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

from .contracts import ReferenceProfile
from .constants import (
    INTEREST_CATEGORIES,
    APTITUDE_CATEGORIES,
    DEFAULT_PROFILE_LEVEL,
    DEFAULT_MINIMUM_GRADE,
)

DEFAULT_BUCKET = "default"


@dataclass(frozen=True)
class ReferenceBucket:
    """Keyword bucket with the target profile it stands for."""
    name: str
    keywords: Tuple[str, ...]
    interest_weights: Dict[str, float]
    aptitude_requirements: Optional[Dict[str, float]] = None
    personality_ranges: Optional[Dict[str, Tuple[float, float]]] = None
    minimum_grade: float = DEFAULT_MINIMUM_GRADE
    required_subjects: Tuple[str, ...] = field(default_factory=tuple)

    def to_profile(self) -> ReferenceProfile:
        return ReferenceProfile(
            bucket=self.name,
            interest_weights=dict(self.interest_weights),
            personality_ranges=dict(self.personality_ranges or DEFAULT_PERSONALITY_RANGES),
            aptitude_requirements=dict(self.aptitude_requirements or DEFAULT_APTITUDE_REQUIREMENTS),
            minimum_grade=self.minimum_grade,
            required_subjects=list(self.required_subjects),
        )


def _riasec(realistic, investigative, artistic, social, enterprising, conventional) -> Dict[str, float]:
    return dict(zip(INTEREST_CATEGORIES, (realistic, investigative, artistic, social, enterprising, conventional)))


def _aptitudes(verbal, numerical, spatial, logical, creative) -> Dict[str, float]:
    return dict(zip(APTITUDE_CATEGORIES, (verbal, numerical, spatial, logical, creative)))


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_INTEREST_WEIGHTS = {category: DEFAULT_PROFILE_LEVEL for category in INTEREST_CATEGORIES}

DEFAULT_APTITUDE_REQUIREMENTS = _aptitudes(60, 60, 60, 60, 60)

# Ideal ranges on the 1-5 Likert scale
DEFAULT_PERSONALITY_RANGES: Dict[str, Tuple[float, float]] = {
    "openness": (2.0, 4.5),
    "conscientiousness": (2.0, 4.5),
    "extraversion": (2.0, 4.5),
    "agreeableness": (2.0, 4.5),
    "neuroticism": (1.5, 4.0),
}

_ANALYTICAL_PERSONALITY = {
    "openness": (3.5, 5.0),
    "conscientiousness": (3.5, 5.0),
    "extraversion": (2.0, 4.0),
    "agreeableness": (2.5, 4.5),
    "neuroticism": (1.0, 3.5),
}

_OUTGOING_PERSONALITY = {
    "openness": (3.0, 5.0),
    "conscientiousness": (3.0, 4.5),
    "extraversion": (3.5, 5.0),
    "agreeableness": (3.0, 4.5),
    "neuroticism": (1.0, 3.5),
}

_TEACHING_PERSONALITY = {
    "openness": (3.0, 4.5),
    "conscientiousness": (3.5, 4.5),
    "extraversion": (3.0, 5.0),
    "agreeableness": (3.5, 5.0),
    "neuroticism": (1.0, 3.5),
}

_CLINICAL_PERSONALITY = {
    "openness": (3.0, 4.5),
    "conscientiousness": (4.0, 5.0),
    "extraversion": (2.5, 4.5),
    "agreeableness": (3.5, 5.0),
    "neuroticism": (1.0, 3.0),
}


# =============================================================================
# CAREER BUCKETS (priority order)
# =============================================================================

CAREER_BUCKETS: Tuple[ReferenceBucket, ...] = (
    # Technology & engineering
    ReferenceBucket(
        "software", ("software", "programues", "zhvillues", "developer", "programmer"),
        _riasec(60, 80, 30, 20, 25, 40),
        aptitude_requirements=_aptitudes(60, 70, 50, 85, 65),
        personality_ranges=_ANALYTICAL_PERSONALITY,
    ),
    ReferenceBucket(
        "engineering", ("inxhinier", "engineer"),
        _riasec(85, 75, 25, 30, 35, 50),
        aptitude_requirements=_aptitudes(50, 95, 85, 90, 60),
    ),
    ReferenceBucket(
        "information_technology", ("teknolog", "it", "technolog", "informatik", "data"),
        _riasec(65, 70, 25, 25, 30, 55),
    ),
    # Business & finance
    ReferenceBucket(
        "marketing", ("marketing", "tregtari", "sales"),
        _riasec(20, 35, 60, 50, 85, 45),
        aptitude_requirements=_aptitudes(90, 65, 45, 60, 85),
        personality_ranges=_OUTGOING_PERSONALITY,
    ),
    ReferenceBucket(
        "finance", ("bankier", "financa", "kontabilist", "finance", "accountant", "banker"),
        _riasec(25, 55, 20, 30, 60, 80),
    ),
    ReferenceBucket(
        "management", ("menaxher", "drejtues", "manager", "executive"),
        _riasec(30, 40, 35, 60, 90, 50),
    ),
    # Healthcare
    ReferenceBucket(
        "medicine", ("mjek", "doctor", "kirurg", "physician", "surgeon"),
        _riasec(55, 85, 25, 80, 40, 50),
        aptitude_requirements=_aptitudes(75, 70, 60, 85, 50),
        personality_ranges=_CLINICAL_PERSONALITY,
    ),
    ReferenceBucket(
        "nursing", ("infermier", "nurse"),
        _riasec(60, 50, 25, 90, 30, 45),
    ),
    ReferenceBucket(
        "pharmacy_dentistry", ("farmacist", "dentist", "pharmacist"),
        _riasec(50, 75, 20, 70, 35, 60),
    ),
    # Education
    ReferenceBucket(
        "teaching", ("mesues", "teacher", "profesor", "professor"),
        _riasec(25, 60, 50, 90, 30, 40),
        aptitude_requirements=_aptitudes(90, 55, 45, 65, 70),
        personality_ranges=_TEACHING_PERSONALITY,
    ),
    ReferenceBucket(
        "pedagogy", ("pedagog", "edukator", "educator"),
        _riasec(20, 50, 60, 85, 25, 35),
    ),
    # Creative arts
    ReferenceBucket(
        "arts_design", ("artist", "dizajner", "grafik", "designer"),
        _riasec(30, 35, 95, 25, 40, 20),
    ),
    ReferenceBucket(
        "journalism_writing", ("gazetar", "shkrimtar", "journalist", "writer"),
        _riasec(15, 60, 80, 50, 45, 25),
    ),
    # Law & government
    ReferenceBucket(
        "law", ("jurist", "avokat", "lawyer", "attorney"),
        _riasec(20, 70, 35, 60, 75, 55),
    ),
    ReferenceBucket(
        "public_safety", ("polici", "sigurim", "police"),
        _riasec(70, 45, 15, 60, 50, 65),
    ),
    # Agriculture & environment
    ReferenceBucket(
        "agriculture_veterinary", ("agr", "bujq", "veteriner", "farmer"),
        _riasec(80, 60, 25, 50, 35, 45),
    ),
    # Tourism & services
    ReferenceBucket(
        "tourism_hospitality", ("turizm", "hotelier", "guide", "tourism"),
        _riasec(30, 25, 50, 80, 70, 40),
    ),
)


# =============================================================================
# PROGRAM BUCKETS (priority order)
# =============================================================================

PROGRAM_BUCKETS: Tuple[ReferenceBucket, ...] = (
    ReferenceBucket(
        "informatics", ("informatik", "kompjuter", "computer", "software"),
        _riasec(55, 80, 30, 20, 25, 50),
        aptitude_requirements=_aptitudes(50, 75, 55, 85, 55),
        minimum_grade=7.0, required_subjects=("matematike",),
    ),
    ReferenceBucket(
        "engineering", ("inxhinier", "engineer"),
        _riasec(85, 75, 30, 25, 35, 50),
        aptitude_requirements=_aptitudes(45, 85, 80, 85, 55),
        minimum_grade=7.0, required_subjects=("matematike", "fizike"),
    ),
    ReferenceBucket(
        "medicine", ("mjek", "medic"),
        _riasec(55, 85, 20, 80, 35, 50),
        aptitude_requirements=_aptitudes(70, 70, 55, 80, 45),
        minimum_grade=8.0, required_subjects=("biologji", "kimia"),
    ),
    ReferenceBucket(
        "nursing", ("infermier", "nursing"),
        _riasec(60, 55, 20, 90, 25, 45),
        aptitude_requirements=_aptitudes(65, 55, 45, 60, 45),
        minimum_grade=6.5, required_subjects=("biologji",),
    ),
    ReferenceBucket(
        "economics", ("ekonomi", "economic", "financ"),
        _riasec(25, 60, 20, 40, 65, 75),
        aptitude_requirements=_aptitudes(60, 80, 40, 70, 45),
        minimum_grade=6.5, required_subjects=("matematike",),
    ),
    ReferenceBucket(
        "business", ("biznes", "business", "menaxhim", "management"),
        _riasec(25, 40, 35, 60, 85, 60),
        aptitude_requirements=_aptitudes(70, 65, 40, 65, 55),
    ),
    ReferenceBucket(
        "marketing", ("marketing",),
        _riasec(20, 35, 65, 60, 85, 40),
        aptitude_requirements=_aptitudes(80, 55, 45, 55, 80),
    ),
    ReferenceBucket(
        "arts", ("arte", "arts", "pikture", "painting"),
        _riasec(35, 30, 95, 40, 40, 20),
        aptitude_requirements=_aptitudes(55, 35, 75, 45, 90),
    ),
    ReferenceBucket(
        "music", ("muzik", "music"),
        _riasec(30, 30, 95, 50, 40, 25),
        aptitude_requirements=_aptitudes(55, 45, 50, 50, 90),
    ),
    ReferenceBucket(
        "mathematics", ("matematik", "mathemat"),
        _riasec(45, 85, 25, 25, 25, 65),
        aptitude_requirements=_aptitudes(45, 90, 60, 90, 45),
        minimum_grade=7.0, required_subjects=("matematike",),
    ),
    ReferenceBucket(
        "physics", ("fizik", "physic"),
        _riasec(65, 85, 25, 20, 25, 50),
        aptitude_requirements=_aptitudes(45, 85, 70, 85, 50),
        minimum_grade=7.0, required_subjects=("matematike", "fizike"),
    ),
    ReferenceBucket(
        "chemistry", ("kimi", "chemistr"),
        _riasec(65, 80, 20, 25, 25, 55),
        aptitude_requirements=_aptitudes(45, 75, 55, 80, 45),
        minimum_grade=7.0, required_subjects=("kimia",),
    ),
    ReferenceBucket(
        "biology", ("biologji", "biolog"),
        _riasec(60, 80, 25, 55, 25, 45),
        aptitude_requirements=_aptitudes(60, 60, 50, 75, 45),
        minimum_grade=7.0, required_subjects=("biologji",),
    ),
    ReferenceBucket(
        "psychology", ("psikolog", "psycholog"),
        _riasec(20, 75, 50, 85, 35, 35),
        aptitude_requirements=_aptitudes(80, 50, 40, 70, 60),
        minimum_grade=7.0,
    ),
    ReferenceBucket(
        "law", ("drejtesi", "juridik", "law"),
        _riasec(20, 65, 30, 60, 75, 65),
        aptitude_requirements=_aptitudes(90, 45, 35, 80, 50),
        minimum_grade=7.0, required_subjects=("shqipe", "histori"),
    ),
    ReferenceBucket(
        "architecture", ("arkitekt", "architect"),
        _riasec(75, 60, 80, 25, 35, 45),
        aptitude_requirements=_aptitudes(45, 70, 90, 70, 85),
        minimum_grade=7.0, required_subjects=("matematike",),
    ),
    ReferenceBucket(
        "construction", ("ndertim", "construction", "civil"),
        _riasec(85, 55, 25, 30, 40, 60),
        aptitude_requirements=_aptitudes(40, 75, 80, 70, 45),
        minimum_grade=6.5, required_subjects=("matematike", "fizike"),
    ),
    ReferenceBucket(
        "tourism", ("turizem", "turizm", "tourism", "hotel"),
        _riasec(30, 25, 45, 85, 75, 45),
        aptitude_requirements=_aptitudes(80, 45, 45, 45, 55),
        required_subjects=("anglisht",),
    ),
    ReferenceBucket(
        "journalism_media", ("gazetar", "journalism", "media"),
        _riasec(15, 60, 75, 70, 55, 25),
        aptitude_requirements=_aptitudes(90, 35, 40, 60, 75),
        minimum_grade=6.5, required_subjects=("shqipe",),
    ),
    ReferenceBucket(
        "sport", ("sport",),
        _riasec(85, 30, 25, 70, 60, 35),
        aptitude_requirements=_aptitudes(50, 40, 65, 50, 45),
    ),
    ReferenceBucket(
        "agriculture", ("bujqesi", "agricult", "agronom"),
        _riasec(85, 60, 20, 35, 35, 50),
        aptitude_requirements=_aptitudes(45, 55, 60, 60, 40),
        required_subjects=("biologji",),
    ),
    ReferenceBucket(
        "veterinary", ("veteriner", "veterinar"),
        _riasec(80, 75, 20, 55, 30, 45),
        aptitude_requirements=_aptitudes(55, 60, 55, 75, 40),
        minimum_grade=7.0, required_subjects=("biologji", "kimia"),
    ),
    # Broad faculty families, checked after every specific field
    ReferenceBucket(
        "technical", ("teknik", "teknologj", "technolog"),
        _riasec(75, 70, 25, 25, 35, 55),
        aptitude_requirements=_aptitudes(45, 70, 65, 70, 50),
    ),
    ReferenceBucket(
        "social_humanities", ("human", "social"),
        _riasec(20, 50, 65, 80, 55, 35),
        aptitude_requirements=_aptitudes(80, 40, 40, 55, 60),
    ),
    ReferenceBucket(
        "natural_sciences", ("shkenc", "science"),
        _riasec(70, 80, 25, 30, 25, 50),
        aptitude_requirements=_aptitudes(45, 75, 60, 80, 45),
        minimum_grade=6.5,
    ),
)


# =============================================================================
# LOOKUP
# =============================================================================

def normalize_text(text: Optional[str]) -> str:
    """Lowercase and strip diacritics so 'Mësues' matches 'mesues'."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def keyword_matches(keyword: str, text: str) -> bool:
    """
    Test a keyword against normalized text.

    Keywords of 2 characters ('it') must be whole words and 3-character
    keywords ('agr', 'law') must start a word. Longer keywords match anywhere.
    """
    if len(keyword) <= 2:
        return re.search(rf"\b{re.escape(keyword)}\b", text) is not None
    if len(keyword) == 3:
        return re.search(rf"\b{re.escape(keyword)}", text) is not None
    return keyword in text


def match_bucket(text: str, buckets: Sequence[ReferenceBucket]) -> Optional[ReferenceBucket]:
    """Return the first bucket with a keyword in text, or None."""
    normalized = normalize_text(text)
    if not normalized:
        return None
    for bucket in buckets:
        if any(keyword_matches(keyword, normalized) for keyword in bucket.keywords):
            return bucket
    return None


def default_profile() -> ReferenceProfile:
    """Flat profile: every dimension at 50, minimum grade 6.0."""
    return ReferenceProfile(
        bucket=DEFAULT_BUCKET,
        interest_weights=dict(DEFAULT_INTEREST_WEIGHTS),
        personality_ranges=dict(DEFAULT_PERSONALITY_RANGES),
        aptitude_requirements={category: DEFAULT_PROFILE_LEVEL for category in APTITUDE_CATEGORIES},
        minimum_grade=DEFAULT_MINIMUM_GRADE,
    )


def lookup_career_profile(career_name: str) -> ReferenceProfile:
    bucket = match_bucket(career_name, CAREER_BUCKETS)
    return bucket.to_profile() if bucket else default_profile()


def lookup_program_profile(program_name: str, faculty: str = "") -> ReferenceProfile:
    """Program name is checked first; the faculty only when the name matches nothing."""
    bucket = match_bucket(program_name, PROGRAM_BUCKETS) or match_bucket(faculty, PROGRAM_BUCKETS)
    return bucket.to_profile() if bucket else default_profile()
