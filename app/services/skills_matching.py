"""
Skills match scoring between an applicant and a job posting.

Score = 70% weight on required skills + 30% weight on preferred skills,
expressed as an integer percentage with halves rounded up. Matching is
exact after lowercasing (no trimming, fuzzy or synonym matching). Each
entry of the job's lists counts on its own, duplicates included.
"""

import math
from fractions import Fraction
from typing import Iterable, Optional, Sequence

REQUIRED_WEIGHT = Fraction(7, 10)
PREFERRED_WEIGHT = Fraction(3, 10)


def normalize_skills(skills: Optional[Iterable[str]]) -> set:
    """Lowercase and trim skill names, dropping blanks (used by job filters)."""
    return {s.strip().lower() for s in (skills or []) if s and s.strip()}


def _weighted_ratio(applicant: set, wanted: Sequence[str], weight: Fraction) -> Fraction:
    # An empty list counts as fully satisfied
    if not wanted:
        return weight
    matches = sum(1 for skill in wanted if skill.lower() in applicant)
    return Fraction(matches, len(wanted)) * weight


def calculate_skills_match(
    applicant_skills: Optional[Iterable[str]],
    required_skills: Optional[Iterable[str]],
    preferred_skills: Optional[Iterable[str]],
) -> int:
    """
    Compute the 0-100 skills match score.

    Args:
        applicant_skills: Skills listed on the applicant's profile
        required_skills: Job's required skills
        preferred_skills: Job's nice-to-have skills

    Returns:
        0 when the applicant lists no skills, 100 when the job lists none,
        otherwise (required_ratio * 0.7 + preferred_ratio * 0.3) * 100
        rounded half up.
    """
    applicant_list = list(applicant_skills or [])
    required = list(required_skills or [])
    preferred = list(preferred_skills or [])

    if not applicant_list:
        return 0
    if not required and not preferred:
        return 100

    applicant = {skill.lower() for skill in applicant_list}
    score = _weighted_ratio(applicant, required, REQUIRED_WEIGHT) + _weighted_ratio(
        applicant, preferred, PREFERRED_WEIGHT
    )
    # Exact arithmetic so x.5 always rounds up
    return max(0, min(100, math.floor(score * 100 + Fraction(1, 2))))
