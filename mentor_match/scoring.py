import logging
from typing import Any

from .constants import ScoreWeights

logger = logging.getLogger(__name__)


def _experience_bonus(years: int) -> int:
    for min_years, bonus in ScoreWeights.EXPERIENCE_TIERS:
        if years >= min_years:
            return bonus
    return 0


def _mentoring_experience_bonus(description: str) -> int:
    for keyword, bonus in ScoreWeights.MENTORING_EXPERIENCE:
        if keyword in description:
            return bonus
    return 0


def calculate_match_score(mentor: Any) -> int:
    """
    Computes an advisory compatibility score for a mentor profile.

    The score only looks at the mentor's own attributes, so the same profile
    always scores the same. It is shown on listings and snapshotted onto a
    match when a request is made; it never gates a transition.

    Args:
        mentor: A MentorProfile (or any object exposing the same attributes).

    Returns:
        int: Score clamped to [0, 100].
    """
    score = ScoreWeights.BASE

    score += _experience_bonus(mentor.years_of_experience or 0)
    score += _mentoring_experience_bonus(mentor.mentoring_experience or "")

    strengths = mentor.areas_of_strength or []
    score += min(len(strengths) * ScoreWeights.PER_STRENGTH, ScoreWeights.MAX_STRENGTH_BONUS)

    if len(mentor.bio or "") > ScoreWeights.BIO_MIN_LENGTH:
        score += ScoreWeights.BIO_BONUS

    current = mentor.current_mentee_count or 0
    maximum = mentor.max_mentees or 0
    if current < maximum:
        score += ScoreWeights.HAS_CAPACITY_BONUS
    else:
        score += ScoreWeights.AT_CAPACITY_PENALTY

    return max(ScoreWeights.MIN_SCORE, min(ScoreWeights.MAX_SCORE, score))
