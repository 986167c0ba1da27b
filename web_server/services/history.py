import re

from models.matching import MatchingCriteria, PreferredMode, StudentLevel, Urgency

_TOKEN_SPLIT = re.compile(r"[\s,]+")
MIN_TOKEN_LENGTH = 4


def infer_criteria(student_id: str, topics: list[str]) -> MatchingCriteria:
    """Build criteria from past session topics, one entry per completed session.

    Without history the needs are empty, which ranks purely on availability,
    rating and past success (a "top rated" list).
    """
    # Keyed on session count; topic-less sessions still count as history
    if not topics:
        return MatchingCriteria(
            student_id=student_id,
            student_needs=[],
            urgency=Urgency.low,
            preferred_mode=PreferredMode.chat,
            student_level=StudentLevel.beginner,
        )

    text = " ".join(topic for topic in topics if topic)
    tokens = [t for t in _TOKEN_SPLIT.split(text) if len(t) >= MIN_TOKEN_LENGTH]
    return MatchingCriteria(
        student_id=student_id,
        student_needs=list(dict.fromkeys(tokens)),
        urgency=Urgency.low,
        preferred_mode=PreferredMode.chat,
        student_level=StudentLevel.intermediate,
    )
