"""Component scorers for mentor matching.

Weights: skill match 50, availability 20, rating 20, past success 10.
Each scorer is a pure function over a criteria/mentor pair.
"""
from dataclasses import dataclass, field

from models.matching import MatchingCriteria
from models.mentor import MentorCandidate, Reachability

SKILL_MAX = 50.0
AVAILABILITY_MAX = 20.0
RATING_MAX = 20.0
PAST_SUCCESS_MAX = 10.0

EXACT_MATCH_CREDIT = 1.0
FUZZY_MATCH_CREDIT = 0.7

REACHABLE_BONUS = 10.0
NO_DAY_PREFERENCE_BONUS = 5.0

SESSION_SATURATION = 20
PROVEN_MIN_REVIEWS = 10
PROVEN_MIN_RATING = 4.5


@dataclass
class SkillMatchResult:
    score: float
    matched_needs: list[str] = field(default_factory=list)


@dataclass
class ComponentScore:
    score: float
    reason: str


def _normalize(text: str) -> str:
    return text.strip().lower()


# ── Skill match (0-50) ───────────────────────────────────────────────────

def score_skill_match(
    student_needs: list[str],
    mentor_skills: list[str],
    mentor_domain: list[str],
) -> SkillMatchResult:
    """Exact tag hits earn full credit, substring overlap in either direction 0.7."""
    tags = {_normalize(t) for t in [*mentor_skills, *mentor_domain]}
    tags.discard("")

    match_count = 0.0
    matched: list[str] = []
    for raw in student_needs:
        need = _normalize(raw)
        # "" is a substring of every tag
        if not need:
            continue
        if need in tags:
            match_count += EXACT_MATCH_CREDIT
            matched.append(need)
        elif any(need in tag or tag in need for tag in tags):
            match_count += FUZZY_MATCH_CREDIT
            matched.append(need)

    match_ratio = match_count / max(1, len(student_needs))
    return SkillMatchResult(score=min(SKILL_MAX, match_ratio * SKILL_MAX), matched_needs=matched)


# ── Availability (0-20) ──────────────────────────────────────────────────

_REACHABILITY_REASONS = {
    Reachability.available: "Currently available",
    Reachability.offline: "Currently offline",
    Reachability.in_session: "Currently in session",
}


def score_availability(criteria: MatchingCriteria, mentor: MentorCandidate) -> ComponentScore:
    score = REACHABLE_BONUS if mentor.reachability == Reachability.available else 0.0
    reason = _REACHABILITY_REASONS[mentor.reachability]

    preferred = criteria.preferred_days or []
    if preferred:
        mentor_days = {_normalize(d) for d in mentor.available_days}
        overlap = [d for d in preferred if _normalize(d) in mentor_days]
        if overlap:
            score += len(overlap) / len(preferred) * 10
            reason += f", Available on {', '.join(overlap)}"
    else:
        # No stated preference means no information, not no overlap
        score += NO_DAY_PREFERENCE_BONUS

    return ComponentScore(score=score, reason=reason)


# ── Rating (0-20) ────────────────────────────────────────────────────────

def score_rating(mentor: MentorCandidate) -> ComponentScore:
    score = (mentor.rating / 5) * RATING_MAX

    reason = f"{mentor.rating:.1f} ⭐"
    if mentor.review_count > 0:
        reason += f" ({mentor.review_count} reviews)"
    if mentor.is_verified:
        reason += " • Verified ✓"

    return ComponentScore(score=score, reason=reason)


# ── Past success (0-10) ──────────────────────────────────────────────────

def score_past_success(mentor: MentorCandidate) -> ComponentScore:
    """Experience saturating at 20 sessions, plus an all-or-nothing track record bonus."""
    session_score = min(5.0, (mentor.session_count / SESSION_SATURATION) * 5)
    proven = mentor.review_count > PROVEN_MIN_REVIEWS and mentor.rating >= PROVEN_MIN_RATING
    success_score = 5.0 if proven else 0.0

    return ComponentScore(
        score=session_score + success_score,
        reason=f"{mentor.session_count} sessions completed",
    )
