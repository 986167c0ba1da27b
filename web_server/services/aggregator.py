import logging

from models.matching import MatchingCriteria, MatchScore, ScoreBreakdown
from models.mentor import MentorCandidate
from services.scoring import (
    score_availability,
    score_past_success,
    score_rating,
    score_skill_match,
)

logger = logging.getLogger(__name__)


def score_mentor(criteria: MatchingCriteria, mentor: MentorCandidate) -> MatchScore:
    """Run all four scorers for one mentor and assemble the reasoning."""
    skill = score_skill_match(criteria.student_needs, mentor.skill_tags, mentor.domain_tags)
    availability = score_availability(criteria, mentor)
    rating = score_rating(mentor)
    success = score_past_success(mentor)

    reasoning: list[str] = []
    if skill.matched_needs:
        reasoning.append(f"Expertise in {', '.join(skill.matched_needs)}")
    if availability.reason:
        reasoning.append(availability.reason)
    reasoning.append(rating.reason)
    if mentor.session_count > 0:
        reasoning.append(success.reason)

    return MatchScore(
        mentor_id=mentor.id,
        mentor_name=mentor.display_name,
        mentor_avatar_ref=mentor.avatar_ref,
        breakdown=ScoreBreakdown(
            skill_match=skill.score,
            availability=availability.score,
            rating=rating.score,
            past_success=success.score,
        ),
        reasoning=reasoning,
    )


def aggregate(criteria: MatchingCriteria, mentors: list[MentorCandidate]) -> list[MatchScore]:
    """Score every mentor, best first. Equal totals keep their input order."""
    scores = [score_mentor(criteria, m) for m in mentors]
    # sorted() is stable, which keeps repeated calls deterministic
    ranked = sorted(scores, key=lambda s: s.total_score, reverse=True)

    if ranked:
        top = ranked[0]
        logger.debug(
            "Scored %d mentors for %s; top match %s (%d%%)",
            len(ranked), criteria.student_id, top.mentor_name, top.match_percentage,
        )
    return ranked
