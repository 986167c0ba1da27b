import logging
from collections.abc import Awaitable, Callable

from models.matching import MatchingCriteria, MatchScore
from models.mentor import MentorCandidate
from services.aggregator import aggregate
from services.history import infer_criteria
from services.recommendation_cache import RecommendationCache

logger = logging.getLogger(__name__)

MentorFetcher = Callable[[], Awaitable[list[MentorCandidate]]]
TopicFetcher = Callable[[str], Awaitable[list[str]]]

DEFAULT_RANK_LIMIT = 10
DEFAULT_RECOMMEND_LIMIT = 5


class MentorRecommender:
    """Ranks mentors for a student, serving fresh cached scores when available.

    Errors from the mentor/topic fetchers propagate; cache errors never do.
    """

    def __init__(
        self,
        cache: RecommendationCache,
        fetch_mentors: MentorFetcher,
        fetch_topics: TopicFetcher,
    ):
        self.cache = cache
        self.fetch_mentors = fetch_mentors
        self.fetch_topics = fetch_topics

    async def rank_mentors(
        self,
        criteria: MatchingCriteria,
        limit: int = DEFAULT_RANK_LIMIT,
    ) -> list[MatchScore]:
        if limit < 1:
            raise ValueError("limit must be at least 1")

        cached = await self.cache.lookup(criteria.student_id)
        if cached:
            logger.info("Serving %d cached scores for %s", len(cached), criteria.student_id)
            return cached[:limit]

        mentors = await self.fetch_mentors()
        if not mentors:
            logger.info("No active mentors to rank for %s", criteria.student_id)
            return []

        logger.info("Evaluating %d mentors for %s", len(mentors), criteria.student_id)
        scores = aggregate(criteria, mentors)
        await self.cache.store(criteria.student_id, scores)
        return scores[:limit]

    async def recommend_for_student(
        self,
        student_id: str,
        limit: int = DEFAULT_RECOMMEND_LIMIT,
    ) -> list[MatchScore]:
        """Rank mentors from needs inferred out of completed session topics."""
        topics = await self.fetch_topics(student_id)
        criteria = infer_criteria(student_id, topics)
        return await self.rank_mentors(criteria, limit)


def get_recommender() -> MentorRecommender:
    """Recommender wired to the connected database."""
    from db import MATCH_CACHE_COLLECTION, get_db
    from models.mentor import fetch_active_mentor_candidates
    from models.session import fetch_completed_session_topics

    return MentorRecommender(
        cache=RecommendationCache(get_db()[MATCH_CACHE_COLLECTION]),
        fetch_mentors=fetch_active_mentor_candidates,
        fetch_topics=fetch_completed_session_topics,
    )
