import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Optional

from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo import UpdateOne
from pymongo.errors import PyMongoError

from config import MATCH_CACHE_TTL_SECONDS
from models.matching import MatchScore, ScoreBreakdown

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(seconds=MATCH_CACHE_TTL_SECONDS)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_document(student_id: str, rank: int, score: MatchScore, expires_at: datetime) -> dict:
    b = score.breakdown
    return {
        "student_id": student_id,
        "mentor_id": score.mentor_id,
        "mentor_name": score.mentor_name,
        "mentor_avatar_ref": score.mentor_avatar_ref,
        "rank": rank,
        "total_score": score.total_score,
        "skill_score": b.skill_match,
        "availability_score": b.availability,
        "rating_score": b.rating,
        "success_score": b.past_success,
        "expires_at": expires_at,
    }


def _from_document(doc: dict) -> MatchScore:
    # Reasoning is not persisted; cached scores come back without it
    return MatchScore(
        mentor_id=doc["mentor_id"],
        mentor_name=doc.get("mentor_name") or "Unknown",
        mentor_avatar_ref=doc.get("mentor_avatar_ref"),
        breakdown=ScoreBreakdown(
            skill_match=doc["skill_score"],
            availability=doc["availability_score"],
            rating=doc["rating_score"],
            past_success=doc["success_score"],
        ),
    )


class RecommendationCache:
    """Per-(student, mentor) score snapshots with an expiry.

    The cache is an optimization only: read failures behave as a miss and
    write failures skip caching. Both are logged, neither is raised.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.collection = collection
        self.ttl = ttl
        self.clock = clock

    async def lookup(self, student_id: str) -> list[MatchScore]:
        """Fresh cached scores for a student, best first. Empty on miss or failure."""
        try:
            cursor = self.collection.find(
                {"student_id": student_id, "expires_at": {"$gt": self.clock()}},
                {"_id": 0},
            ).sort([("total_score", -1), ("rank", 1)])
            docs = await cursor.to_list(length=None)
            return [_from_document(doc) for doc in docs]
        except (PyMongoError, BSONError, KeyError, ValidationError) as e:
            logger.warning("Match cache read failed for %s, recomputing: %s", student_id, e)
            return []

    async def store(
        self,
        student_id: str,
        scores: list[MatchScore],
        ttl: Optional[timedelta] = None,
    ) -> bool:
        """Upsert one row per mentor in a single unordered bulk write.

        Returns False if any row failed; the student's rows are then removed
        so a partial ranking is never served.
        """
        if not scores:
            return True

        expires_at = self.clock() + (ttl if ttl is not None else self.ttl)
        # Rows are independent; concurrent writers for the same key simply overwrite
        writes = [
            UpdateOne(
                {"student_id": student_id, "mentor_id": score.mentor_id},
                {"$set": _to_document(student_id, rank, score, expires_at)},
                upsert=True,
            )
            for rank, score in enumerate(scores)
        ]
        try:
            await self.collection.bulk_write(writes, ordered=False)
        except PyMongoError as e:
            logger.warning("Match cache write failed for %s, result not cached: %s", student_id, e)
            await self._discard(student_id)
            return False

        logger.debug("Cached %d scores for %s until %s", len(scores), student_id, expires_at)
        return True

    async def _discard(self, student_id: str) -> None:
        try:
            await self.collection.delete_many({"student_id": student_id})
        except PyMongoError as e:
            logger.warning("Could not discard partial match cache for %s: %s", student_id, e)

    async def sweep_expired(self) -> int:
        """Delete rows whose expiry has passed. Safe to repeat."""
        result = await self.collection.delete_many({"expires_at": {"$lt": self.clock()}})
        return result.deleted_count
