import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from db import get_db

logger = logging.getLogger(__name__)


# ── Enums ────────────────────────────────────────────────────────────────

class Reachability(str, Enum):
    available = "available"
    in_session = "in_session"
    offline = "offline"


# ── Scoring subject ──────────────────────────────────────────────────────

class MentorCandidate(BaseModel):
    """One mentor eligible for scoring. Ratings outside [0, 5] are rejected here."""
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    avatar_ref: Optional[str] = None
    domain_tags: list[str] = []
    skill_tags: list[str] = []
    rating: float = Field(0.0, ge=0.0, le=5.0)
    review_count: int = Field(0, ge=0)
    session_count: int = Field(0, ge=0)
    reachability: Reachability = Reachability.offline
    available_days: list[str] = []
    is_verified: bool = False


def mentor_from_document(doc: dict) -> MentorCandidate:
    """Map a mentor_profiles document onto a MentorCandidate, defaulting absent fields."""
    return MentorCandidate(
        id=doc["user_id"],
        display_name=doc.get("full_name") or "Unknown",
        avatar_ref=doc.get("avatar_url"),
        domain_tags=doc.get("domain") or [],
        skill_tags=doc.get("skills") or [],
        rating=doc.get("rating") or 0.0,
        review_count=doc.get("total_reviews") or 0,
        session_count=doc.get("total_sessions") or 0,
        reachability=doc.get("status") or Reachability.offline,
        available_days=doc.get("available_days") or [],
        is_verified=bool(doc.get("is_verified")),
    )


# ── Reads ────────────────────────────────────────────────────────────────

async def fetch_active_mentor_candidates() -> list[MentorCandidate]:
    """All non-deleted mentors, highest rated first.

    Database errors propagate to the caller. Malformed documents are skipped.
    """
    db = get_db()
    cursor = db.mentor_profiles.find({"deleted_at": None}, {"_id": 0}).sort("rating", -1)
    docs = await cursor.to_list(length=None)

    mentors: list[MentorCandidate] = []
    for doc in docs:
        try:
            mentors.append(mentor_from_document(doc))
        except (KeyError, ValidationError) as e:
            logger.warning("Skipping malformed mentor profile %s: %s", doc.get("user_id"), e)
    return mentors
