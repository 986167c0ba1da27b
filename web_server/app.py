import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import Depends, FastAPI, HTTPException, Query
from pymongo.errors import PyMongoError

from config import MATCH_CACHE_SWEEP_INTERVAL_SECONDS
from db import MATCH_CACHE_COLLECTION, close_db, connect_db, get_db
from logging_setup import setup_logging
from models.matching import MatchingCriteria, RankedMentorsResponse, SweepResponse
from services.cache_sweeper import run_cache_sweeper, sweep_once
from services.recommendation_cache import RecommendationCache
from services.recommender import MentorRecommender, get_recommender

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = await connect_db()

    sweeper = None
    if MATCH_CACHE_SWEEP_INTERVAL_SECONDS > 0:
        cache = RecommendationCache(db[MATCH_CACHE_COLLECTION])
        sweeper = asyncio.create_task(
            run_cache_sweeper(cache, MATCH_CACHE_SWEEP_INTERVAL_SECONDS)
        )

    yield

    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    await close_db()


app = FastAPI(title="Mentor Match API", lifespan=lifespan)


def get_match_cache() -> RecommendationCache:
    return RecommendationCache(get_db()[MATCH_CACHE_COLLECTION])


# ── Matching endpoints ─────────────────────────────────────────────────


@app.post("/matches", response_model=RankedMentorsResponse)
async def rank_mentors_endpoint(
    criteria: MatchingCriteria,
    limit: int = Query(10, ge=1, le=50),
    recommender: MentorRecommender = Depends(get_recommender),
):
    try:
        matches = await recommender.rank_mentors(criteria, limit)
    except PyMongoError as e:
        logger.error("Mentor pool unavailable: %s", e)
        raise HTTPException(status_code=503, detail="Mentor data unavailable")

    return RankedMentorsResponse(
        student_id=criteria.student_id,
        total=len(matches),
        matches=matches,
    )


@app.get("/students/{student_id}/recommended-mentors", response_model=RankedMentorsResponse)
async def recommended_mentors(
    student_id: str,
    limit: int = Query(5, ge=1, le=50),
    recommender: MentorRecommender = Depends(get_recommender),
):
    try:
        matches = await recommender.recommend_for_student(student_id, limit)
    except PyMongoError as e:
        logger.error("Session history or mentor pool unavailable: %s", e)
        raise HTTPException(status_code=503, detail="Mentor data unavailable")

    return RankedMentorsResponse(
        student_id=student_id,
        total=len(matches),
        matches=matches,
    )


# ── Cache maintenance ──────────────────────────────────────────────────


@app.delete("/match-cache/expired", response_model=SweepResponse)
async def sweep_match_cache(cache: RecommendationCache = Depends(get_match_cache)):
    """Remove expired cached scores now instead of waiting for the sweeper."""
    return SweepResponse(deleted=await sweep_once(cache))
