from db import get_db

# Only the most recent completed sessions shape inferred needs
RECENT_SESSION_LIMIT = 10


async def fetch_completed_session_topics(
    student_id: str,
    limit: int = RECENT_SESSION_LIMIT,
) -> list[str]:
    """Topics of a student's completed sessions, newest first.

    One entry per session; a session without a topic yields "".
    """
    db = get_db()
    cursor = db.session_requests.find(
        {"student_id": student_id, "status": "completed"},
        {"_id": 0, "topic": 1},
    ).sort("created_at", -1)
    docs = await cursor.to_list(length=limit)
    return [doc.get("topic") or "" for doc in docs]
