from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from pymongo.errors import BulkWriteError, ServerSelectionTimeoutError

from models.mentor import MentorCandidate, Reachability
from services.recommendation_cache import RecommendationCache


def _matches(doc: dict, query: dict) -> bool:
    for key, cond in query.items():
        value = doc.get(key)
        if isinstance(cond, dict):
            if "$gt" in cond and not (value is not None and value > cond["$gt"]):
                return False
            if "$lt" in cond and not (value is not None and value < cond["$lt"]):
                return False
        elif value != cond:
            return False
    return True


class FakeCursor:
    def __init__(self, collection: "FakeCollection", docs: list[dict]):
        self.collection = collection
        self.docs = docs

    def sort(self, key_or_list, direction=None):
        keys = [(key_or_list, direction)] if isinstance(key_or_list, str) else key_or_list
        for key, order in reversed(keys):
            self.docs.sort(key=lambda d: d.get(key), reverse=order == -1)
        return self

    async def to_list(self, length=None):
        if self.collection.read_error is not None:
            raise self.collection.read_error
        if self.collection.fail_reads:
            raise ServerSelectionTimeoutError("cache unreachable")
        docs = self.docs if length is None else self.docs[:length]
        return [dict(d) for d in docs]


class FakeCollection:
    """Just enough of AsyncIOMotorCollection for the match cache."""

    def __init__(self):
        self.docs: list[dict] = []
        self.fail_reads = False
        self.fail_writes = False
        self.fail_deletes = False
        self.fail_mentor_ids: set[str] = set()
        self.read_error: Exception | None = None

    def find(self, query: dict, projection: dict | None = None):
        return FakeCursor(self, [d for d in self.docs if _matches(d, query)])

    async def bulk_write(self, requests, ordered: bool = True):
        if self.fail_writes:
            raise ServerSelectionTimeoutError("cache unreachable")
        errors = []
        for index, op in enumerate(requests):
            query, update = op._filter, op._doc
            if query.get("mentor_id") in self.fail_mentor_ids:
                errors.append({"index": index, "code": 11000, "errmsg": "write rejected"})
                continue
            for doc in self.docs:
                if _matches(doc, query):
                    doc.update(update["$set"])
                    break
            else:
                if op._upsert:
                    self.docs.append({**query, **update["$set"]})
        if errors:
            raise BulkWriteError({"writeErrors": errors, "nUpserted": len(requests) - len(errors)})
        return SimpleNamespace(upserted_count=len(requests))

    async def delete_many(self, query: dict):
        if self.fail_deletes:
            raise ServerSelectionTimeoutError("cache unreachable")
        keep = [d for d in self.docs if not _matches(d, query)]
        deleted = len(self.docs) - len(keep)
        self.docs = keep
        return SimpleNamespace(deleted_count=deleted)


class FakeClock:
    def __init__(self):
        self.now = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(fake_collection, clock):
    return RecommendationCache(fake_collection, ttl=timedelta(hours=1), clock=clock)


def make_mentor(mentor_id: str = "m1", **overrides) -> MentorCandidate:
    fields = {
        "id": mentor_id,
        "display_name": f"Mentor {mentor_id}",
        "reachability": Reachability.offline,
    }
    fields.update(overrides)
    return MentorCandidate(**fields)


@pytest.fixture
def mentor_a():
    return make_mentor(
        "mentor-a",
        display_name="Ada Mentor",
        skill_tags=["react", "typescript"],
        rating=4.8,
        review_count=15,
        session_count=25,
        reachability=Reachability.available,
    )
