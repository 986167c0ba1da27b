import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


# ── Enums ────────────────────────────────────────────────────────────────
# Urgency, mode and level travel with the request but carry no weight.

class Urgency(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class PreferredMode(str, Enum):
    chat = "chat"
    call = "call"
    video = "video"


class StudentLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


# ── Scoring request ──────────────────────────────────────────────────────

_HH_MM = r"^([01]\d|2[0-3]):[0-5]\d$"


class TimeSlot(BaseModel):
    """A daily time window, e.g. 14:00-16:00. Accepted but not scored."""
    model_config = ConfigDict(frozen=True)

    start: str = Field(pattern=_HH_MM)
    end: str = Field(pattern=_HH_MM)

    @model_validator(mode="after")
    def _start_before_end(self) -> "TimeSlot":
        # Zero-padded HH:MM strings order the same as the times they name
        if self.start >= self.end:
            raise ValueError("time slot start must be before end")
        return self


class MatchingCriteria(BaseModel):
    """What a student is looking for. student_id only keys the cache."""
    model_config = ConfigDict(frozen=True)

    student_id: str = Field(min_length=1)
    student_needs: list[str] = []
    urgency: Urgency = Urgency.low
    preferred_mode: PreferredMode = PreferredMode.chat
    student_level: StudentLevel = StudentLevel.beginner
    preferred_days: Optional[list[str]] = None
    preferred_time_slots: Optional[list[TimeSlot]] = None


# ── Scoring result ───────────────────────────────────────────────────────

class ScoreBreakdown(BaseModel):
    skill_match: float = Field(ge=0.0, le=50.0)
    availability: float = Field(ge=0.0, le=20.0)
    rating: float = Field(ge=0.0, le=20.0)
    past_success: float = Field(ge=0.0, le=10.0)


class MatchScore(BaseModel):
    """One mentor scored against one student.

    total_score and match_percentage are derived from the breakdown on every
    access, so they can never drift from it.
    """
    mentor_id: str
    mentor_name: str
    mentor_avatar_ref: Optional[str] = None
    breakdown: ScoreBreakdown
    reasoning: list[str] = []

    @computed_field
    @property
    def total_score(self) -> float:
        b = self.breakdown
        return b.skill_match + b.availability + b.rating + b.past_success

    @computed_field
    @property
    def match_percentage(self) -> int:
        # Halves round up: 24.5 shows as 25%
        return max(0, min(100, math.floor(self.total_score + 0.5)))


# ── Response schemas ─────────────────────────────────────────────────────

class RankedMentorsResponse(BaseModel):
    student_id: str
    total: int
    matches: list[MatchScore]


class SweepResponse(BaseModel):
    deleted: int
