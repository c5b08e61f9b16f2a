"""
Data models for gitch.

This module provides:
- Commit records decoded from the object database
- Per-author running statistics
- The final result collection handed to ranking and rendering
- Enumerations shared between the pipeline stages
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, computed_field


class ObjectType(Enum):
    """Types of objects stored in a git object database."""
    COMMIT = "commit"
    TREE = "tree"
    BLOB = "blob"
    TAG = "tag"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "ObjectType":
        """Map a git type name onto the enum, ``UNKNOWN`` when unrecognised."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class SortOrder(Enum):
    """Author ranking keys."""
    COUNT = "count"
    SPAN = "span"

    @classmethod
    def parse(cls, value) -> "SortOrder":
        """Anything other than ``span`` ranks by commit count."""
        if isinstance(value, cls):
            return value
        if str(value or "").strip().lower() == cls.SPAN.value:
            return cls.SPAN
        return cls.COUNT


class ObjectEntry(BaseModel):
    """One object listed by the object database."""

    model_config = ConfigDict(frozen=True)

    sha: str = Field(..., min_length=4, max_length=64, description="Object id")
    type: ObjectType = Field(..., description="Object type")


class User(BaseModel):
    """An author or committer identity."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Display name")
    email: str = Field(default="", description="Email address, the aggregation key")


def _require_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Timestamp must be timezone-aware")
    return value.astimezone(timezone.utc)


class CommitRecord(BaseModel):
    """Immutable value extracted from one commit object."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=4, max_length=64, description="Commit object id")
    author: User = Field(..., description="Commit author")
    authored_at: datetime = Field(..., description="Author timestamp (UTC)")
    committer: User = Field(..., description="Committer")
    committed_at: datetime = Field(..., description="Committer timestamp (UTC)")
    message: str = Field(default="", description="Commit message")

    @field_validator("authored_at", "committed_at")
    @classmethod
    def validate_utc(cls, v):
        """Normalize timestamps to UTC."""
        return _require_utc(v)


class AuthorStatistic(BaseModel):
    """
    Contribution statistic for one author email.

    Frozen; the aggregation stage replaces the entry for an email on every
    fold. ``span`` always equals ``last_seen - first_seen``.
    """

    model_config = ConfigDict(frozen=True)

    user: User
    commit_count: int = Field(default=1, ge=1, description="Commits authored")
    first_seen: datetime = Field(..., description="Earliest author timestamp seen")
    last_seen: datetime = Field(..., description="Latest author timestamp seen")
    span: timedelta = Field(default=timedelta(0), description="last_seen - first_seen")

    @classmethod
    def start(cls, record: CommitRecord) -> "AuthorStatistic":
        return cls(
            user=record.author,
            commit_count=1,
            first_seen=record.authored_at,
            last_seen=record.authored_at,
            span=timedelta(0),
        )

    @computed_field
    @property
    def span_ns(self) -> int:
        """Span in nanoseconds."""
        return (self.span // timedelta(microseconds=1)) * 1000


class ResultCollection(BaseModel):
    """Final per-author statistics, produced once by the aggregation stage."""

    model_config = ConfigDict(frozen=True)

    statistics: Tuple[AuthorStatistic, ...] = Field(default_factory=tuple)
    total_commits: int = Field(default=0, ge=0, description="Commit records consumed")

    @computed_field
    @property
    def author_count(self) -> int:
        return len(self.statistics)
