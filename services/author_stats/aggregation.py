"""
Aggregation stage: commit channel -> per-author statistics.

The email -> statistic mapping is owned by this stage alone; records
arrive through the channel and nothing else touches the mapping.
"""

import asyncio
import logging
from typing import Dict, Iterable, Optional

from shared.channel import CommitChannel
from shared.models import AuthorStatistic, CommitRecord, ResultCollection

logger = logging.getLogger(__name__)


class AuthorAggregator:
    """Folds commit records into one ``AuthorStatistic`` per author email."""

    def __init__(self):
        self._by_email: Dict[str, AuthorStatistic] = {}
        self.records_seen = 0

    def __len__(self):
        return len(self._by_email)

    def add(self, record: CommitRecord) -> AuthorStatistic:
        """Fold one record into the statistic for its author email.

        Only a new minimum or, failing that, a new maximum moves a bound;
        a timestamp between the current bounds leaves both untouched.
        """
        self.records_seen += 1
        stat = self._by_email.get(record.author.email)
        if stat is None:
            stat = AuthorStatistic.start(record)
            self._by_email[record.author.email] = stat
            return stat

        first_seen, last_seen = stat.first_seen, stat.last_seen
        if record.authored_at < first_seen:
            first_seen = record.authored_at
        elif record.authored_at > last_seen:
            last_seen = record.authored_at

        stat = stat.model_copy(update={
            "commit_count": stat.commit_count + 1,
            "first_seen": first_seen,
            "last_seen": last_seen,
            "span": last_seen - first_seen,
        })
        self._by_email[record.author.email] = stat
        return stat

    def add_all(self, records: Iterable[CommitRecord]) -> "AuthorAggregator":
        for record in records:
            self.add(record)
        return self

    def get(self, email: str) -> Optional[AuthorStatistic]:
        return self._by_email.get(email)

    def result(self) -> ResultCollection:
        """Snapshot the mapping into an immutable result collection."""
        return ResultCollection(
            statistics=tuple(self._by_email.values()),
            total_commits=self.records_seen,
        )


class AggregationStage:
    """Sole consumer of the commit channel."""

    def __init__(self, channel: CommitChannel, result: asyncio.Future):
        self.channel = channel
        self.result = result
        self.aggregator = AuthorAggregator()

    async def run(self) -> ResultCollection:
        """Consume until end-of-stream, then hand off the result exactly once."""
        async for record in self.channel:
            self.aggregator.add(record)

        collection = self.aggregator.result()
        logger.info(
            f"Aggregated {collection.total_commits} commits from {collection.author_count} authors"
        )
        self.result.set_result(collection)
        return collection
