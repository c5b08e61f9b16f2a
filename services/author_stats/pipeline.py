"""
Wires the traversal and aggregation stages together.

    enumerator -> TraversalStage -> CommitChannel -> AggregationStage -> Future
"""

import asyncio
import logging
from typing import Optional

from config.settings import settings
from shared.channel import CommitChannel
from shared.models import ResultCollection
from services.author_stats.aggregation import AggregationStage
from services.author_stats.traversal import TraversalStage

logger = logging.getLogger(__name__)


async def run_pipeline(enumerator, capacity: Optional[int] = None) -> ResultCollection:
    """Run both stages concurrently and return the aggregated result.

    A failure in the traversal stage is re-raised once both stages have
    finished; no partial result is returned in that case.
    """
    channel = CommitChannel(capacity or settings.pipeline.channel_capacity)
    result: asyncio.Future = asyncio.get_running_loop().create_future()

    traversal = TraversalStage(enumerator, channel)
    aggregation = AggregationStage(channel, result)

    outcomes = await asyncio.gather(traversal.run(), aggregation.run(), return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome

    collection = await result
    logger.debug(
        f"Pipeline complete: {traversal.commits_published} published, "
        f"{collection.total_commits} aggregated"
    )
    return collection
