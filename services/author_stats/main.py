"""
Author statistics service for gitch.

Opens a repository, streams every commit object through the traversal and
aggregation stages and ranks the resulting per-author statistics.
"""

import logging
from typing import List, Optional, Union

from config.settings import Settings, settings as default_settings
from shared.models import AuthorStatistic, ResultCollection, SortOrder
from services.author_stats.pipeline import run_pipeline
from services.author_stats.report import rank
from services.author_stats.repository import ObjectEnumerator, open_repository

logger = logging.getLogger(__name__)


class AuthorStatsService:
    """Core author statistics service."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    async def collect(self, repo_path: str) -> ResultCollection:
        """Aggregate per-author statistics for the repository at ``repo_path``.

        ``RepositoryOpenError`` is raised before any stage starts;
        ``EnumerationError`` after both stages have stopped.
        """
        with open_repository(repo_path) as repo:
            enumerator = ObjectEnumerator(repo)
            result = await run_pipeline(
                enumerator, capacity=self.settings.pipeline.channel_capacity
            )
        logger.info(f"Collected statistics for {result.author_count} authors in {repo_path}")
        return result

    def rank(
        self, result: ResultCollection, order: Union[SortOrder, str, None] = None
    ) -> List[AuthorStatistic]:
        """Sort the collected statistics, defaulting to the configured order."""
        return rank(result.statistics, order or self.settings.report.order)

    async def authors(
        self, repo_path: str, order: Union[SortOrder, str, None] = None
    ) -> List[AuthorStatistic]:
        result = await self.collect(repo_path)
        return self.rank(result, order)
