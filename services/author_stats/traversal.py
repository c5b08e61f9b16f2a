"""
Traversal stage: object database -> commit channel.

Walks the full object listing, decodes every commit-typed object into a
``CommitRecord`` and publishes it. The object store is read from a worker
thread; publishing hands records back to the event loop and blocks the
worker while the channel is full.
"""

import asyncio
import logging
from datetime import datetime, timezone

from shared.channel import CommitChannel
from shared.exceptions import DecodeError, EnumerationError
from shared.models import CommitRecord, ObjectType, User

logger = logging.getLogger(__name__)


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def commit_to_record(commit) -> CommitRecord:
    """Build a ``CommitRecord`` from a GitPython commit object."""
    return CommitRecord(
        id=commit.hexsha,
        author=User(name=_text(commit.author.name), email=_text(commit.author.email)),
        authored_at=datetime.fromtimestamp(commit.authored_date, tz=timezone.utc),
        committer=User(name=_text(commit.committer.name), email=_text(commit.committer.email)),
        committed_at=datetime.fromtimestamp(commit.committed_date, tz=timezone.utc),
        message=_text(commit.message),
    )


class TraversalStage:
    """Sole producer into the commit channel."""

    def __init__(self, enumerator, channel: CommitChannel):
        self.enumerator = enumerator
        self.channel = channel
        self.objects_seen = 0
        self.commits_published = 0
        self.commits_skipped = 0

    async def run(self) -> int:
        """Enumerate, publish and close the channel.

        Returns the number of commit records published. The channel is
        closed exactly once whether or not enumeration succeeds.
        """
        loop = asyncio.get_running_loop()
        try:
            await asyncio.to_thread(self._walk, loop)
        except EnumerationError as e:
            logger.error(f"Object enumeration failed after {self.commits_published} commits: {e}")
            raise
        finally:
            await self.channel.close()

        logger.info(
            f"Traversal finished: {self.objects_seen} objects, "
            f"{self.commits_published} commits published, {self.commits_skipped} skipped"
        )
        return self.commits_published

    def _walk(self, loop: asyncio.AbstractEventLoop) -> None:
        for entry in self.enumerator.iter_objects():
            self.objects_seen += 1
            if entry.type is not ObjectType.COMMIT:
                continue

            try:
                record = commit_to_record(self.enumerator.load_commit(entry.sha))
            except DecodeError as e:
                self.commits_skipped += 1
                logger.debug(f"Skipping malformed commit: {e}")
                continue
            except (ValueError, OverflowError, OSError) as e:
                # Out-of-range timestamps or invalid identity fields.
                self.commits_skipped += 1
                logger.debug(f"Skipping malformed commit: {DecodeError(entry.sha, str(e))}")
                continue

            asyncio.run_coroutine_threadsafe(self.channel.publish(record), loop).result()
            self.commits_published += 1
