"""
Object database access for the author statistics service.

Wraps GitPython to:
- Open a repository at an exact path
- List every object in the object database with its type
- Load a single commit object by id
"""

import logging
import os
from typing import Iterator

from git import Repo, GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects import Commit

from shared.exceptions import DecodeError, EnumerationError, RepositoryOpenError
from shared.models import ObjectEntry, ObjectType

logger = logging.getLogger(__name__)

SHA1_HEX_LENGTH = 40


def open_repository(path: str) -> Repo:
    """Open the repository rooted at ``path``.

    Parent directories are not searched, the path must be the repository
    root (or the git directory of a bare repository).
    """
    if not os.path.exists(path):
        raise RepositoryOpenError(path, "path does not exist")
    try:
        repo = Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise RepositoryOpenError(path, "not a git repository") from e
    except OSError as e:
        raise RepositoryOpenError(path, str(e)) from e
    logger.info(f"Opened repository at {repo.git_dir}")
    return repo


class ObjectEnumerator:
    """Lists and reads objects from a repository's object database."""

    def __init__(self, repo: Repo):
        self.repo = repo

    def iter_objects(self) -> Iterator[ObjectEntry]:
        """Yield every object in the object database, reachable or not.

        Objects come back in whatever order git lists them.
        """
        try:
            proc = self.repo.git.cat_file("--batch-check", "--batch-all-objects", as_process=True)
        except (GitCommandError, OSError) as e:
            raise EnumerationError(f"Failed to list objects: {e}") from e

        try:
            for raw in proc.stdout:
                yield self._parse_entry(raw)
        except OSError as e:
            raise EnumerationError(f"Failed to read object list: {e}") from e

        try:
            proc.wait()
        except GitCommandError as e:
            raise EnumerationError(f"Object listing failed: {e}") from e

    @staticmethod
    def _parse_entry(raw) -> ObjectEntry:
        line = raw.decode("ascii", errors="replace") if isinstance(raw, bytes) else raw
        parts = line.split()
        if len(parts) < 2:
            raise EnumerationError(f"Unexpected object listing line: {line.strip()!r}")
        return ObjectEntry(sha=parts[0], type=ObjectType.parse(parts[1]))

    def load_commit(self, sha: str) -> Commit:
        """Load and parse the commit object ``sha``.

        Raises ``DecodeError`` for an object that cannot be parsed as a
        commit and ``EnumerationError`` when the object store itself fails.
        """
        if len(sha) != SHA1_HEX_LENGTH:
            raise EnumerationError(
                f"Unsupported object id {sha}: only SHA-1 repositories can be read"
            )
        try:
            commit = Commit(self.repo, bytes.fromhex(sha))
            # Attribute access triggers the read and parse of the raw object.
            commit.message
        except (GitCommandError, OSError) as e:
            raise EnumerationError(f"Failed to read object {sha}: {e}") from e
        except (ValueError, TypeError, UnicodeDecodeError) as e:
            raise DecodeError(sha, str(e)) from e
        return commit
