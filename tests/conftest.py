"""
Shared fixtures for gitch tests.

Provides in-memory commit objects and enumerators for pipeline tests, and
real throwaway repositories (built with GitPython) for the repository and
CLI tests.
"""

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest
from git import Actor, Repo
from git.objects import Commit

from shared.exceptions import DecodeError, EnumerationError
from shared.models import CommitRecord, ObjectEntry, ObjectType, User

JAN_1 = datetime(2024, 1, 1, tzinfo=timezone.utc)
JAN_5 = datetime(2024, 1, 5, tzinfo=timezone.utc)
JAN_10 = datetime(2024, 1, 10, tzinfo=timezone.utc)


def fake_commit(index: int, name: str, email: str, authored: datetime, message: str = "change"):
    """A stand-in for a GitPython commit object."""
    actor = SimpleNamespace(name=name, email=email)
    return SimpleNamespace(
        hexsha=f"{index:040x}",
        author=actor,
        authored_date=int(authored.timestamp()),
        committer=actor,
        committed_date=int(authored.timestamp()),
        message=message,
    )


class FakeEnumerator:
    """Object enumerator over a fixed list of commits.

    Every commit is followed by a tree entry so the traversal has
    non-commit objects to skip.
    """

    def __init__(self, commits, fail_after=None, malformed=()):
        self.commits = list(commits)
        self.by_sha = {c.hexsha: c for c in self.commits}
        self.fail_after = fail_after
        self.malformed = set(malformed)

    def iter_objects(self):
        for i, commit in enumerate(self.commits):
            if self.fail_after is not None and i == self.fail_after:
                raise EnumerationError("object store read failed")
            yield ObjectEntry(sha=commit.hexsha, type=ObjectType.COMMIT)
            yield ObjectEntry(sha=f"{i + 100000:040x}", type=ObjectType.TREE)

    def load_commit(self, sha):
        if sha in self.malformed:
            raise DecodeError(sha, "truncated object")
        return self.by_sha[sha]


def make_record(email: str, authored_at: datetime, name: str = None, index: int = 0) -> CommitRecord:
    user = User(name=name or email.split("@")[0], email=email)
    return CommitRecord(
        id=f"{index:040x}",
        author=user,
        authored_at=authored_at,
        committer=user,
        committed_at=authored_at,
        message="change",
    )


@pytest.fixture
def three_commits():
    """Author A on Jan 1 and Jan 10, author B on Jan 5."""
    return [
        fake_commit(1, "Alice", "a@example.com", JAN_1),
        fake_commit(2, "Bob", "b@example.com", JAN_5),
        fake_commit(3, "Alice", "a@example.com", JAN_10),
    ]


def _git_date(ts: datetime) -> str:
    return f"{int(ts.timestamp())} +0000"


def add_commit(repo: Repo, name: str, email: str, when: datetime, message: str, head: bool = True) -> Commit:
    """Write a file change and commit it with fixed author and committer dates."""
    path = Path(repo.working_tree_dir) / "history.txt"
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{message}\n")
    repo.index.add([str(path)])

    actor = Actor(name, email)
    if head:
        return repo.index.commit(
            message,
            author=actor,
            committer=actor,
            author_date=_git_date(when),
            commit_date=_git_date(when),
        )
    # Dangling commit: written to the object database but not referenced.
    return Commit.create_from_tree(
        repo,
        repo.index.write_tree(),
        message,
        parent_commits=[],
        head=False,
        author=actor,
        committer=actor,
        author_date=_git_date(when),
        commit_date=_git_date(when),
    )


@pytest.fixture
def git_repo(tmp_path):
    """A real repository with the three-commit scenario on its main branch."""
    repo = Repo.init(tmp_path / "repo")
    add_commit(repo, "Alice", "a@example.com", JAN_1, "first")
    add_commit(repo, "Bob", "b@example.com", JAN_5, "second")
    add_commit(repo, "Alice", "a@example.com", JAN_10, "third")
    yield repo
    repo.close()
