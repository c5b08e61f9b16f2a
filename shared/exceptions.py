"""
Error types for gitch.

Fatal errors (repository open, object enumeration) propagate to the CLI,
which reports them and exits non-zero. ``DecodeError`` is raised for a
single malformed commit object and is handled by skipping that object.
"""


class GitchError(Exception):
    """Base class for all gitch errors."""


class RepositoryOpenError(GitchError):
    """The path is missing, inaccessible or not a git repository."""

    def __init__(self, path: str, reason: str = ""):
        message = f"Failed to open repository at {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class EnumerationError(GitchError):
    """Listing or reading the object database failed mid-traversal."""


class DecodeError(GitchError):
    """A commit object could not be parsed."""

    def __init__(self, sha: str, reason: str = ""):
        super().__init__(f"Cannot decode commit {sha}: {reason}" if reason else f"Cannot decode commit {sha}")
        self.sha = sha


class ChannelClosedError(GitchError):
    """A record was published after the channel was closed."""
