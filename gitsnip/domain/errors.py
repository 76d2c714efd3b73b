from __future__ import annotations

from typing import Optional


class GitSnipError(Exception):
    """Base class for errors raised by this package."""


class ContentStoreError(GitSnipError):
    """Failure reported by the remote content store."""

    def __init__(self, message: str = "", *, path: Optional[str] = None):
        super().__init__(message or self.__class__.__name__)
        self.path = path


class NotFoundError(ContentStoreError):
    """Path, commit or blob does not exist."""


class ConflictError(ContentStoreError):
    """Expected content hash did not match the current state."""


class RemoteError(ContentStoreError):
    """Transport, auth or rate-limit failure."""

    def __init__(self, message: str = "", *, path: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message, path=path)
        self.status = status


class SnippetDecodeError(GitSnipError, ValueError):
    """index.md could not be parsed."""


class AuthenticationRequiredError(GitSnipError):
    """The operation needs a signed-in viewer with a credential."""


class PermissionDeniedError(GitSnipError):
    """The viewer is signed in but not allowed to perform the operation."""
