from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Union

from gitsnip.domain.entities.content import CommitDetail, CommitInfo, ContentEntry, FileContent, TreeEntry


class IContentStore(ABC):
    """Contract of the remote, version-controlled file store.

    Every call is one request/response round-trip. Implementations raise
    NotFoundError, ConflictError or RemoteError from gitsnip.domain.errors
    and never retry.
    """

    @abstractmethod
    async def read_path(self, path: str, ref: Optional[str] = None) -> Union[FileContent, List[ContentEntry]]:
        raise NotImplementedError

    @abstractmethod
    async def write_file(
        self,
        path: str,
        content: str,
        message: str,
        branch: Optional[str] = None,
        expected_hash: Optional[str] = None,
    ) -> str:  # returns the new content hash
        raise NotImplementedError

    @abstractmethod
    async def delete_file(self, path: str, message: str, hash: str, branch: Optional[str] = None) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_history(self, path: str, limit: int) -> List[CommitInfo]:
        raise NotImplementedError

    @abstractmethod
    async def get_commit_detail(self, sha: str) -> CommitDetail:
        raise NotImplementedError

    @abstractmethod
    async def get_tree_recursive(self, sha: str) -> List[TreeEntry]:
        raise NotImplementedError

    @abstractmethod
    async def get_blob(self, object_id: str) -> bytes:
        raise NotImplementedError


# credential (opaque bearer token, may be None) -> store bound to it
ContentStoreFactory = Callable[[Optional[str]], IContentStore]
