from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from gitsnip.domain.entities.revision import Diff, Revision
from gitsnip.domain.entities.snippet import Snippet


class ISnippetRepository(ABC):
    """Repository interface for the Snippet domain entity.

    Domain defines the contract; infrastructure implements it.
    """

    @abstractmethod
    async def list(self, credential: Optional[str] = None) -> List[Snippet]:
        raise NotImplementedError

    @abstractmethod
    async def get(self, snippet_id: str, credential: Optional[str] = None) -> Optional[Snippet]:
        raise NotImplementedError

    @abstractmethod
    async def create(self, data: Any, credential: Optional[str]) -> Snippet:
        raise NotImplementedError

    @abstractmethod
    async def update(self, snippet_id: str, data: Any, credential: Optional[str]) -> Optional[Snippet]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, snippet_id: str, credential: Optional[str]) -> bool:
        raise NotImplementedError


class IRevisionReader(ABC):
    """Read access to a snippet's history."""

    @abstractmethod
    async def list_revisions(self, snippet_id: str, limit: int = 50, credential: Optional[str] = None) -> List[Revision]:
        raise NotImplementedError

    @abstractmethod
    async def get_snapshot(self, snippet_id: str, sha: str, credential: Optional[str] = None) -> Optional[Snippet]:
        raise NotImplementedError

    @abstractmethod
    async def get_diff(self, snippet_id: str, sha: str, credential: Optional[str] = None) -> Optional[Diff]:
        raise NotImplementedError
