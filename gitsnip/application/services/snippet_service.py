from __future__ import annotations

from typing import List, Optional

from gitsnip.application.dto.snippet_input_dto import SnippetInputDTO, Viewer
from gitsnip.application.services.access_policy import AccessPolicy
from gitsnip.domain.entities.revision import Diff, Revision
from gitsnip.domain.entities.snippet import Snippet
from gitsnip.domain.errors import AuthenticationRequiredError, PermissionDeniedError
from gitsnip.domain.interfaces.snippet_repository_interface import IRevisionReader, ISnippetRepository


class SnippetService:
    """Application service orchestrating snippet operations.

    Thin orchestration over the repositories: visibility filtering and write
    gating live here, persistence does not.
    """

    def __init__(
        self,
        snippet_repository: ISnippetRepository,
        revision_reader: IRevisionReader,
        access_policy: Optional[AccessPolicy] = None,
    ) -> None:
        self._repo = snippet_repository
        self._revisions = revision_reader
        self._policy = access_policy or AccessPolicy()

    def is_authorized(self, viewer: Viewer) -> bool:
        return self._policy.is_authorized(viewer.username)

    def require_writer(self, viewer: Viewer) -> str:
        if not viewer.username or not viewer.credential:
            raise AuthenticationRequiredError("sign in required")
        if not self.is_authorized(viewer):
            raise PermissionDeniedError(f"{viewer.username} may not modify snippets")
        return viewer.credential

    def _check_visible(self, snippet: Snippet, viewer: Viewer) -> None:
        if not snippet.is_public and not self.is_authorized(viewer):
            raise PermissionDeniedError("snippet is private")

    # ---------- queries ----------
    async def list_snippets(self, viewer: Viewer) -> List[Snippet]:
        snippets = await self._repo.list(viewer.credential)
        if self.is_authorized(viewer):
            return snippets
        return [s for s in snippets if s.is_public]

    async def get_snippet(self, snippet_id: str, viewer: Viewer) -> Optional[Snippet]:
        snippet = await self._repo.get(snippet_id, viewer.credential)
        if snippet is None:
            return None
        self._check_visible(snippet, viewer)
        return snippet

    async def list_revisions(self, snippet_id: str, viewer: Viewer, limit: int = 50) -> Optional[List[Revision]]:
        # access is decided by the snippet's current visibility
        if await self.get_snippet(snippet_id, viewer) is None:
            return None
        return await self._revisions.list_revisions(snippet_id, limit=limit, credential=viewer.credential)

    async def get_revision(self, snippet_id: str, sha: str, viewer: Viewer) -> Optional[Snippet]:
        if await self.get_snippet(snippet_id, viewer) is None:
            return None
        return await self._revisions.get_snapshot(snippet_id, sha, credential=viewer.credential)

    async def get_revision_diff(self, snippet_id: str, sha: str, viewer: Viewer) -> Optional[Diff]:
        if await self.get_snippet(snippet_id, viewer) is None:
            return None
        return await self._revisions.get_diff(snippet_id, sha, credential=viewer.credential)

    # ---------- commands ----------
    async def create_snippet(self, dto: SnippetInputDTO, viewer: Viewer) -> Snippet:
        credential = self.require_writer(viewer)
        return await self._repo.create(dto, credential)

    async def update_snippet(self, snippet_id: str, dto: SnippetInputDTO, viewer: Viewer) -> Optional[Snippet]:
        credential = self.require_writer(viewer)
        return await self._repo.update(snippet_id, dto, credential)

    async def delete_snippet(self, snippet_id: str, viewer: Viewer) -> bool:
        credential = self.require_writer(viewer)
        return await self._repo.delete(snippet_id, credential)
