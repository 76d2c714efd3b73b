from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional

from gitsnip.application.dto.snippet_input_dto import SnippetInputDTO
from gitsnip.domain.entities.content import ContentEntry, FileContent
from gitsnip.domain.entities.snippet import Snippet, SnippetFile, utc_now
from gitsnip.domain.errors import ConflictError, NotFoundError, RemoteError, SnippetDecodeError
from gitsnip.domain.interfaces.content_store_interface import ContentStoreFactory, IContentStore
from gitsnip.domain.interfaces.snippet_repository_interface import ISnippetRepository
from gitsnip.domain.services import commit_messages
from gitsnip.domain.services.snippet_codec import INDEX_FILENAME, IndexDocument, decode_index, encode_index
from gitsnip.observability import emit_event


def _new_id() -> str:
    return str(uuid.uuid4())


class GitSnippetRepository(ISnippetRepository):
    """Snippet repository over a version-controlled content store.

    Each snippet is the directory ``<snippets_path>/<id>/`` holding ``index.md``
    plus one file per snippet file. Multi-step writes are issued strictly in
    order (index first, all writes before any delete) and are not rolled back
    on failure: the first error surfaces unchanged.
    """

    def __init__(
        self,
        store_factory: ContentStoreFactory,
        snippets_path: str = "snippets",
        *,
        branch: Optional[str] = None,
        now: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store_factory = store_factory
        self._root = snippets_path.strip("/")
        self._branch = branch
        self._now = now
        self._new_id = id_factory

    # ---------- paths ----------
    def _dir(self, snippet_id: str) -> str:
        return f"{self._root}/{snippet_id}"

    def _path(self, snippet_id: str, filename: str) -> str:
        return f"{self._root}/{snippet_id}/{filename}"

    @staticmethod
    def _valid_id(snippet_id: str) -> bool:
        return bool(snippet_id) and "/" not in snippet_id and snippet_id not in {".", ".."}

    async def _listing(self, store: IContentStore, snippet_id: str) -> Optional[List[ContentEntry]]:
        try:
            listing = await store.read_path(self._dir(snippet_id))
        except NotFoundError:
            return None
        if not isinstance(listing, list):
            return None
        return listing

    # ---------- queries ----------
    async def list(self, credential: Optional[str] = None) -> List[Snippet]:
        store = self._store_factory(credential)
        try:
            root = await store.read_path(self._root)
        except NotFoundError:
            return []
        if not isinstance(root, list):
            return []

        snippets: List[Snippet] = []
        skipped: List[str] = []
        for entry in root:
            if not entry.is_dir:
                continue
            snippet = await self._get_with(store, entry.name)
            if snippet is None:
                skipped.append(entry.name)
                continue
            snippets.append(snippet)

        if skipped:
            emit_event("snippets_list_skipped", severity="warning", count=len(skipped), snippet_ids=skipped)
        snippets.sort(key=lambda s: s.updated_at, reverse=True)
        return snippets

    async def get(self, snippet_id: str, credential: Optional[str] = None) -> Optional[Snippet]:
        if not self._valid_id(snippet_id):
            return None
        return await self._get_with(self._store_factory(credential), snippet_id)

    async def _get_with(self, store: IContentStore, snippet_id: str) -> Optional[Snippet]:
        try:
            listing = await self._listing(store, snippet_id)
            if listing is None:
                return None
            present: Dict[str, ContentEntry] = {e.name: e for e in listing if e.is_file}
            if INDEX_FILENAME not in present:
                return None

            index = await self._read_index(store, snippet_id)
            if index is None:
                return None

            files: List[SnippetFile] = []
            for declared in index.files:
                if declared.filename not in present:
                    continue
                try:
                    content = await store.read_path(self._path(snippet_id, declared.filename))
                except NotFoundError:
                    # deleted after the listing was taken
                    continue
                if not isinstance(content, FileContent):
                    continue
                files.append(SnippetFile(filename=declared.filename, code=content.text(), language=declared.language))
        except NotFoundError:
            return None

        if not files:
            return None
        return Snippet(
            id=snippet_id,
            title=index.title,
            description=index.description,
            tags=list(index.tags),
            is_public=index.is_public,
            created_at=index.created_at,
            updated_at=index.updated_at,
            files=files,
        )

    async def _read_index(self, store: IContentStore, snippet_id: str) -> Optional[IndexDocument]:
        content = await store.read_path(self._path(snippet_id, INDEX_FILENAME))
        if not isinstance(content, FileContent):
            return None
        try:
            return decode_index(content.text(), now=self._now)
        except SnippetDecodeError as e:
            emit_event("snippet_get_decode_failed", severity="warning", snippet_id=snippet_id, error=str(e))
            return None

    # ---------- commands ----------
    async def create(self, data: SnippetInputDTO, credential: Optional[str]) -> Snippet:
        store = self._store_factory(credential)
        now = self._now()
        snippet = Snippet(
            id=self._new_id(),
            title=data.title,
            description=data.description,
            tags=list(data.tags),
            is_public=data.is_public,
            created_at=now,
            updated_at=now,
            files=[SnippetFile(f.filename, f.code, f.resolved_language) for f in data.files],
        )
        try:
            await store.write_file(
                self._path(snippet.id, INDEX_FILENAME),
                encode_index(snippet),
                commit_messages.create_snippet_message(snippet.title),
                branch=self._branch,
            )
            for f in snippet.files:
                await store.write_file(
                    self._path(snippet.id, f.filename),
                    f.code,
                    commit_messages.add_file_message(f.filename),
                    branch=self._branch,
                )
        except (ConflictError, RemoteError) as e:
            emit_event("snippet_create_failed", severity="error", snippet_id=snippet.id, error=str(e))
            raise

        emit_event("snippet_created", snippet_id=snippet.id, files=len(snippet.files))
        return snippet

    async def update(self, snippet_id: str, data: SnippetInputDTO, credential: Optional[str]) -> Optional[Snippet]:
        if not self._valid_id(snippet_id):
            return None
        store = self._store_factory(credential)
        try:
            listing = await self._listing(store, snippet_id)
            if listing is None:
                return None
            hashes: Dict[str, Optional[str]] = {e.name: e.sha for e in listing if e.is_file}
            if INDEX_FILENAME not in hashes:
                return None
            try:
                existing = await self._read_index(store, snippet_id)
            except NotFoundError:
                return None
            if existing is None:
                return None

            snippet = Snippet(
                id=snippet_id,
                title=data.title,
                description=data.description,
                tags=list(data.tags),
                is_public=data.is_public,
                created_at=existing.created_at,
                updated_at=self._now(),
                files=[SnippetFile(f.filename, f.code, f.resolved_language) for f in data.files],
            )

            await store.write_file(
                self._path(snippet_id, INDEX_FILENAME),
                encode_index(snippet),
                commit_messages.update_snippet_message(snippet.title),
                branch=self._branch,
                expected_hash=hashes[INDEX_FILENAME],
            )
            for f in snippet.files:
                token = hashes.get(f.filename)
                if f.filename in hashes:
                    message = commit_messages.update_file_message(f.filename)
                else:
                    message = commit_messages.add_file_message(f.filename)
                await store.write_file(
                    self._path(snippet_id, f.filename),
                    f.code,
                    message,
                    branch=self._branch,
                    expected_hash=token,
                )

            wanted = set(snippet.filenames)
            removed = [name for name in hashes if name != INDEX_FILENAME and name not in wanted]
            for name in removed:
                await store.delete_file(
                    self._path(snippet_id, name),
                    commit_messages.delete_file_message(name),
                    hashes[name] or "",
                    branch=self._branch,
                )
        except (ConflictError, RemoteError) as e:
            emit_event("snippet_update_failed", severity="error", snippet_id=snippet_id, error=str(e))
            raise

        emit_event("snippet_updated", snippet_id=snippet_id, files=len(snippet.files), removed=len(removed))
        return snippet

    async def delete(self, snippet_id: str, credential: Optional[str]) -> bool:
        if not self._valid_id(snippet_id):
            return False
        store = self._store_factory(credential)
        listing = await self._listing(store, snippet_id)
        if listing is None:
            return False

        files = [e for e in listing if e.is_file]
        # index.md is always deleted last
        ordered = [e for e in files if e.name != INDEX_FILENAME] + [e for e in files if e.name == INDEX_FILENAME]
        try:
            for entry in ordered:
                if entry.name == INDEX_FILENAME:
                    message = commit_messages.delete_snippet_message(snippet_id)
                else:
                    message = commit_messages.delete_file_message(entry.name)
                await store.delete_file(entry.path, message, entry.sha or "", branch=self._branch)
        except (ConflictError, NotFoundError, RemoteError) as e:
            emit_event("snippet_delete_failed", severity="error", snippet_id=snippet_id, error=str(e))
            raise

        emit_event("snippet_deleted", snippet_id=snippet_id, files=len(ordered))
        return True
