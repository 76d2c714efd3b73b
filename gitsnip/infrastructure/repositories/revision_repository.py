from __future__ import annotations

from typing import Dict, List, Optional

from gitsnip.domain.entities.revision import Diff, FileChange, Revision
from gitsnip.domain.entities.snippet import Snippet, SnippetFile
from gitsnip.domain.errors import ContentStoreError, NotFoundError, RemoteError, SnippetDecodeError
from gitsnip.domain.interfaces.content_store_interface import ContentStoreFactory
from gitsnip.domain.interfaces.snippet_repository_interface import IRevisionReader
from gitsnip.domain.services.language_detector import detect_language
from gitsnip.domain.services.snippet_codec import INDEX_FILENAME, decode_index
from gitsnip.observability import emit_event


class GitRevisionReader(IRevisionReader):
    """History, snapshots and diffs of a snippet directory.

    Listing costs one commit-detail fetch per revision, a snapshot one blob
    fetch per file; nothing is cached between calls.
    """

    def __init__(
        self,
        store_factory: ContentStoreFactory,
        snippets_path: str = "snippets",
        *,
        max_revisions: int = 50,
    ) -> None:
        self._store_factory = store_factory
        self._root = snippets_path.strip("/")
        self._max_revisions = max(1, int(max_revisions))

    def _dir(self, snippet_id: str) -> str:
        return f"{self._root}/{snippet_id}"

    def clamp_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self._max_revisions
        return max(1, min(int(limit), self._max_revisions))

    async def list_revisions(self, snippet_id: str, limit: int = 50, credential: Optional[str] = None) -> List[Revision]:
        store = self._store_factory(credential)
        try:
            history = await store.list_history(self._dir(snippet_id), self.clamp_limit(limit))
            revisions: List[Revision] = []
            for commit in history:
                detail = await store.get_commit_detail(commit.sha)
                revisions.append(
                    Revision(
                        sha=commit.sha,
                        message=commit.message,
                        author=commit.author,
                        committer=commit.committer,
                        additions=detail.additions,
                        deletions=detail.deletions,
                        html_url=commit.html_url,
                    )
                )
        except NotFoundError:
            return []
        except RemoteError as e:
            emit_event("revisions_list_failed", severity="error", snippet_id=snippet_id, error=str(e))
            raise

        emit_event("revisions_listed", severity="debug", snippet_id=snippet_id, count=len(revisions))
        return revisions

    async def get_snapshot(self, snippet_id: str, sha: str, credential: Optional[str] = None) -> Optional[Snippet]:
        """Rebuild the snippet as it was at ``sha`` from the tree alone.

        Languages are recomputed from file extensions; the historical index only
        contributes metadata and the file order.
        """
        store = self._store_factory(credential)
        prefix = f"{self._dir(snippet_id)}/"
        try:
            tree = await store.get_tree_recursive(sha)
            # direct children of the snippet directory, in tree order
            blobs: Dict[str, str] = {}
            for entry in tree:
                if entry.type != "blob" or not entry.path.startswith(prefix):
                    continue
                name = entry.path[len(prefix):]
                if name and "/" not in name:
                    blobs[name] = entry.object_id
            if INDEX_FILENAME not in blobs:
                return None

            raw_index = await store.get_blob(blobs[INDEX_FILENAME])
            try:
                index = decode_index(raw_index.decode("utf-8", errors="replace"))
            except SnippetDecodeError as e:
                emit_event("snapshot_decode_failed", severity="warning", snippet_id=snippet_id, sha=sha, error=str(e))
                return None

            declared = [f.filename for f in index.files if f.filename in blobs]
            names = declared + [n for n in blobs if n != INDEX_FILENAME and n not in declared]
            files: List[SnippetFile] = []
            for name in names:
                data = await store.get_blob(blobs[name])
                files.append(
                    SnippetFile(
                        filename=name,
                        code=data.decode("utf-8", errors="replace"),
                        language=detect_language(name),
                    )
                )
        except NotFoundError:
            return None
        except RemoteError as e:
            emit_event("snapshot_failed", severity="error", snippet_id=snippet_id, sha=sha, error=str(e))
            raise

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

    async def get_diff(self, snippet_id: str, sha: str, credential: Optional[str] = None) -> Optional[Diff]:
        """Changes of ``sha`` against its first parent; None when the fetch fails.

        Files are not scoped to the snippet directory. A root commit has an
        empty ``parent_sha`` and every file reported as added.
        """
        store = self._store_factory(credential)
        try:
            detail = await store.get_commit_detail(sha)
        except ContentStoreError as e:
            severity = "error" if isinstance(e, RemoteError) else "warning"
            emit_event("revision_diff_failed", severity=severity, snippet_id=snippet_id, sha=sha, error=str(e))
            return None

        parent = detail.parent_shas[0] if detail.parent_shas else ""
        files = list(detail.files)
        if not parent:
            files = [
                FileChange(
                    filename=f.filename,
                    status="added",
                    additions=f.additions,
                    deletions=f.deletions,
                    patch=f.patch,
                    previous_filename=None,
                )
                for f in files
            ]
        return Diff(sha=detail.sha, parent_sha=parent, files=files)
