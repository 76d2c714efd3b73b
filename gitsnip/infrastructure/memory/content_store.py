"""In-memory implementation of IContentStore.

Keeps a linear commit graph with git-style blob hashes, so repository logic
can be exercised end to end (history, trees, diffs, optimistic concurrency)
without a network. Every call yields to the event loop once, which lets
concurrent operations interleave the way they would against a real server.
"""
from __future__ import annotations

import asyncio
import difflib
import hashlib
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple, Union

from gitsnip.domain.entities.content import CommitDetail, CommitInfo, ContentEntry, FileContent, TreeEntry
from gitsnip.domain.entities.revision import CommitPerson, FileChange
from gitsnip.domain.entities.snippet import utc_now
from gitsnip.domain.errors import ConflictError, ContentStoreError, NotFoundError, RemoteError
from gitsnip.domain.interfaces.content_store_interface import IContentStore


def git_blob_sha(content: bytes) -> str:
    header = f"blob {len(content)}\0".encode("utf-8")
    return hashlib.sha1(header + content).hexdigest()


def _lines(content: Optional[bytes]) -> List[str]:
    if not content:
        return []
    return content.decode("utf-8", errors="replace").splitlines()


def _unified_patch(old: Optional[bytes], new: Optional[bytes]) -> Tuple[str, int, int]:
    """Return (patch, additions, deletions) without the ---/+++ header."""
    diff = list(difflib.unified_diff(_lines(old), _lines(new), lineterm=""))[2:]
    additions = sum(1 for line in diff if line.startswith("+"))
    deletions = sum(1 for line in diff if line.startswith("-"))
    return "\n".join(diff), additions, deletions


@dataclass
class _Commit:
    sha: str
    parents: List[str]
    message: str
    author: CommitPerson
    tree: Dict[str, str]  # path -> blob sha
    changes: List[FileChange] = field(default_factory=list)


class InMemoryContentStore(IContentStore):
    """Single-branch, in-process content store."""

    def __init__(
        self,
        branch: str = "main",
        *,
        author_name: str = "gitsnip",
        author_email: str = "gitsnip@localhost",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.branch = branch
        self._author_name = author_name
        self._author_email = author_email
        self._clock = clock
        self._blobs: Dict[str, bytes] = {}
        self._commits: Dict[str, _Commit] = {}
        self._head: Optional[str] = None
        self._counter = 0
        self._failure_countdown: Optional[int] = None
        self._failure: Optional[ContentStoreError] = None
        # (operation, path) for every mutation attempt that reached the store
        self.calls: List[Tuple[str, str]] = []

    # ---------- test helpers ----------
    def fail_after_writes(self, count: int, error: Optional[ContentStoreError] = None) -> None:
        """Let ``count`` more mutations succeed, then fail the next one once."""
        self._failure_countdown = max(0, int(count))
        self._failure = error or RemoteError("injected failure")

    @property
    def head(self) -> Optional[str]:
        return self._head

    def files(self) -> Dict[str, bytes]:
        """Current branch contents, path -> bytes."""
        return {path: self._blobs[sha] for path, sha in self._current_tree().items()}

    def commit_count(self) -> int:
        return len(self._commits)

    # ---------- internals ----------
    def _current_tree(self) -> Dict[str, str]:
        if self._head is None:
            return {}
        return self._commits[self._head].tree

    def _tree_at(self, ref: Optional[str]) -> Dict[str, str]:
        if ref is None or ref == self.branch:
            return self._current_tree()
        commit = self._commits.get(ref)
        if commit is None:
            raise NotFoundError(f"unknown ref {ref}")
        return commit.tree

    def _check_branch(self, branch: Optional[str]) -> None:
        if branch is not None and branch != self.branch:
            raise RemoteError(f"unknown branch {branch}", status=404)

    def _maybe_fail(self) -> None:
        if self._failure_countdown is None:
            return
        if self._failure_countdown == 0:
            error = self._failure or RemoteError("injected failure")
            self._failure_countdown = None
            self._failure = None
            raise error
        self._failure_countdown -= 1

    def _commit(self, message: str, tree: Dict[str, str], changes: List[FileChange]) -> str:
        self._counter += 1
        parents = [self._head] if self._head else []
        seed = f"{parents}\n{message}\n{self._counter}\n{sorted(tree.items())}"
        sha = hashlib.sha1(seed.encode("utf-8")).hexdigest()
        author = CommitPerson(name=self._author_name, email=self._author_email, date=self._clock())
        self._commits[sha] = _Commit(sha, parents, message, author, tree, changes)
        self._head = sha
        return sha

    @staticmethod
    def _normalize(path: str) -> str:
        return (path or "").strip("/")

    # ---------- IContentStore ----------
    async def read_path(self, path: str, ref: Optional[str] = None) -> Union[FileContent, List[ContentEntry]]:
        await asyncio.sleep(0)
        path = self._normalize(path)
        tree = self._tree_at(ref)
        if path in tree:
            sha = tree[path]
            return FileContent(name=path.rsplit("/", 1)[-1], path=path, sha=sha, content=self._blobs[sha])

        prefix = f"{path}/" if path else ""
        children: Dict[str, ContentEntry] = {}
        for file_path, sha in tree.items():
            if not file_path.startswith(prefix):
                continue
            rest = file_path[len(prefix):]
            name = rest.split("/", 1)[0]
            if "/" in rest:
                children.setdefault(name, ContentEntry(name=name, path=prefix + name, type="dir"))
            else:
                children[name] = ContentEntry(name=name, path=prefix + name, type="file", sha=sha)
        if not children:
            raise NotFoundError(f"{path} not found", path=path)
        return [children[name] for name in sorted(children)]

    async def write_file(
        self,
        path: str,
        content: str,
        message: str,
        branch: Optional[str] = None,
        expected_hash: Optional[str] = None,
    ) -> str:
        await asyncio.sleep(0)
        path = self._normalize(path)
        self.calls.append(("write", path))
        self._check_branch(branch)
        current = self._current_tree().get(path)
        if current is None and expected_hash is not None:
            raise ConflictError(f"{path} does not exist at {expected_hash}", path=path)
        if current is not None and expected_hash is None:
            raise ConflictError(f'"sha" wasn\'t supplied for {path}', path=path)
        if current is not None and current != expected_hash:
            raise ConflictError(f"{path} does not match {expected_hash}", path=path)
        self._maybe_fail()

        data = content.encode("utf-8")
        blob_sha = git_blob_sha(data)
        self._blobs[blob_sha] = data
        tree = dict(self._current_tree())
        tree[path] = blob_sha

        changes: List[FileChange] = []
        if current != blob_sha:
            old = self._blobs.get(current) if current else None
            patch, additions, deletions = _unified_patch(old, data)
            changes.append(
                FileChange(
                    filename=path,
                    status="modified" if current else "added",
                    additions=additions,
                    deletions=deletions,
                    patch=patch or None,
                )
            )
        self._commit(message, tree, changes)
        return blob_sha

    async def delete_file(self, path: str, message: str, hash: str, branch: Optional[str] = None) -> None:
        await asyncio.sleep(0)
        path = self._normalize(path)
        self.calls.append(("delete", path))
        self._check_branch(branch)
        current = self._current_tree().get(path)
        if current is None:
            raise NotFoundError(f"{path} not found", path=path)
        if current != hash:
            raise ConflictError(f"{path} does not match {hash}", path=path)
        self._maybe_fail()

        tree = dict(self._current_tree())
        del tree[path]
        patch, additions, deletions = _unified_patch(self._blobs[current], None)
        change = FileChange(
            filename=path,
            status="removed",
            additions=additions,
            deletions=deletions,
            patch=patch or None,
        )
        self._commit(message, tree, [change])

    async def list_history(self, path: str, limit: int) -> List[CommitInfo]:
        await asyncio.sleep(0)
        path = self._normalize(path)
        prefix = f"{path}/"
        history: List[CommitInfo] = []
        sha = self._head
        while sha is not None and len(history) < limit:
            commit = self._commits[sha]
            if any(c.filename == path or c.filename.startswith(prefix) for c in commit.changes):
                history.append(
                    CommitInfo(sha=commit.sha, message=commit.message, author=commit.author, committer=commit.author)
                )
            sha = commit.parents[0] if commit.parents else None
        return history

    async def get_commit_detail(self, sha: str) -> CommitDetail:
        await asyncio.sleep(0)
        commit = self._commits.get(sha)
        if commit is None:
            raise NotFoundError(f"commit {sha} not found")
        return CommitDetail(sha=commit.sha, parent_shas=list(commit.parents), files=[replace(c) for c in commit.changes])

    async def get_tree_recursive(self, sha: str) -> List[TreeEntry]:
        await asyncio.sleep(0)
        commit = self._commits.get(sha)
        if commit is None:
            raise NotFoundError(f"tree {sha} not found")
        entries: Dict[str, TreeEntry] = {}
        for path, blob_sha in commit.tree.items():
            parts = path.split("/")
            for depth in range(1, len(parts)):
                directory = "/".join(parts[:depth])
                entries.setdefault(directory, TreeEntry(path=directory, object_id="", type="tree"))
            entries[path] = TreeEntry(path=path, object_id=blob_sha, type="blob")
        return [entries[p] for p in sorted(entries)]

    async def get_blob(self, object_id: str) -> bytes:
        await asyncio.sleep(0)
        if object_id not in self._blobs:
            raise NotFoundError(f"blob {object_id} not found")
        return self._blobs[object_id]
