"""
GitHub-backed content store.

Thin async adapter over PyGithub. Every blocking PyGithub call runs in a
worker thread via ``asyncio.to_thread``; GitHub errors are translated into
the content-store error taxonomy. No retries happen here.
"""
from __future__ import annotations

import asyncio
import base64
import itertools
import logging
from typing import Any, Callable, List, Optional, TypeVar, Union

import requests
from github import Auth, Github, GithubException

from gitsnip.config import GitSnipConfig
from gitsnip.domain.entities.content import CommitDetail, CommitInfo, ContentEntry, FileContent, TreeEntry
from gitsnip.domain.entities.revision import CommitPerson, FileChange
from gitsnip.domain.errors import ConflictError, ContentStoreError, NotFoundError, RemoteError
from gitsnip.domain.interfaces.content_store_interface import IContentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _error_message(exc: GithubException) -> str:
    data = getattr(exc, "data", None)
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return str(exc)


def translate_github_error(exc: GithubException, path: Optional[str] = None) -> ContentStoreError:
    """Map a GitHub API failure to NotFound/Conflict/Remote."""
    status = getattr(exc, "status", None)
    message = _error_message(exc)
    if status == 404:
        return NotFoundError(message, path=path)
    if status == 409:
        return ConflictError(message, path=path)
    # "sha" wasn't supplied / does not match
    if status == 422 and "sha" in message.lower():
        return ConflictError(message, path=path)
    return RemoteError(message, path=path, status=status)


def _person(git_author: Any) -> CommitPerson:
    if git_author is None:
        return CommitPerson()
    return CommitPerson(
        name=getattr(git_author, "name", "") or "",
        email=getattr(git_author, "email", "") or "",
        date=getattr(git_author, "date", None),
    )


class GitHubContentStore(IContentStore):
    """IContentStore over one repository and branch."""

    def __init__(self, repo: Any, branch: str = "main") -> None:
        self._repo = repo
        self._branch = branch

    async def _run(self, fn: Callable[[], T], *, path: Optional[str] = None) -> T:
        try:
            return await asyncio.to_thread(fn)
        except GithubException as exc:
            raise translate_github_error(exc, path) from exc
        except requests.RequestException as exc:
            raise RemoteError(f"GitHub request failed: {exc}", path=path) from exc

    async def read_path(self, path: str, ref: Optional[str] = None) -> Union[FileContent, List[ContentEntry]]:
        target_ref = ref or self._branch
        logger.debug("[GitHub API] get_contents %s@%s", path, target_ref)
        result = await self._run(lambda: self._repo.get_contents(path, ref=target_ref), path=path)
        if isinstance(result, list):
            return [ContentEntry(name=c.name, path=c.path, type=c.type, sha=c.sha) for c in result]
        if getattr(result, "type", "file") != "file":
            raise NotFoundError(f"{path} is not a regular file", path=path)
        if (result.encoding or "") == "none":
            # files above 1MB come back without inline content
            content = await self.get_blob(result.sha)
        else:
            content = result.decoded_content
        return FileContent(
            name=result.name,
            path=result.path,
            sha=result.sha,
            content=content,
            encoding=result.encoding or "base64",
        )

    async def write_file(
        self,
        path: str,
        content: str,
        message: str,
        branch: Optional[str] = None,
        expected_hash: Optional[str] = None,
    ) -> str:
        target = branch or self._branch
        if expected_hash:
            logger.debug("[GitHub API] update_file %s", path)
            result = await self._run(
                lambda: self._repo.update_file(path, message, content, expected_hash, branch=target),
                path=path,
            )
        else:
            logger.debug("[GitHub API] create_file %s", path)
            result = await self._run(
                lambda: self._repo.create_file(path, message, content, branch=target),
                path=path,
            )
        return result["content"].sha

    async def delete_file(self, path: str, message: str, hash: str, branch: Optional[str] = None) -> None:
        target = branch or self._branch
        logger.debug("[GitHub API] delete_file %s", path)
        await self._run(lambda: self._repo.delete_file(path, message, hash, branch=target), path=path)

    async def list_history(self, path: str, limit: int) -> List[CommitInfo]:
        def _fetch() -> List[Any]:
            commits = self._repo.get_commits(sha=self._branch, path=path)
            return list(itertools.islice(commits, max(0, int(limit))))

        commits = await self._run(_fetch, path=path)
        return [
            CommitInfo(
                sha=c.sha,
                message=c.commit.message,
                author=_person(c.commit.author),
                committer=_person(c.commit.committer),
                html_url=getattr(c, "html_url", "") or "",
            )
            for c in commits
        ]

    async def get_commit_detail(self, sha: str) -> CommitDetail:
        def _fetch() -> CommitDetail:
            commit = self._repo.get_commit(sha)
            return CommitDetail(
                sha=commit.sha,
                parent_shas=[p.sha for p in commit.parents],
                files=[
                    FileChange(
                        filename=f.filename,
                        status=f.status,
                        additions=f.additions or 0,
                        deletions=f.deletions or 0,
                        patch=f.patch,
                        previous_filename=f.previous_filename,
                    )
                    for f in commit.files
                ],
            )

        return await self._run(_fetch)

    async def get_tree_recursive(self, sha: str) -> List[TreeEntry]:
        tree = await self._run(lambda: self._repo.get_git_tree(sha, recursive=True))
        return [TreeEntry(path=e.path, object_id=e.sha, type=e.type) for e in tree.tree]

    async def get_blob(self, object_id: str) -> bytes:
        blob = await self._run(lambda: self._repo.get_git_blob(object_id))
        if (blob.encoding or "") == "base64":
            return base64.b64decode(blob.content)
        return (blob.content or "").encode("utf-8")


class GitHubContentStoreFactory:
    """Builds a store per credential.

    The viewer's delegated token wins; otherwise the configured service token;
    otherwise anonymous access (public repositories only).
    """

    def __init__(self, config: GitSnipConfig, github_cls: Callable[..., Any] = Github) -> None:
        self._config = config
        self._github_cls = github_cls

    def client_for(self, credential: Optional[str]) -> Any:
        token = credential or self._config.GITHUB_TOKEN
        kwargs = {"base_url": self._config.GITHUB_API_URL, "timeout": self._config.GITHUB_TIMEOUT}
        if token:
            return self._github_cls(auth=Auth.Token(token), **kwargs)
        return self._github_cls(**kwargs)

    def __call__(self, credential: Optional[str] = None) -> GitHubContentStore:
        client = self.client_for(credential)
        repo = client.get_repo(self._config.repository_full_name, lazy=True)
        return GitHubContentStore(repo, branch=self._config.GITHUB_BRANCH)
