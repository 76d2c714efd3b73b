"""Value types exchanged with the remote content store.

They mirror the shapes of the GitHub contents/git-data APIs closely enough
for the repository layer, without leaking any client library types.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from gitsnip.domain.entities.revision import CommitPerson, FileChange


@dataclass(frozen=True)
class ContentEntry:
    """One entry of a directory listing."""

    name: str
    path: str
    type: str  # file / dir
    sha: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


@dataclass(frozen=True)
class FileContent:
    """A single file read at some ref."""

    name: str
    path: str
    sha: str
    content: bytes
    encoding: str = "utf-8"

    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class TreeEntry:
    """A node of a recursive tree listing."""

    path: str
    object_id: str
    type: str  # blob / tree


@dataclass
class CommitInfo:
    """Commit descriptor as returned by a history query."""

    sha: str
    message: str
    author: CommitPerson = field(default_factory=CommitPerson)
    committer: CommitPerson = field(default_factory=CommitPerson)
    html_url: str = ""


@dataclass
class CommitDetail:
    """Parents and per-file changes of one commit."""

    sha: str
    parent_shas: List[str] = field(default_factory=list)
    files: List[FileChange] = field(default_factory=list)

    @property
    def additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)
