from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from gitsnip.domain.entities.snippet import format_timestamp
from gitsnip.domain.services.commit_messages import classify_message, strip_message_prefix


@dataclass
class CommitPerson:
    """Author or committer of a commit."""

    name: str = ""
    email: str = ""
    date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "date": format_timestamp(self.date) if self.date else None,
        }


@dataclass
class Revision:
    """A commit that touched a snippet directory, with aggregate stats."""

    sha: str
    message: str
    author: CommitPerson = field(default_factory=CommitPerson)
    committer: CommitPerson = field(default_factory=CommitPerson)
    additions: int = 0
    deletions: int = 0
    html_url: str = ""

    @property
    def category(self) -> str:
        return classify_message(self.message)

    @property
    def summary(self) -> str:
        return strip_message_prefix(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sha": self.sha,
            "message": self.message,
            "summary": self.summary,
            "category": self.category,
            "author": self.author.to_dict(),
            "committer": self.committer.to_dict(),
            "stats": {
                "additions": self.additions,
                "deletions": self.deletions,
                "total": self.additions + self.deletions,
            },
            "htmlUrl": self.html_url,
        }


@dataclass
class PatchLine:
    """A typed line of a unified patch."""

    kind: str  # context / addition / deletion
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "content": self.content}


@dataclass
class FileChange:
    """Per-file change record of a commit, as reported by the store."""

    filename: str
    status: str  # added / removed / modified / renamed
    additions: int = 0
    deletions: int = 0
    patch: Optional[str] = None
    previous_filename: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "filename": self.filename,
            "status": self.status,
            "additions": self.additions,
            "deletions": self.deletions,
            "patch": self.patch,
        }
        if self.previous_filename:
            data["previousFilename"] = self.previous_filename
        return data


@dataclass
class Diff:
    """Changes introduced by ``sha`` relative to its first parent."""

    sha: str
    parent_sha: str = ""
    files: List[FileChange] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return not self.parent_sha

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sha": self.sha,
            "parentSha": self.parent_sha,
            "files": [f.to_dict() for f in self.files],
        }
