from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with a trailing ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class SnippetFile:
    """One named file inside a snippet."""

    filename: str
    code: str
    language: str = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "language": self.language,
            "code": self.code,
        }


@dataclass
class Snippet:
    """Domain entity: a multi-file snippet.

    The id doubles as the directory name in the backing repository.
    Kept framework-free to allow use across layers.
    """

    id: str
    title: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    is_public: bool = True
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    files: List[SnippetFile] = field(default_factory=list)

    @property
    def filenames(self) -> List[str]:
        return [f.filename for f in self.files]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "isPublic": self.is_public,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
            "files": [f.to_dict() for f in self.files],
        }
