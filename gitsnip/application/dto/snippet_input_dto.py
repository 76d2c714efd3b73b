from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from gitsnip.domain.services.language_detector import detect_language
from gitsnip.domain.services.snippet_codec import INDEX_FILENAME


@dataclass
class SnippetFileInput:
    filename: str
    code: str = ""
    language: Optional[str] = None

    def __post_init__(self) -> None:
        self.filename = (self.filename or "").strip()
        if not self.filename:
            raise ValueError("filename is required")
        if "/" in self.filename or "\\" in self.filename or self.filename in {".", ".."}:
            raise ValueError(f"filename must be a single path segment: {self.filename!r}")
        if self.filename == INDEX_FILENAME:
            raise ValueError(f"{INDEX_FILENAME} is reserved for snippet metadata")
        if self.code is None:
            raise ValueError("code must be present (may be empty)")

    @property
    def resolved_language(self) -> str:
        return (self.language or "").strip() or detect_language(self.filename)


@dataclass
class SnippetInputDTO:
    """Create/update command payload."""

    title: str
    files: List[SnippetFileInput]
    description: str = ""
    tags: List[str] = field(default_factory=list)
    is_public: bool = True

    def __post_init__(self) -> None:
        self.title = (self.title or "").strip()
        if not self.title:
            raise ValueError("title is required")
        if not self.files:
            raise ValueError("at least one file is required")
        seen = set()
        for f in self.files:
            if f.filename in seen:
                raise ValueError(f"duplicate filename: {f.filename}")
            seen.add(f.filename)
        self.description = self.description or ""
        self.tags = [str(t) for t in (self.tags or [])]

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SnippetInputDTO":
        """Build from a JSON body (``title, description, files, tags, isPublic``)."""
        if not isinstance(payload, dict):
            raise ValueError("payload must be an object")
        raw_files = payload.get("files") or []
        if not isinstance(raw_files, list):
            raise ValueError("files must be a list")
        files = []
        for item in raw_files:
            if not isinstance(item, dict):
                raise ValueError("each file must be an object")
            files.append(
                SnippetFileInput(
                    filename=str(item.get("filename") or ""),
                    code=str(item.get("code") or ""),
                    language=item.get("language") or None,
                )
            )
        raw_tags = payload.get("tags") or []
        if not isinstance(raw_tags, list):
            raise ValueError("tags must be a list")
        return cls(
            title=str(payload.get("title") or ""),
            description=str(payload.get("description") or ""),
            files=files,
            tags=raw_tags,
            is_public=payload.get("isPublic") is not False,
        )


@dataclass(frozen=True)
class Viewer:
    """Who is calling: a username and a delegated credential, both optional."""

    username: Optional[str] = None
    credential: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return not self.username
