"""
Snippet codec
=============

Converts snippet metadata to and from ``index.md``: a YAML front-matter block
followed by an empty body. File contents never live in the index; each file
is a sibling of ``index.md`` in the snippet directory.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, List, Optional

import yaml

from gitsnip.domain.entities.snippet import Snippet, format_timestamp, utc_now
from gitsnip.domain.errors import SnippetDecodeError
from gitsnip.domain.services.language_detector import detect_language

INDEX_FILENAME = "index.md"
FRONTMATTER_DELIMITER = "---"


@dataclass
class IndexFileEntry:
    filename: str
    language: str


@dataclass
class IndexDocument:
    """Decoded front-matter of ``index.md``."""

    title: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    is_public: bool = True
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    files: List[IndexFileEntry] = field(default_factory=list)

    def language_for(self, filename: str) -> Optional[str]:
        for entry in self.files:
            if entry.filename == filename:
                return entry.language
        return None


def encode_index(snippet: Snippet) -> str:
    """Render the ``index.md`` text for a snippet."""
    data: Dict[str, Any] = {
        "title": snippet.title,
        "description": snippet.description or "",
        "createdAt": format_timestamp(snippet.created_at),
        "updatedAt": format_timestamp(snippet.updated_at),
        "tags": [str(t) for t in snippet.tags],
        "isPublic": bool(snippet.is_public),
        "files": [
            {"filename": f.filename, "language": f.language or detect_language(f.filename)}
            for f in snippet.files
        ],
    }
    body = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"{FRONTMATTER_DELIMITER}\n{body}{FRONTMATTER_DELIMITER}\n"


def decode_index(text: str, *, now: Callable[[], datetime] = utc_now) -> IndexDocument:
    """
    Parse ``index.md`` front-matter.

    Missing optional fields fall back to defaults: empty description, no tags,
    public unless ``isPublic`` is literally false, and the current time for
    absent or unreadable timestamps.

    Raises:
        SnippetDecodeError: no front-matter block, invalid YAML, a non-mapping
            document, a missing or blank ``title``, or a ``files`` value that
            is not a list.
    """
    data = _split_frontmatter(text)

    title = str(data.get("title") or "").strip()
    if not title:
        raise SnippetDecodeError("index 'title' is missing or blank")

    raw_files = data.get("files")
    if raw_files is None:
        raw_files = []
    if not isinstance(raw_files, list):
        raise SnippetDecodeError("index 'files' must be a list")

    files: List[IndexFileEntry] = []
    for item in raw_files:
        if not isinstance(item, dict):
            continue
        filename = str(item.get("filename") or "").strip()
        if not filename:
            continue
        language = str(item.get("language") or "").strip() or detect_language(filename)
        files.append(IndexFileEntry(filename=filename, language=language))

    raw_tags = data.get("tags")
    tags = [str(t) for t in raw_tags] if isinstance(raw_tags, list) else []

    return IndexDocument(
        title=str(data.get("title")),
        description=str(data.get("description") or ""),
        tags=tags,
        is_public=data.get("isPublic") is not False,
        created_at=parse_timestamp(data.get("createdAt")) or now(),
        updated_at=parse_timestamp(data.get("updatedAt")) or now(),
        files=files,
    )


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept YAML timestamps, dates and ISO-8601 strings (``Z`` allowed)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _split_frontmatter(text: str) -> Dict[str, Any]:
    lines = (text or "").lstrip("\ufeff").splitlines()
    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        raise SnippetDecodeError("index.md does not start with a front-matter block")
    try:
        end = next(i for i in range(1, len(lines)) if lines[i].rstrip() == FRONTMATTER_DELIMITER)
    except StopIteration:
        raise SnippetDecodeError("unterminated front-matter block") from None

    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise SnippetDecodeError(f"invalid front-matter YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SnippetDecodeError("front-matter must be a mapping")
    return data
