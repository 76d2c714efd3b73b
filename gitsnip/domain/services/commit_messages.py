"""Commit messages written by the snippet repository.

The prefixes are display metadata only: history views use them to label a
revision, nothing correctness-relevant depends on them.
"""
from __future__ import annotations

from typing import Tuple

CREATE_SNIPPET = "Create snippet:"
UPDATE_SNIPPET = "Update snippet:"
ADD_FILE = "Add file:"
UPDATE_FILE = "Update file:"
DELETE_FILE = "Delete file:"
DELETE_SNIPPET = "Delete snippet:"

KNOWN_PREFIXES: Tuple[str, ...] = (
    CREATE_SNIPPET,
    UPDATE_SNIPPET,
    ADD_FILE,
    UPDATE_FILE,
    DELETE_FILE,
    DELETE_SNIPPET,
)

# first match wins
_CATEGORIES: Tuple[Tuple[str, str], ...] = (
    ("Create snippet", "create"),
    ("Update snippet", "update"),
    ("Add file", "add"),
    ("Update file", "update"),
    ("Delete file", "delete"),
    ("Delete snippet", "delete"),
)


def create_snippet_message(title: str) -> str:
    return f"{CREATE_SNIPPET} {title}"


def update_snippet_message(title: str) -> str:
    return f"{UPDATE_SNIPPET} {title}"


def add_file_message(filename: str) -> str:
    return f"{ADD_FILE} {filename}"


def update_file_message(filename: str) -> str:
    return f"{UPDATE_FILE} {filename}"


def delete_file_message(filename: str) -> str:
    return f"{DELETE_FILE} {filename}"


def delete_snippet_message(snippet_id: str) -> str:
    return f"{DELETE_SNIPPET} {snippet_id}"


def classify_message(message: str) -> str:
    """Map a commit message to create/update/add/delete/other."""
    text = message or ""
    for needle, category in _CATEGORIES:
        if needle in text:
            return category
    return "other"


def strip_message_prefix(message: str) -> str:
    text = message or ""
    for prefix in KNOWN_PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix):].strip()
    return text
