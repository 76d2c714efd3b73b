from __future__ import annotations

from typing import List, Optional

from gitsnip.domain.entities.revision import PatchLine

CONTEXT = "context"
ADDITION = "addition"
DELETION = "deletion"


def classify_patch_line(line: str) -> Optional[PatchLine]:
    """Type one unified-patch line by its first character.

    Hunk headers are kept whole as context; other prefixes are stripped.
    Anything else (the no-newline marker included) yields None.
    """
    if line.startswith("@@"):
        return PatchLine(CONTEXT, line)
    if line.startswith("+"):
        return PatchLine(ADDITION, line[1:])
    if line.startswith("-"):
        return PatchLine(DELETION, line[1:])
    if line.startswith(" "):
        return PatchLine(CONTEXT, line[1:])
    return None


def parse_patch(patch: Optional[str]) -> List[PatchLine]:
    if not patch:
        return []
    lines: List[PatchLine] = []
    for raw in patch.split("\n"):
        typed = classify_patch_line(raw.rstrip("\r"))
        if typed is not None:
            lines.append(typed)
    return lines
