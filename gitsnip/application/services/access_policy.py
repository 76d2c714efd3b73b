from __future__ import annotations

from typing import Iterable, Optional


class AccessPolicy:
    """Allow-list gate for writes and private snippets.

    An empty allow-list authorizes every signed-in user.
    """

    def __init__(self, allowed_users: Optional[Iterable[str]] = None) -> None:
        self._allowed = [u for u in (allowed_users or []) if u]

    @property
    def allowed_users(self) -> list[str]:
        return list(self._allowed)

    def is_authorized(self, username: Optional[str]) -> bool:
        if not username:
            return False
        if not self._allowed:
            return True
        return username in self._allowed
