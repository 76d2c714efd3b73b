from __future__ import annotations

# Public API of the composition root
from .container import build_snippet_service, get_snippet_service, reset_snippet_service  # noqa: F401
