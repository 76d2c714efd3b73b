from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from gitsnip.application.services.snippet_service import SnippetService
    from gitsnip.config import GitSnipConfig
    from gitsnip.domain.interfaces.content_store_interface import ContentStoreFactory


_snippet_service_singleton = None  # type: Optional["SnippetService"]
_singleton_lock = threading.Lock()


def build_snippet_service(
    config: Optional["GitSnipConfig"] = None,
    store_factory: Optional["ContentStoreFactory"] = None,
) -> "SnippetService":
    """Wire repositories, reader and access policy from settings.

    ``store_factory`` replaces the GitHub-backed store (tests pass an
    in-memory one).
    """
    from gitsnip.application.services.access_policy import AccessPolicy
    from gitsnip.application.services.snippet_service import SnippetService
    from gitsnip.config import get_config
    from gitsnip.infrastructure.github.content_store import GitHubContentStoreFactory
    from gitsnip.infrastructure.repositories.revision_repository import GitRevisionReader
    from gitsnip.infrastructure.repositories.snippet_repository import GitSnippetRepository

    cfg = config or get_config()
    factory = store_factory or GitHubContentStoreFactory(cfg)
    return SnippetService(
        snippet_repository=GitSnippetRepository(factory, cfg.SNIPPETS_PATH),
        revision_reader=GitRevisionReader(factory, cfg.SNIPPETS_PATH, max_revisions=cfg.REVISIONS_LIMIT),
        access_policy=AccessPolicy(cfg.ALLOWED_GITHUB_USERS),
    )


def get_snippet_service() -> "SnippetService":
    """
    Composition Root: build and return a singleton SnippetService.
    Keeps construction inside infrastructure, so routes only depend on the application layer.
    """
    global _snippet_service_singleton
    if _snippet_service_singleton is not None:
        return _snippet_service_singleton

    # Ensure singleton creation is thread-safe under concurrent first requests
    with _singleton_lock:
        if _snippet_service_singleton is None:
            _snippet_service_singleton = build_snippet_service()
        return _snippet_service_singleton


def reset_snippet_service() -> None:
    global _snippet_service_singleton
    with _singleton_lock:
        _snippet_service_singleton = None
