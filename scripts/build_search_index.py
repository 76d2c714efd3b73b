#!/usr/bin/env python3
"""
Export one HTML document per public snippet for the offline full-text indexer.

Writes ``<id>.html`` files plus ``manifest.json`` (``url`` -> ``file``) into the
output directory. Uses the service token from GITHUB_TOKEN.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

# project root on sys.path when run as a plain script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gitsnip.application.services.search_documents import SearchDocument, build_search_documents  # noqa: E402
from gitsnip.config import load_config  # noqa: E402
from gitsnip.infrastructure.github.content_store import GitHubContentStoreFactory  # noqa: E402
from gitsnip.infrastructure.repositories.snippet_repository import GitSnippetRepository  # noqa: E402
from gitsnip.observability import emit_event, setup_structlog_logging  # noqa: E402


def write_documents(documents: List[SearchDocument], out_dir: str) -> str:
    os.makedirs(out_dir, exist_ok=True)
    manifest = []
    for doc in documents:
        with open(os.path.join(out_dir, doc.filename), "w", encoding="utf-8") as fh:
            fh.write(doc.html)
        manifest.append({"url": doc.url, "file": doc.filename})
    manifest_path = os.path.join(out_dir, "manifest.json")
    with open(manifest_path, "w", encoding="utf-8") as fh:
        json.dump(manifest, fh, ensure_ascii=False, indent=2)
    return manifest_path


async def _collect(out_dir: str) -> int:
    cfg = load_config()
    repo = GitSnippetRepository(GitHubContentStoreFactory(cfg), cfg.SNIPPETS_PATH)
    snippets = await repo.list(cfg.GITHUB_TOKEN)
    documents = build_search_documents(snippets)
    write_documents(documents, out_dir)
    emit_event("search_index_exported", total=len(snippets), indexed=len(documents), out_dir=out_dir)
    return len(documents)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Export public snippets as HTML documents for the search indexer")
    p.add_argument("--out", default=os.path.join("public", "search"), help="output directory")
    p.add_argument("--log-level", default="INFO")
    args = p.parse_args(argv)

    setup_structlog_logging(args.log_level)
    try:
        count = asyncio.run(_collect(args.out))
    except Exception as e:
        emit_event("search_index_export_failed", severity="error", error=str(e))
        return 1
    print(f"Indexed {count} snippets into {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
