"""HTML documents handed to the offline full-text indexer, one per public snippet."""
from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Iterable, List

from gitsnip.domain.entities.snippet import Snippet

SNIPPET_URL_PREFIX = "/snippet/"


@dataclass
class SearchDocument:
    url: str
    snippet_id: str
    html: str

    @property
    def filename(self) -> str:
        return f"{self.snippet_id}.html"


def render_search_document(snippet: Snippet) -> str:
    title = escape(snippet.title)
    description = escape(snippet.description or "")
    content = "\n\n".join(f.code for f in snippet.files)
    return (
        "<html>\n"
        "  <head>\n"
        f"    <title>{title}</title>\n"
        f'    <meta name="description" content="{description}">\n'
        "  </head>\n"
        "  <body>\n"
        f"    <h1>{title}</h1>\n"
        f"    <p>{description}</p>\n"
        f"    <pre><code>{escape(content, quote=False)}</code></pre>\n"
        "  </body>\n"
        "</html>\n"
    )


def build_search_documents(snippets: Iterable[Snippet]) -> List[SearchDocument]:
    """Private snippets are never indexed."""
    return [
        SearchDocument(url=f"{SNIPPET_URL_PREFIX}{s.id}", snippet_id=s.id, html=render_search_document(s))
        for s in snippets
        if s.is_public
    ]
