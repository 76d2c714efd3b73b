from __future__ import annotations

from typing import Dict, Optional

DEFAULT_LANGUAGE = "text"

# Extension (lowercase, no dot) -> language tag
EXTENSION_LANGUAGES: Dict[str, str] = {
    # JavaScript/TypeScript
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    # Scripting
    "py": "python",
    "rb": "ruby",
    "php": "php",
    # Compiled
    "go": "go",
    "rs": "rust",
    "java": "java",
    "cpp": "cpp",
    "c": "c",
    "cs": "csharp",
    "swift": "swift",
    "kt": "kotlin",
    "scala": "scala",
    # Web
    "html": "html",
    "htm": "html",
    "css": "css",
    "scss": "scss",
    "sass": "sass",
    "less": "less",
    "styl": "stylus",
    "stylus": "stylus",
    "pug": "pug",
    "jade": "pug",
    "vue": "vue",
    # Shell
    "sh": "bash",
    "bash": "bash",
    "zsh": "bash",
    "ps1": "powershell",
    # Data/config
    "sql": "sql",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "xml": "xml",
    # Docs
    "md": "markdown",
    "txt": "text",
}


def extension_of(filename: Optional[str]) -> str:
    """Lowercased text after the last dot, or '' when there is none."""
    name = filename or ""
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def detect_language(filename: Optional[str]) -> str:
    """
    Language tag for a filename, from its extension only.

    Pure and total: unknown or missing extensions map to ``text``.
    """
    return EXTENSION_LANGUAGES.get(extension_of(filename), DEFAULT_LANGUAGE)
