"""Webapp routes package.

Available Blueprints:
- snippets_bp: /api/snippets endpoints
"""

from webapp.routes.snippets_routes import snippets_bp

__all__ = [
    "snippets_bp",
]
