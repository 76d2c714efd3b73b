import os
import sys

import pytest

# Ensure project root is on sys.path so `import gitsnip` and `import webapp` work in tests
PROJECT_ROOT = os.path.dirname(__file__)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture(autouse=True)
def _reset_singletons_between_tests():
    """Cached config and composed service must not leak between tests."""
    from gitsnip.config import reset_config
    from gitsnip.infrastructure.composition import reset_snippet_service

    reset_config()
    reset_snippet_service()
    yield
    reset_config()
    reset_snippet_service()
