import pytest

from gitsnip.domain.services import commit_messages as cm


@pytest.mark.parametrize(
    "message, category",
    [
        (cm.create_snippet_message("Hello"), "create"),
        (cm.update_snippet_message("Hello"), "update"),
        (cm.add_file_message("a.py"), "add"),
        (cm.update_file_message("a.py"), "update"),
        (cm.delete_file_message("a.py"), "delete"),
        (cm.delete_snippet_message("abc"), "delete"),
        ("Merge pull request #1", "other"),
        ("", "other"),
    ],
)
def test_classify_message(message, category):
    assert cm.classify_message(message) == category


def test_classification_matches_substrings_in_order():
    # "Create snippet" is checked before "Add file"
    assert cm.classify_message("chore: Add file: x (Create snippet)") == "create"


def test_builders_use_known_prefixes():
    assert cm.create_snippet_message("T") == "Create snippet: T"
    assert cm.delete_snippet_message("id-1") == "Delete snippet: id-1"


def test_strip_message_prefix():
    assert cm.strip_message_prefix("Update file: main.go") == "main.go"
    assert cm.strip_message_prefix("free text") == "free text"
