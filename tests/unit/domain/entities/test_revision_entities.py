from datetime import datetime, timezone

from gitsnip.domain.entities.revision import CommitPerson, Diff, FileChange, Revision
from gitsnip.domain.entities.snippet import Snippet, SnippetFile, format_timestamp


def test_revision_derived_fields_and_dict():
    rev = Revision(
        sha="abc",
        message="Add file: main.py",
        author=CommitPerson("Ada", "ada@example.com", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        additions=3,
        deletions=1,
    )
    data = rev.to_dict()
    assert rev.category == "add"
    assert rev.summary == "main.py"
    assert data["stats"] == {"additions": 3, "deletions": 1, "total": 4}
    assert data["author"]["date"] == "2024-01-01T00:00:00Z"


def test_diff_root_and_rename_fields():
    diff = Diff(sha="s", files=[FileChange("b.py", "renamed", previous_filename="a.py")])
    assert diff.is_root
    data = diff.to_dict()
    assert data["parentSha"] == ""
    assert data["files"][0]["previousFilename"] == "a.py"


def test_snippet_to_dict_uses_camel_case():
    ts = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    snippet = Snippet("id1", "T", created_at=ts, updated_at=ts, files=[SnippetFile("a.py", "", "python")])
    data = snippet.to_dict()
    assert data["isPublic"] is True
    assert data["createdAt"] == "2024-05-06T07:08:09Z"
    assert data["files"] == [{"filename": "a.py", "language": "python", "code": ""}]


def test_format_timestamp_treats_naive_as_utc():
    assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00Z"
