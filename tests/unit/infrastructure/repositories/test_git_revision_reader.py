import pytest

from gitsnip.application.dto.snippet_input_dto import SnippetFileInput, SnippetInputDTO
from gitsnip.domain.entities.content import CommitDetail
from gitsnip.domain.entities.revision import FileChange
from gitsnip.domain.errors import RemoteError
from gitsnip.infrastructure.repositories.revision_repository import GitRevisionReader


def _dto(title, files):
    return SnippetInputDTO(title=title, files=[SnippetFileInput(n, c) for n, c in files])


async def _create_and_update_twice(repository, store, clock):
    created = await repository.create(_dto("v0", [("a.py", "one\n"), ("b.md", "# b\n")]), "tok")
    sha_after_create = store.head
    clock.advance(60)
    await repository.update(created.id, _dto("v1", [("a.py", "two\n"), ("c.js", "c\n")]), "tok")
    clock.advance(60)
    await repository.update(created.id, _dto("v2", [("a.py", "three\n")]), "tok")
    return created, sha_after_create


@pytest.mark.asyncio
async def test_snapshot_reflects_state_at_commit(repository, reader, store, clock):
    created, sha = await _create_and_update_twice(repository, store, clock)

    snapshot = await reader.get_snapshot(created.id, sha)

    assert snapshot is not None
    assert snapshot.title == "v0"
    assert [(f.filename, f.code, f.language) for f in snapshot.files] == [
        ("a.py", "one\n", "python"),
        ("b.md", "# b\n", "markdown"),
    ]
    current = await repository.get(created.id)
    assert current.filenames == ["a.py"]
    assert current.files[0].code == "three\n"


@pytest.mark.asyncio
async def test_snapshot_of_index_only_commit_has_no_files(repository, reader, store):
    created = await repository.create(_dto("t", [("a.py", "x")]), "tok")
    history = await store.list_history(f"snippets/{created.id}", 10)
    first = history[-1]

    snapshot = await reader.get_snapshot(created.id, first.sha)
    assert snapshot.title == "t"
    assert snapshot.files == []


@pytest.mark.asyncio
async def test_snapshot_recomputes_language_and_appends_undeclared(repository, reader, store):
    created = await repository.create(
        SnippetInputDTO(title="t", files=[SnippetFileInput("b.txt", "b", language="python")]), "tok"
    )
    await store.write_file(f"snippets/{created.id}/a.rs", "fn main() {}", "sideload")

    snapshot = await reader.get_snapshot(created.id, store.head)
    assert [(f.filename, f.language) for f in snapshot.files] == [("b.txt", "text"), ("a.rs", "rust")]


@pytest.mark.asyncio
async def test_snapshot_ignores_nested_and_sibling_paths(repository, reader, store):
    created = await repository.create(_dto("t", [("a.py", "x")]), "tok")
    await store.write_file(f"snippets/{created.id}/nested/deep.py", "x", "nested")
    await store.write_file(f"snippets/{created.id}-other/index.md", "---\ntitle: o\n---\n", "sibling")

    snapshot = await reader.get_snapshot(created.id, store.head)
    assert snapshot.filenames == ["a.py"]


@pytest.mark.asyncio
async def test_snapshot_none_cases(repository, reader, store):
    created = await repository.create(_dto("t", [("a.py", "x")]), "tok")
    assert await reader.get_snapshot(created.id, "f" * 40) is None
    assert await reader.get_snapshot("other-id", store.head) is None

    path = f"snippets/{created.id}/index.md"
    index = await store.read_path(path)
    await store.write_file(path, "not front matter", "corrupt", expected_hash=index.sha)
    assert await reader.get_snapshot(created.id, store.head) is None


@pytest.mark.asyncio
async def test_list_revisions_newest_first_with_stats(repository, reader, store, clock):
    created, _ = await _create_and_update_twice(repository, store, clock)

    revisions = await reader.list_revisions(created.id)

    assert revisions[0].message == "Delete file: c.js"
    assert revisions[-1].message == "Create snippet: v0"
    assert revisions[-1].category == "create"
    for rev in revisions:
        detail = await store.get_commit_detail(rev.sha)
        assert rev.additions == detail.additions
        assert rev.deletions == detail.deletions
    add_a = next(r for r in revisions if r.message == "Add file: a.py")
    assert (add_a.additions, add_a.deletions) == (1, 0)


@pytest.mark.asyncio
async def test_list_revisions_limit_is_clamped(repository, store, clock):
    created, _ = await _create_and_update_twice(repository, store, clock)
    reader = GitRevisionReader(lambda credential=None: store, "snippets", max_revisions=2)

    assert len(await reader.list_revisions(created.id, limit=10)) == 2
    assert len(await reader.list_revisions(created.id, limit=0)) == 1
    assert reader.clamp_limit(None) == 2


@pytest.mark.asyncio
async def test_list_revisions_of_unknown_snippet_is_empty(reader):
    assert await reader.list_revisions("missing") == []


@pytest.mark.asyncio
async def test_diff_of_root_commit_reports_added(repository, reader, store):
    created = await repository.create(_dto("t", [("a.py", "x")]), "tok")
    root = (await store.list_history(f"snippets/{created.id}", 10))[-1]

    diff = await reader.get_diff(created.id, root.sha)

    assert diff is not None
    assert diff.parent_sha == ""
    assert diff.is_root
    assert [f.status for f in diff.files] == ["added"]


@pytest.mark.asyncio
async def test_diff_against_first_parent(repository, reader, store):
    created = await repository.create(_dto("t", [("a.py", "one\n")]), "tok")
    parent = store.head
    await repository.update(created.id, _dto("t", [("a.py", "two\n")]), "tok")
    history = await store.list_history(f"snippets/{created.id}", 1)

    diff = await reader.get_diff(created.id, history[0].sha)

    assert diff.parent_sha != ""
    assert diff.parent_sha == (await store.get_commit_detail(history[0].sha)).parent_shas[0]
    assert diff.files[0].filename == f"snippets/{created.id}/a.py"
    assert diff.files[0].status == "modified"
    assert "-one" in diff.files[0].patch and "+two" in diff.files[0].patch
    assert parent in [c.sha for c in await store.list_history(f"snippets/{created.id}", 10)]


class _StubStore:
    def __init__(self, detail=None, error=None):
        self._detail = detail
        self._error = error

    async def get_commit_detail(self, sha):
        if self._error:
            raise self._error
        return self._detail


@pytest.mark.asyncio
async def test_diff_is_unfiltered_and_allows_empty_file_list():
    outside = FileChange("README.md", "renamed", 1, 1, "@@", previous_filename="OLD.md")
    reader = GitRevisionReader(lambda c=None: _StubStore(CommitDetail("s", ["p"], [outside])), "snippets")
    diff = await reader.get_diff("id", "s")
    assert diff.files == [outside]

    empty = GitRevisionReader(lambda c=None: _StubStore(CommitDetail("s", ["p"], [])), "snippets")
    assert (await empty.get_diff("id", "s")).files == []


@pytest.mark.asyncio
async def test_diff_fetch_failure_returns_none():
    reader = GitRevisionReader(lambda c=None: _StubStore(error=RemoteError("boom", status=500)), "snippets")
    assert await reader.get_diff("id", "s") is None
