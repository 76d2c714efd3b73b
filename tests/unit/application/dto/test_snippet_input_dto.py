import pytest

from gitsnip.application.dto.snippet_input_dto import SnippetFileInput, SnippetInputDTO, Viewer


def test_from_payload_builds_dto():
    dto = SnippetInputDTO.from_payload(
        {
            "title": "  Title  ",
            "files": [{"filename": "a.py", "code": "x = 1"}, {"filename": "b.txt", "code": "", "language": "markdown"}],
            "tags": ["t"],
            "isPublic": False,
        }
    )
    assert dto.title == "Title"
    assert dto.description == ""
    assert dto.is_public is False
    assert [f.resolved_language for f in dto.files] == ["python", "markdown"]
    assert dto.files[1].code == ""


def test_is_public_defaults_true():
    dto = SnippetInputDTO.from_payload({"title": "t", "files": [{"filename": "a"}]})
    assert dto.is_public is True


@pytest.mark.parametrize(
    "payload",
    [
        {"files": [{"filename": "a.py"}]},
        {"title": "t", "files": []},
        {"title": "t"},
        {"title": "t", "files": "a.py"},
        {"title": "t", "files": ["a.py"]},
        {"title": "t", "files": [{"filename": "a.py"}, {"filename": "a.py"}]},
        {"title": "t", "files": [{"filename": "index.md"}]},
        {"title": "t", "files": [{"filename": "dir/a.py"}]},
        {"title": "t", "files": [{"filename": ".."}]},
        {"title": "t", "files": [{"filename": "a"}], "tags": "x"},
        ["not", "an", "object"],
    ],
)
def test_invalid_payloads_raise_value_error(payload):
    with pytest.raises(ValueError):
        SnippetInputDTO.from_payload(payload)


def test_file_input_requires_name():
    with pytest.raises(ValueError):
        SnippetFileInput(filename="   ")


def test_viewer_anonymous():
    assert Viewer().is_anonymous
    assert not Viewer(username="ada").is_anonymous
