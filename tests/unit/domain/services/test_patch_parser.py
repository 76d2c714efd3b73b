from gitsnip.domain.services.patch_parser import ADDITION, CONTEXT, DELETION, classify_patch_line, parse_patch


def test_four_line_patch_yields_four_typed_records():
    patch = "@@ -1,2 +1,3 @@\n unchanged\n-removed line\n+added line"
    lines = parse_patch(patch)
    assert [(line.kind, line.content) for line in lines] == [
        (CONTEXT, "@@ -1,2 +1,3 @@"),
        (CONTEXT, "unchanged"),
        (DELETION, "removed line"),
        (ADDITION, "added line"),
    ]


def test_no_newline_marker_and_blank_lines_are_dropped():
    patch = "@@ -1 +1 @@\n-a\n+b\n\\ No newline at end of file\n"
    kinds = [line.kind for line in parse_patch(patch)]
    assert kinds == [CONTEXT, DELETION, ADDITION]


def test_context_loses_exactly_one_space():
    assert classify_patch_line("   indented").content == "  indented"


def test_crlf_is_normalized():
    lines = parse_patch("@@ -1 +1 @@\r\n+x\r\n")
    assert lines[1].content == "x"


def test_empty_or_missing_patch():
    assert parse_patch(None) == []
    assert parse_patch("") == []


def test_to_dict_shape():
    assert parse_patch("+x")[0].to_dict() == {"type": "addition", "content": "x"}
