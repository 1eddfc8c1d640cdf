"""Tests for Markdown section splitting."""

from __future__ import annotations

from template_kb.sections import extract_code_blocks, split_sections


def test_sections_span_until_next_heading_of_same_level() -> None:
    text = "# Title\n\nintro\n\n## A\n\nalpha\n\n### A.1\n\nnested\n\n## B\n\nbeta"
    sections = split_sections(text)
    assert [(s.level, s.title) for s in sections] == [
        (1, "Title"),
        (2, "A"),
        (3, "A.1"),
        (2, "B"),
    ]
    a = sections[1]
    assert a.body == "alpha\n\n### A.1\n\nnested"
    assert a.header_path == ["Title", "A"]
    assert sections[2].header_path == ["Title", "A", "A.1"]
    assert sections[3].body == "beta"
    assert text[a.start : a.end].startswith("## A\n")


def test_headings_inside_fences_are_ignored() -> None:
    text = "## A\n\n```python\n# not a heading\n```\n\n~~~\n## also not\n~~~\n"
    sections = split_sections(text)
    assert [s.title for s in sections] == ["A"]
    assert "# not a heading" in sections[0].body


def test_closing_hashes_and_indentation() -> None:
    sections = split_sections("  ## Spaced Heading ##\nbody\n#NoSpace\n")
    assert [s.title for s in sections] == ["Spaced Heading"]
    assert "#NoSpace" in sections[0].body


def test_heading_on_last_line_has_empty_body() -> None:
    sections = split_sections("## A\ntext\n## B")
    assert sections[1].title == "B"
    assert sections[1].body == ""


def test_windows_line_endings() -> None:
    sections = split_sections("## A\r\nalpha\r\n## B\r\nbeta\r\n")
    assert [s.title for s in sections] == ["A", "B"]
    assert sections[0].body == "alpha"


def test_extract_code_blocks() -> None:
    body = "text\n```python\nx = 1\n```\nmore\n````\n```inner```\n````\n"
    blocks = extract_code_blocks(body)
    assert [(b.language, b.code) for b in blocks] == [
        ("python", "x = 1"),
        (None, "```inner```"),
    ]


def test_unterminated_fence_runs_to_end() -> None:
    blocks = extract_code_blocks("```js\nconst a = 1;\n")
    assert [(b.language, b.code) for b in blocks] == [("js", "const a = 1;")]


def test_whitespace_only_lines_around_body_are_trimmed() -> None:
    sections = split_sections("## A\n   \n\t\n    indented\n  \n\n## B\n \n")
    assert sections[0].body == "    indented"
    assert sections[1].body == ""
