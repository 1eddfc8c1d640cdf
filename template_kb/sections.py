"""
Heading-based splitting of Markdown text into sections.

Lines inside fenced code blocks are never treated as headings, so Python
comments such as ``# Arrange`` in a template do not start a new section.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from template_kb.document import CodeBlock

HEADER_RE = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)[ \t]*$")
CLOSING_HASHES_RE = re.compile(r"[ \t]+#+$")
FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*([^\s`]*)")
LEADING_BLANK_LINES_RE = re.compile(r"\A(?:[ \t]*\r?\n)+")
TRAILING_BLANK_LINES_RE = re.compile(r"(?:\r?\n[ \t]*)+\Z")


@dataclass
class Heading:
    level: int
    title: str
    line: int


@dataclass
class Section:
    """A heading together with the text it governs."""

    level: int
    title: str
    body: str
    start: int  # offset of the heading line
    end: int  # offset just past the section
    header_path: List[str] = field(default_factory=list)
    code_blocks: List[CodeBlock] = field(default_factory=list)


def _line_starts(text: str) -> List[int]:
    """Get starting positions of all lines."""
    starts = [0]
    for i, ch in enumerate(text):
        if ch == "\n":
            starts.append(i + 1)
    return starts


def find_headings(lines: List[str]) -> List[Heading]:
    """Locate ATX headings, skipping anything inside a code fence."""
    headings = []
    fence: Optional[str] = None

    for ln, line in enumerate(lines):
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif (
                not fence_match.group(2)
                and marker[0] == fence[0]
                and len(marker) >= len(fence)
            ):
                fence = None
            continue
        if fence is not None:
            continue

        m = HEADER_RE.match(line)
        if not m:
            continue
        title = CLOSING_HASHES_RE.sub("", m.group(2)).strip()
        if title and set(title) != {"#"}:
            headings.append(Heading(level=len(m.group(1)), title=title, line=ln))

    return headings


def extract_code_blocks(text: str) -> List[CodeBlock]:
    """Collect fenced code blocks (with their language tags) from text."""
    blocks = []
    fence: Optional[str] = None
    language: Optional[str] = None
    buffer: List[str] = []

    for line in text.splitlines():
        fence_match = FENCE_RE.match(line)
        if fence is None:
            if fence_match:
                fence = fence_match.group(1)
                language = fence_match.group(2) or None
                buffer = []
            continue
        if (
            fence_match
            and not fence_match.group(2)
            and fence_match.group(1)[0] == fence[0]
            and len(fence_match.group(1)) >= len(fence)
        ):
            blocks.append(CodeBlock(code="\n".join(buffer), language=language))
            fence = None
            continue
        buffer.append(line)

    # An unterminated fence runs to the end of the text
    if fence is not None:
        blocks.append(CodeBlock(code="\n".join(buffer), language=language))

    return blocks


def split_sections(text: str) -> List[Section]:
    """
    Split Markdown into one Section per heading.

    A section spans from its heading line to the next heading of the same or
    a higher level, so nested subsections stay inside their parent's body.
    """
    lines = text.split("\n")
    starts = _line_starts(text)
    n = len(text)
    headings = find_headings([line.rstrip("\r") for line in lines])

    sections: List[Section] = []
    stack: List[Heading] = []
    for i, h in enumerate(headings):
        while stack and stack[-1].level >= h.level:
            stack.pop()
        stack.append(h)

        end_line = len(lines)
        for later in headings[i + 1 :]:
            if later.level <= h.level:
                end_line = later.line
                break

        start, end = _span_of_lines(starts, h.line, end_line, n)
        body_start, _ = _span_of_lines(starts, h.line + 1, end_line, n)
        body = _trim_blank_lines(text[min(body_start, end) : end])

        sections.append(
            Section(
                level=h.level,
                title=h.title,
                body=body,
                start=start,
                end=end,
                header_path=[x.title for x in stack],
                code_blocks=extract_code_blocks(body),
            )
        )

    return sections


def _span_of_lines(
    starts: List[int], a: int, b_excl: int, n: int
) -> Tuple[int, int]:
    """Get character span from line a to line b (exclusive)."""
    start = starts[a] if a < len(starts) else n
    end = starts[b_excl] if b_excl < len(starts) else n
    return start, end


def _trim_blank_lines(text: str) -> str:
    """Drop whitespace-only lines at both ends, keeping inner indentation."""
    if not text.strip():
        return ""
    text = LEADING_BLANK_LINES_RE.sub("", text)
    return TRAILING_BLANK_LINES_RE.sub("", text)
