"""
Heading and body classification for knowledge base sections.

Both functions are pure and work on plain strings so they can be exercised
without building a store.
"""

import re
from typing import Iterable, List, Optional, Tuple

from template_kb.document import Category, Ecosystem
from template_kb.keywords import TOKEN_RE

# Checked in order; the first pattern found in the heading wins.
CATEGORY_PATTERNS: List[Tuple[re.Pattern, Category]] = [
    (
        re.compile(
            r"\bparametri[sz]ed\b|\bparameteri[sz]ed\b|\bparametri[sz]e\b"
            r"|\b(data|table)[\s-]driven\b"
        ),
        Category.PARAMETERIZED_TEST,
    ),
    (re.compile(r"\bregressions?\b"), Category.REGRESSION_TEST),
    (re.compile(r"\bintegration\b"), Category.INTEGRATION_TEST),
    (re.compile(r"\bunit\b"), Category.UNIT_TEST),
    (re.compile(r"\bnam(e|es|ing)\b"), Category.NAMING_CONVENTION),
    (re.compile(r"\bassert(s|ion|ions)?\b"), Category.ASSERTION_GUIDELINE),
]

PYTHON_MARKERS = frozenset({"python", "pytest"})
JAVASCRIPT_MARKERS = frozenset({"javascript", "jest"})

PYTHON_FENCE_TAGS = frozenset({"python", "py", "python3", "pycon"})
JAVASCRIPT_FENCE_TAGS = frozenset(
    {"javascript", "js", "jsx", "mjs", "typescript", "ts", "tsx"}
)


def classify_category(heading: str) -> Optional[Category]:
    """
    Map a section heading to a Category.

    :param heading: Heading text without the leading ``#`` markers
    :return: The matching Category, or None when the heading is not a
             recognizable section (document titles, "How to Query", ...)
    """
    text = heading.lower()
    for pattern, category in CATEGORY_PATTERNS:
        if pattern.search(text):
            return category
    return None


def _markers(text: str) -> Tuple[bool, bool]:
    tokens = set(TOKEN_RE.findall(text.lower()))
    return bool(tokens & PYTHON_MARKERS), bool(tokens & JAVASCRIPT_MARKERS)


def classify_ecosystem(
    heading: str, body: str = "", fence_languages: Iterable[Optional[str]] = ()
) -> Ecosystem:
    """
    Tag a section with the ecosystem it applies to.

    Markers in the heading take precedence over the body. In the body, fenced
    code language tags count as markers too. A section that shows both
    ecosystems, or neither, is language-agnostic.
    """
    python, javascript = _markers(heading)
    if python != javascript:
        return Ecosystem.PYTHON if python else Ecosystem.JAVASCRIPT

    python, javascript = _markers(body)
    for language in fence_languages:
        tag = (language or "").lower()
        python = python or tag in PYTHON_FENCE_TAGS
        javascript = javascript or tag in JAVASCRIPT_FENCE_TAGS

    if python and not javascript:
        return Ecosystem.PYTHON
    if javascript and not python:
        return Ecosystem.JAVASCRIPT
    return Ecosystem.LANGUAGE_AGNOSTIC
