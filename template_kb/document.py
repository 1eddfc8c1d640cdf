"""
Entry classes for the template knowledge base.

This module provides the static structure of a loaded knowledge base:
- Category: what kind of testing convention a section documents
- Ecosystem: which toolchain a section applies to
- CodeBlock: one fenced code block inside a section
- TemplateEntry: one documented example, tagged and tokenized for retrieval
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple


class Category(Enum):
    """Kinds of sections the knowledge base documents."""

    NAMING_CONVENTION = "naming-convention"
    UNIT_TEST = "unit-test"
    INTEGRATION_TEST = "integration-test"
    REGRESSION_TEST = "regression-test"
    PARAMETERIZED_TEST = "parameterized-test"
    ASSERTION_GUIDELINE = "assertion-guideline"


class Ecosystem(Enum):
    """Toolchains a section can apply to."""

    PYTHON = "python"
    JAVASCRIPT = "javascript"
    LANGUAGE_AGNOSTIC = "language-agnostic"


@dataclass(frozen=True)
class CodeBlock:
    """A fenced code block copied verbatim from a section body."""

    code: str
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"language": self.language, "code": self.code}


@dataclass(frozen=True)
class TemplateEntry:
    """
    Represents one documented example in the knowledge base.

    Entries are built once by the loader and never change afterwards, so a
    store of entries can be shared between callers without copying.
    """

    # Core attributes
    id: str
    category: Category
    ecosystem: Ecosystem
    title: str
    body: str

    # Retrieval data
    keywords: FrozenSet[str] = field(default_factory=frozenset)

    # Position in document
    position: int = 0
    level: int = 2

    code_blocks: Tuple[CodeBlock, ...] = ()

    def has_code(self) -> bool:
        return bool(self.code_blocks)

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary representation."""
        return {
            "id": self.id,
            "category": self.category.value,
            "ecosystem": self.ecosystem.value,
            "title": self.title,
            "body": self.body,
            "keywords": sorted(self.keywords),
            "position": self.position,
            "level": self.level,
            "code_blocks": [block.to_dict() for block in self.code_blocks],
        }
