"""Shared fixtures: the bundled knowledge base and small synthetic documents."""

from __future__ import annotations

import pytest

from template_kb import TemplateStore, load, load_default

SMALL_DOCUMENT = """\
# Team Handbook

Intro text that belongs to no entry.

## Naming Rules

Name tests after behavior.

## Unit Tests (pytest)

```python
# Arrange
value = 1
```

## Integration Tests

Talk to a real database. Uses jest and supertest.

## Unit Tests (pytest)

A second section with the same heading.
"""


@pytest.fixture(scope="session")
def store() -> TemplateStore:
    return load_default()


@pytest.fixture
def small_store() -> TemplateStore:
    return load(SMALL_DOCUMENT, source="small.md")
