"""Tests for loading the knowledge base and searching it."""

from __future__ import annotations

import threading

import pytest

from template_kb import (
    Category,
    Ecosystem,
    InvalidArgument,
    MalformedDocument,
    TemplateEntry,
    TemplateStore,
    iter_search,
    load,
    search,
)

QUERIES = [
    "parameterized pytest template",
    "regression test for bug",
    "jest integration test format",
    "jest integration test template",
    "assertion",
    "test",
    "naming conventions for fixtures",
    "unit test jest mock",
]


class TestLoad:
    def test_bundled_document_sections(self, store: TemplateStore) -> None:
        assert [e.title for e in store] == [
            "Naming Conventions",
            "Unit Test Template (Python – PyTest)",
            "Unit Test Template (JavaScript – Jest)",
            "Integration Test Template (Python – PyTest)",
            "Integration Test Template (JavaScript – Jest)",
            "Regression Test Template",
            "Parameterized Test Template (Python – PyTest)",
            "Parameterized Test Template (JavaScript – Jest)",
            "Assertion Guidelines",
        ]

    def test_ids_are_unique_slugs(self, store: TemplateStore) -> None:
        ids = [e.id for e in store]
        assert len(ids) == len(set(ids))
        assert "parameterized-test-template-python-pytest" in store
        assert "regression-test-template" in store

    def test_categories(self, store: TemplateStore) -> None:
        categories = {e.id: e.category for e in store}
        assert categories["naming-conventions"] == Category.NAMING_CONVENTION
        assert categories["unit-test-template-javascript-jest"] == Category.UNIT_TEST
        assert (
            categories["integration-test-template-python-pytest"]
            == Category.INTEGRATION_TEST
        )
        assert categories["regression-test-template"] == Category.REGRESSION_TEST
        assert (
            categories["parameterized-test-template-javascript-jest"]
            == Category.PARAMETERIZED_TEST
        )
        assert categories["assertion-guidelines"] == Category.ASSERTION_GUIDELINE

    def test_ecosystems(self, store: TemplateStore) -> None:
        assert store.get("unit-test-template-python-pytest").ecosystem == Ecosystem.PYTHON
        assert (
            store.get("integration-test-template-javascript-jest").ecosystem
            == Ecosystem.JAVASCRIPT
        )
        # Shows both a pytest and a Jest example
        assert (
            store.get("regression-test-template").ecosystem
            == Ecosystem.LANGUAGE_AGNOSTIC
        )
        assert store.get("naming-conventions").ecosystem == Ecosystem.LANGUAGE_AGNOSTIC

    def test_body_is_verbatim_and_excludes_heading(self, store: TemplateStore) -> None:
        entry = store.get("unit-test-template-python-pytest")
        assert not entry.body.startswith("##")
        assert "def test_add_returns_sum_of_two_numbers(calculator):" in entry.body
        assert "    # Arrange\n    a, b = 2, 3" in entry.body

    def test_code_blocks_keep_language(self, store: TemplateStore) -> None:
        entry = store.get("regression-test-template")
        assert [b.language for b in entry.code_blocks] == ["python", "javascript"]
        assert "test_bug_342_discount_not_applied_twice" in entry.code_blocks[0].code

    def test_keywords_are_lowercase_without_stop_words(
        self, store: TemplateStore
    ) -> None:
        entry = store.get("regression-test-template")
        assert {"regression", "test", "bug", "342"} <= entry.keywords
        assert "the" not in entry.keywords
        assert all(k == k.lower() for k in entry.keywords)

    def test_how_to_query_section_is_not_an_entry(self, store: TemplateStore) -> None:
        assert all("Query" not in e.title for e in store)

    def test_positions_follow_document_order(self, store: TemplateStore) -> None:
        assert [e.position for e in store] == list(range(len(store)))

    def test_entries_are_frozen(self, store: TemplateStore) -> None:
        entry = store.entries[0]
        with pytest.raises(AttributeError):
            entry.body = "changed"  # type: ignore[misc]

    def test_fenced_comments_are_not_headings(self, small_store: TemplateStore) -> None:
        assert [e.title for e in small_store] == [
            "Naming Rules",
            "Unit Tests (pytest)",
            "Integration Tests",
            "Unit Tests (pytest)",
        ]
        assert "# Arrange" in small_store.entries[1].body

    def test_duplicate_headings_get_suffixed_ids(
        self, small_store: TemplateStore
    ) -> None:
        assert [e.id for e in small_store][1::2] == [
            "unit-tests-pytest",
            "unit-tests-pytest-2",
        ]

    def test_suffixed_id_skips_ids_already_taken(self) -> None:
        store = load("## Unit Test\n\na\n\n## Unit Test\n\nb\n\n## Unit Test 2\n\nc\n")
        assert [(e.id, e.body) for e in store] == [
            ("unit-test", "a"),
            ("unit-test-2", "b"),
            ("unit-test-2-2", "c"),
        ]

    def test_later_duplicate_skips_explicitly_numbered_heading(self) -> None:
        store = load("## Unit Test\n\n## Unit Test 2\n\n## Unit Test\n")
        assert [e.id for e in store] == ["unit-test", "unit-test-2", "unit-test-3"]

    def test_ecosystem_from_body(self, small_store: TemplateStore) -> None:
        assert small_store.get("integration-tests").ecosystem == Ecosystem.JAVASCRIPT

    def test_nested_subsections_stay_in_parent_body(self) -> None:
        store = load(
            "## Unit Test Template\n\nIntro.\n\n### Example\n\nbody\n\n"
            "## Assertion Guidelines\n\nBe specific.\n"
        )
        unit = store.get("unit-test-template")
        assert "### Example" in unit.body
        assert "Be specific." not in unit.body

    def test_title_only_document_is_malformed(self) -> None:
        with pytest.raises(MalformedDocument):
            load("# Enterprise Testing Standards\n\nSome prose without sections.\n")

    @pytest.mark.parametrize("text", ["", "just prose\nno headings at all\n"])
    def test_document_without_headings_is_malformed(self, text: str) -> None:
        with pytest.raises(MalformedDocument):
            load(text)

    def test_malformed_message_names_source(self) -> None:
        with pytest.raises(MalformedDocument, match="notes.md"):
            load("# Notes\n", source="notes.md")

    def test_extra_stop_words(self) -> None:
        store = load("## Unit Test Template\n\nwidget gadget\n", extra_stop_words=["Widget"])
        entry = store.get("unit-test-template")
        assert "widget" not in entry.keywords
        assert store.search("widget") == []
        assert store.search("gadget") == [entry]

    def test_get_unknown_id(self, store: TemplateStore) -> None:
        with pytest.raises(KeyError):
            store.get("no-such-entry")

    def test_suggest_close_ids(self, store: TemplateStore) -> None:
        assert "regression-test-template" in store.suggest("regresion-test-template")

    def test_constructor_rejects_duplicate_ids(self) -> None:
        entry = TemplateEntry(
            id="x",
            category=Category.UNIT_TEST,
            ecosystem=Ecosystem.PYTHON,
            title="X",
            body="",
        )
        with pytest.raises(ValueError):
            TemplateStore([entry, entry])


class TestSearchScenarios:
    def test_parameterized_pytest_template(self, store: TemplateStore) -> None:
        results = search(store, "parameterized pytest template")
        assert results[0].title == "Parameterized Test Template (Python – PyTest)"

    def test_regression_test_for_bug(self, store: TemplateStore) -> None:
        results = search(store, "regression test for bug")
        assert results[0].title == "Regression Test Template"

    def test_jest_integration_test_format(self, store: TemplateStore) -> None:
        results = search(store, "jest integration test format")
        assert results[0].title == "Integration Test Template (JavaScript – Jest)"

    def test_jest_integration_test_template(self, store: TemplateStore) -> None:
        results = search(store, "jest integration test template")
        assert results[0].id == "integration-test-template-javascript-jest"

    def test_no_overlap_returns_nothing(self, store: TemplateStore) -> None:
        assert search(store, "quantum teleportation") == []

    def test_zero_top_k_is_invalid(self, store: TemplateStore) -> None:
        with pytest.raises(InvalidArgument):
            search(store, "test", top_k=0)


class TestSearchProperties:
    @pytest.mark.parametrize("query", QUERIES)
    def test_idempotent(self, store: TemplateStore, query: str) -> None:
        assert search(store, query, 5) == search(store, query, 5)

    @pytest.mark.parametrize("query", QUERIES)
    @pytest.mark.parametrize("top_k", [1, 2, 3, 20])
    def test_result_count_bounded_by_top_k(
        self, store: TemplateStore, query: str, top_k: int
    ) -> None:
        assert len(search(store, query, top_k)) <= top_k

    @pytest.mark.parametrize("top_k", [1, 3, 100])
    @pytest.mark.parametrize("query", ["", "   ", "the and of"])
    def test_empty_query_returns_empty(
        self, store: TemplateStore, query: str, top_k: int
    ) -> None:
        assert search(store, query, top_k) == []

    @pytest.mark.parametrize("query", QUERIES)
    def test_scores_descend_then_document_order(
        self, store: TemplateStore, query: str
    ) -> None:
        results = search(store, query, top_k=len(store))
        keys = [(-store.score(e, query), e.position) for e in results]
        assert keys == sorted(keys)
        assert all(store.score(e, query) > 0 for e in results)

    def test_ties_keep_document_order(self, store: TemplateStore) -> None:
        results = search(store, "test", top_k=len(store))
        assert [e.position for e in results] == sorted(e.position for e in results)

    def test_top_k_truncates_ranked_list(self, store: TemplateStore) -> None:
        full = search(store, "pytest template", top_k=len(store))
        assert search(store, "pytest template", top_k=2) == full[:2]

    def test_scores_reported(self, store: TemplateStore) -> None:
        pairs = store.search_with_scores("parameterized pytest template", top_k=1)
        assert [(e.id, s) for e, s in pairs] == [
            ("parameterized-test-template-python-pytest", 3)
        ]

    @pytest.mark.parametrize("top_k", [-1, 0, 1.5, "3", True, None])
    def test_invalid_top_k(self, store: TemplateStore, top_k) -> None:
        with pytest.raises(InvalidArgument):
            store.search("test", top_k=top_k)

    def test_invalid_top_k_raised_before_iteration(self, store: TemplateStore) -> None:
        with pytest.raises(InvalidArgument):
            iter_search(store, "test", top_k=0)

    def test_iter_search_is_lazy_and_restartable(self, store: TemplateStore) -> None:
        first = iter_search(store, "pytest template", top_k=4)
        assert next(first) == search(store, "pytest template", top_k=4)[0]
        assert list(iter_search(store, "pytest template", top_k=4)) == search(
            store, "pytest template", top_k=4
        )

    def test_query_is_case_and_punctuation_insensitive(
        self, store: TemplateStore
    ) -> None:
        assert search(store, "PARAMETERIZED, PyTest; Template!") == search(
            store, "parameterized pytest template"
        )

    def test_concurrent_searches_agree(self, store: TemplateStore) -> None:
        expected = {q: search(store, q, 5) for q in QUERIES}
        mismatches = []

        def worker() -> None:
            for q in QUERIES:
                if search(store, q, 5) != expected[q]:
                    mismatches.append(q)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert mismatches == []


class TestFilters:
    def test_filter_by_category(self, store: TemplateStore) -> None:
        results = store.search(
            "template", top_k=10, category=Category.PARAMETERIZED_TEST
        )
        assert {e.category for e in results} == {Category.PARAMETERIZED_TEST}
        assert len(results) == 2

    def test_filter_by_ecosystem_string(self, store: TemplateStore) -> None:
        results = store.search("test template", top_k=10, ecosystem="javascript")
        assert results
        assert all(e.ecosystem == Ecosystem.JAVASCRIPT for e in results)

    def test_filter_listing(self, store: TemplateStore) -> None:
        python = store.filter(ecosystem=Ecosystem.PYTHON)
        assert [e.id for e in python] == [
            "unit-test-template-python-pytest",
            "integration-test-template-python-pytest",
            "parameterized-test-template-python-pytest",
        ]

    def test_unknown_filter_value(self, store: TemplateStore) -> None:
        with pytest.raises(InvalidArgument, match="ecosystem"):
            store.search("test", ecosystem="cobol")
