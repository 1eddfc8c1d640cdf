"""
Template store and keyword retriever.

A store is built once from the knowledge base text and is read-only
afterwards: entries are frozen and held in a tuple, so concurrent searches
need no locking.
"""

import difflib
import heapq
import logging
import re
from typing import (
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
    Union,
)

from template_kb.classify import classify_category, classify_ecosystem
from template_kb.document import Category, Ecosystem, TemplateEntry
from template_kb.errors import InvalidArgument, MalformedDocument
from template_kb.keywords import keyword_set
from template_kb.sections import split_sections

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 3


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "section"


class TemplateStore:
    """
    An immutable, ordered collection of TemplateEntry values.

    Use :func:`load` (or :meth:`TemplateStore.from_text`) to build one from a
    document; the constructor takes already-built entries.
    """

    def __init__(
        self,
        entries: Iterable[TemplateEntry],
        source: str = "",
        extra_stop_words: Optional[Iterable[str]] = None,
    ):
        self._entries: Tuple[TemplateEntry, ...] = tuple(entries)
        self._by_id: Dict[str, TemplateEntry] = {}
        for entry in self._entries:
            if entry.id in self._by_id:
                raise ValueError(f"Duplicate entry id: {entry.id}")
            self._by_id[entry.id] = entry
        self.source = source
        self.extra_stop_words: FrozenSet[str] = frozenset(
            w.lower() for w in (extra_stop_words or ())
        )

    @classmethod
    def from_text(
        cls,
        document_text: str,
        source: str = "",
        extra_stop_words: Optional[Iterable[str]] = None,
    ) -> "TemplateStore":
        return load(document_text, source=source, extra_stop_words=extra_stop_words)

    # =============================================================================
    # Read access
    # =============================================================================

    @property
    def entries(self) -> Tuple[TemplateEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TemplateEntry]:
        return iter(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._by_id

    def get(self, entry_id: str) -> TemplateEntry:
        """Get an entry by id; raises KeyError for unknown ids."""
        try:
            return self._by_id[entry_id]
        except KeyError:
            raise KeyError(entry_id) from None

    def suggest(self, entry_id: str, n: int = 3) -> List[str]:
        """Ids that look like a mistyped ``entry_id``."""
        return difflib.get_close_matches(entry_id, list(self._by_id), n=n, cutoff=0.5)

    def filter(
        self,
        category: Union[Category, str, None] = None,
        ecosystem: Union[Ecosystem, str, None] = None,
    ) -> List[TemplateEntry]:
        """Entries matching the given category and/or ecosystem, in document order."""
        category = _coerce(Category, category, "category")
        ecosystem = _coerce(Ecosystem, ecosystem, "ecosystem")
        return [
            e
            for e in self._entries
            if (category is None or e.category == category)
            and (ecosystem is None or e.ecosystem == ecosystem)
        ]

    # =============================================================================
    # Retrieval
    # =============================================================================

    def query_tokens(self, query_text: str) -> FrozenSet[str]:
        return keyword_set(query_text or "", self.extra_stop_words)

    def iter_search(
        self,
        query_text: str,
        top_k: int = DEFAULT_TOP_K,
        category: Union[Category, str, None] = None,
        ecosystem: Union[Ecosystem, str, None] = None,
    ) -> Iterator[Tuple[TemplateEntry, int]]:
        """
        Lazily yield ``(entry, score)`` pairs for a free-text query.

        Score is the number of distinct query tokens found in the entry's
        keywords. Entries with no overlap are left out; ties keep document
        order. Arguments are checked eagerly, before the first item is
        requested.
        """
        _check_top_k(top_k)
        candidates = self.filter(category=category, ecosystem=ecosystem)
        tokens = self.query_tokens(query_text)
        return self._ranked(tokens, candidates, top_k)

    def _ranked(
        self,
        tokens: FrozenSet[str],
        candidates: List[TemplateEntry],
        top_k: int,
    ) -> Iterator[Tuple[TemplateEntry, int]]:
        if not tokens:
            return

        scored = (
            (len(tokens & entry.keywords), entry.position, entry)
            for entry in candidates
        )
        best = heapq.nsmallest(
            top_k,
            ((-s, pos, entry) for s, pos, entry in scored if s > 0),
            key=lambda item: (item[0], item[1]),
        )
        logger.debug(
            f"Query {sorted(tokens)} matched {len(best)} of {len(candidates)} entries"
        )
        for neg_score, _, entry in best:
            yield entry, -neg_score

    def search(
        self,
        query_text: str,
        top_k: int = DEFAULT_TOP_K,
        category: Union[Category, str, None] = None,
        ecosystem: Union[Ecosystem, str, None] = None,
    ) -> List[TemplateEntry]:
        """Best-matching entries for a query, most relevant first."""
        return [
            entry
            for entry, _ in self.iter_search(
                query_text, top_k, category=category, ecosystem=ecosystem
            )
        ]

    def search_with_scores(
        self,
        query_text: str,
        top_k: int = DEFAULT_TOP_K,
        category: Union[Category, str, None] = None,
        ecosystem: Union[Ecosystem, str, None] = None,
    ) -> List[Tuple[TemplateEntry, int]]:
        return list(
            self.iter_search(query_text, top_k, category=category, ecosystem=ecosystem)
        )

    def score(self, entry: TemplateEntry, query_text: str) -> int:
        """Keyword overlap between an entry and a query."""
        return len(self.query_tokens(query_text) & entry.keywords)


def _check_top_k(top_k) -> None:
    if isinstance(top_k, bool) or not isinstance(top_k, int):
        raise InvalidArgument(f"top_k must be an integer, got {top_k!r}")
    if top_k <= 0:
        raise InvalidArgument(f"top_k must be positive, got {top_k}")


def _coerce(enum_cls, value, name: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidArgument(
            f"Unknown {name} {value!r} (expected one of: {allowed})"
        ) from None


def load(
    document_text: str,
    source: str = "",
    extra_stop_words: Optional[Iterable[str]] = None,
) -> TemplateStore:
    """
    Parse a knowledge base document into a TemplateStore.

    Every heading whose text classifies into a Category becomes an entry;
    other headings (the document title, "How to Query", ...) are skipped.

    :param document_text: Full Markdown text of the knowledge base
    :param source: Where the text came from, used in log and error messages
    :param extra_stop_words: Words to ignore on top of the built-in list
    :raises MalformedDocument: If no recognizable section heading is found
    """
    where = f" in {source}" if source else ""
    entries: List[TemplateEntry] = []
    seen_ids: Dict[str, int] = {}
    used_ids: Set[str] = set()

    for section in split_sections(document_text or ""):
        category = classify_category(section.title)
        if category is None:
            logger.debug(f"Skipping unrecognized heading{where}: {section.title!r}")
            continue

        base_id = slugify(section.title)
        count = seen_ids.get(base_id, 0) + 1
        entry_id = base_id if count == 1 else f"{base_id}-{count}"
        # A suffixed id can collide with a heading that slugs to the same text
        while entry_id in used_ids:
            count += 1
            entry_id = f"{base_id}-{count}"
        seen_ids[base_id] = count
        used_ids.add(entry_id)

        entries.append(
            TemplateEntry(
                id=entry_id,
                category=category,
                ecosystem=classify_ecosystem(
                    section.title,
                    section.body,
                    [block.language for block in section.code_blocks],
                ),
                title=section.title,
                body=section.body,
                keywords=keyword_set(
                    f"{section.title}\n{section.body}", extra_stop_words
                ),
                position=len(entries),
                level=section.level,
                code_blocks=tuple(section.code_blocks),
            )
        )

    if not entries:
        raise MalformedDocument(
            f"No recognizable section headings found{where}; expected headings "
            "naming a naming convention, unit, integration, regression or "
            "parameterized test template, or assertion guidelines"
        )

    logger.info(f"Loaded {len(entries)} template entries{where}")
    return TemplateStore(entries, source=source, extra_stop_words=extra_stop_words)


def search(
    store: TemplateStore,
    query_text: str,
    top_k: int = DEFAULT_TOP_K,
    category: Union[Category, str, None] = None,
    ecosystem: Union[Ecosystem, str, None] = None,
) -> List[TemplateEntry]:
    """Module-level form of :meth:`TemplateStore.search`."""
    return store.search(query_text, top_k, category=category, ecosystem=ecosystem)


def iter_search(
    store: TemplateStore,
    query_text: str,
    top_k: int = DEFAULT_TOP_K,
    category: Union[Category, str, None] = None,
    ecosystem: Union[Ecosystem, str, None] = None,
) -> Iterator[TemplateEntry]:
    """Lazy form of :func:`search`."""
    ranked = store.iter_search(
        query_text, top_k, category=category, ecosystem=ecosystem
    )
    return (entry for entry, _ in ranked)
