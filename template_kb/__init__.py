"""
Template KB - a searchable knowledge base of testing-standards templates
(naming conventions, unit, integration, regression and parameterized test
templates, assertion guidelines) for Python/pytest and JavaScript/Jest.
"""

__version__ = "0.1.0"

from template_kb.classify import classify_category, classify_ecosystem
from template_kb.config import TemplateKBConfig, TemplateKBSettings, load_config
from template_kb.document import Category, CodeBlock, Ecosystem, TemplateEntry
from template_kb.errors import InvalidArgument, MalformedDocument, TemplateKBError
from template_kb.keywords import STOP_WORDS, tokenize
from template_kb.loader import (
    KnowledgeBaseLoader,
    load_default,
    load_directory,
    load_file,
)
from template_kb.models import EntryModel, SearchHit, SearchRequest, SearchResponse
from template_kb.store import TemplateStore, iter_search, load, search

__all__ = [
    "Category",
    "CodeBlock",
    "Ecosystem",
    "EntryModel",
    "InvalidArgument",
    "KnowledgeBaseLoader",
    "MalformedDocument",
    "STOP_WORDS",
    "SearchHit",
    "SearchRequest",
    "SearchResponse",
    "TemplateEntry",
    "TemplateKBConfig",
    "TemplateKBError",
    "TemplateKBSettings",
    "TemplateStore",
    "classify_category",
    "classify_ecosystem",
    "iter_search",
    "load",
    "load_config",
    "load_default",
    "load_directory",
    "load_file",
    "search",
    "tokenize",
]
