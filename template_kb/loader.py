"""
Knowledge base loader for files, directories and the bundled document.
"""

import logging
import os
from importlib import resources
from pathlib import Path
from typing import Iterable, List, Optional, Union

from template_kb.store import TemplateStore, load

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT = "testing_standards.md"
MARKDOWN_EXTENSIONS = (".md", ".markdown")


class KnowledgeBaseLoader:
    """
    A utility for reading knowledge base text and building stores from it.
    """

    @staticmethod
    def read_text(file_path: Union[str, Path]) -> str:
        """
        Read a text file.

        :param file_path: Path to the text file
        :return: File content
        """
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def read_default() -> str:
        """Read the knowledge base document shipped with the package."""
        return (
            resources.files("template_kb")
            .joinpath("data")
            .joinpath(DEFAULT_DOCUMENT)
            .read_text(encoding="utf-8")
        )

    @classmethod
    def read_directory(cls, directory: Union[str, Path]) -> str:
        """
        Concatenate every Markdown file under a directory, in sorted path order.

        :param directory: Path to the directory
        :return: Combined text, files separated by a blank line
        """
        paths: List[str] = []
        for root, dirs, files in os.walk(directory):
            dirs.sort()
            for file in sorted(files):
                if file.lower().endswith(MARKDOWN_EXTENSIONS):
                    paths.append(os.path.join(root, file))

        if not paths:
            logger.warning(f"No Markdown files found under {directory}")
        return "\n\n".join(cls.read_text(p).rstrip("\n") for p in paths)

    @classmethod
    def load_file(
        cls,
        file_path: Union[str, Path],
        extra_stop_words: Optional[Iterable[str]] = None,
    ) -> TemplateStore:
        return load(
            cls.read_text(file_path),
            source=str(file_path),
            extra_stop_words=extra_stop_words,
        )

    @classmethod
    def load_directory(
        cls,
        directory: Union[str, Path],
        extra_stop_words: Optional[Iterable[str]] = None,
    ) -> TemplateStore:
        return load(
            cls.read_directory(directory),
            source=str(directory),
            extra_stop_words=extra_stop_words,
        )

    @classmethod
    def load_default(
        cls, extra_stop_words: Optional[Iterable[str]] = None
    ) -> TemplateStore:
        return load(
            cls.read_default(),
            source=f"template_kb/data/{DEFAULT_DOCUMENT}",
            extra_stop_words=extra_stop_words,
        )

    @classmethod
    def load_path(
        cls,
        path: Union[str, Path, None] = None,
        extra_stop_words: Optional[Iterable[str]] = None,
    ) -> TemplateStore:
        """
        Load a store from a file, a directory, or the bundled document.

        :param path: File or directory; None selects the bundled document
        :raises FileNotFoundError: If ``path`` does not exist
        """
        if path is None:
            return cls.load_default(extra_stop_words)
        if os.path.isdir(path):
            return cls.load_directory(path, extra_stop_words)
        if os.path.isfile(path):
            return cls.load_file(path, extra_stop_words)
        raise FileNotFoundError(f"Knowledge base not found: {path}")


def load_file(path, extra_stop_words=None) -> TemplateStore:
    return KnowledgeBaseLoader.load_file(path, extra_stop_words)


def load_directory(path, extra_stop_words=None) -> TemplateStore:
    return KnowledgeBaseLoader.load_directory(path, extra_stop_words)


def load_default(extra_stop_words=None) -> TemplateStore:
    return KnowledgeBaseLoader.load_default(extra_stop_words)
