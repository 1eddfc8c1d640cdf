"""
Exceptions raised by the template knowledge base.
"""


class TemplateKBError(ValueError):
    """Base class for knowledge base errors."""


class MalformedDocument(TemplateKBError):
    """The document has no recognizable section headings."""


class InvalidArgument(TemplateKBError):
    """A search argument is out of range or of the wrong type."""
