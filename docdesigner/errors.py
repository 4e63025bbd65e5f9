"""Exceptions raised by the designer core."""

from __future__ import annotations


class DocDesignerError(Exception):
    """Base class for designer errors."""


class TemplateFormatError(DocDesignerError):
    """Serialized template data could not be decoded."""


class UnknownCategoryError(DocDesignerError, ValueError):
    """A category name is not one of the supported document types."""

    def __init__(self, category: str):
        super().__init__(f"Unknown template category: {category!r}")
        self.category = category
