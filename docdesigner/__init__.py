"""Document template designer for car-rental paperwork, built with PySide6 and QML.

Templates are immutable values edited through a small set of pure store
functions; one renderer feeds the editor canvas, the preview and printing.
"""

from .constants import CLIPBOARD_MIME_TYPE, ELEMENT_PRESETS, PLACEHOLDERS
from .controller import (
    Dragging,
    EditorSession,
    Editing,
    Idle,
    InteractionController,
    Resizing,
    Selected,
)
from .errors import DocDesignerError, TemplateFormatError, UnknownCategoryError
from .renderer import DrawInstruction, RenderedDocument, render, render_to_dicts
from .store import (
    add_element,
    add_element_with_id,
    create_blank,
    create_default,
    deserialize,
    duplicate_element,
    remove_element,
    serialize,
    update_element,
)
from .substitution import format_amount, format_date, substitute
from .types import (
    Customer,
    DataContext,
    Element,
    ElementKind,
    ElementStyle,
    Geometry,
    Reservation,
    StoreInfo,
    Template,
    TemplateCategory,
    Vehicle,
)

__all__ = [
    "CLIPBOARD_MIME_TYPE",
    "Customer",
    "DataContext",
    "DocDesignerError",
    "DrawInstruction",
    "Dragging",
    "ELEMENT_PRESETS",
    "EditorSession",
    "Editing",
    "Element",
    "ElementKind",
    "ElementStyle",
    "Geometry",
    "Idle",
    "InteractionController",
    "PLACEHOLDERS",
    "RenderedDocument",
    "Reservation",
    "Resizing",
    "Selected",
    "StoreInfo",
    "Template",
    "TemplateCategory",
    "TemplateFormatError",
    "UnknownCategoryError",
    "Vehicle",
    "add_element",
    "add_element_with_id",
    "create_blank",
    "create_default",
    "deserialize",
    "duplicate_element",
    "format_amount",
    "format_date",
    "remove_element",
    "render",
    "render_to_dicts",
    "serialize",
    "substitute",
    "update_element",
]
