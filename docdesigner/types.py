"""Data types for document templates.

This module contains the value types shared by the template store, the
interaction controller and the renderer. Every type is a frozen dataclass;
mutations go through :mod:`docdesigner.store` and return new values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple


class ElementKind(Enum):
    """Closed set of element kinds that can be placed on a canvas."""

    STATIC_TEXT = "static_text"
    BOUND_TEXT = "bound_text"
    LOGO = "logo"
    TABLE = "table"
    DIVIDER = "divider"
    SIGNATURE_AREA = "signature_area"
    CHECKLIST = "checklist"
    FUEL_MILEAGE = "fuel_mileage"
    QR_PLACEHOLDER = "qr_placeholder"


class TemplateCategory(Enum):
    """Document types a template can be designed for."""

    QUOTE = "quote"
    CONTRACT = "contract"
    DEPOSIT_RECEIPT = "deposit_receipt"
    INVOICE = "invoice"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


@dataclass(frozen=True)
class Geometry:
    """Placement of an element in canvas units.

    The model trusts its caller: values are never clamped here. Use
    :func:`validate_geometry` to report problems.
    """

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ElementStyle:
    """Visual attributes of an element."""

    font_size: float = 12.0
    color: str = "#111827"
    background_color: str = "transparent"
    font_family: str = "Inter"
    font_weight: str = "400"
    text_align: str = "left"
    border_radius: float = 0.0
    padding: float = 5.0
    border_width: float = 0.0
    border_color: str = "#e5e7eb"
    line_height: float = 1.4
    opacity: float = 1.0
    letter_spacing: float = 0.0
    z_index: int = 10


GEOMETRY_FIELDS = ("x", "y", "width", "height")
STYLE_FIELDS = (
    "font_size",
    "color",
    "background_color",
    "font_family",
    "font_weight",
    "text_align",
    "border_radius",
    "padding",
    "border_width",
    "border_color",
    "line_height",
    "opacity",
    "letter_spacing",
    "z_index",
)
TEXT_ALIGNMENTS = ("left", "center", "right")
STYLE_FIELD_TYPES: Dict[str, type] = {item.name: type(item.default) for item in fields(ElementStyle)}


@dataclass(frozen=True)
class ChecklistItem:
    """A single row of an inspection checklist."""

    label: str
    checked: bool = False


@dataclass(frozen=True)
class Element:
    """Base of every placed element. Subclasses fix ``kind``."""

    kind: ClassVar[ElementKind]

    id: str
    geometry: Geometry
    style: ElementStyle = field(default_factory=ElementStyle)


@dataclass(frozen=True)
class StaticTextElement(Element):
    kind: ClassVar[ElementKind] = ElementKind.STATIC_TEXT

    text: str = ""


@dataclass(frozen=True)
class BoundTextElement(Element):
    """Text whose ``{{placeholder}}`` tokens are resolved at render time."""

    kind: ClassVar[ElementKind] = ElementKind.BOUND_TEXT

    text: str = ""


@dataclass(frozen=True)
class LogoElement(Element):
    kind: ClassVar[ElementKind] = ElementKind.LOGO

    label: str = "LOGO"  # shown only when the store has no logo image


@dataclass(frozen=True)
class TableElement(Element):
    kind: ClassVar[ElementKind] = ElementKind.TABLE


@dataclass(frozen=True)
class DividerElement(Element):
    kind: ClassVar[ElementKind] = ElementKind.DIVIDER


@dataclass(frozen=True)
class SignatureAreaElement(Element):
    kind: ClassVar[ElementKind] = ElementKind.SIGNATURE_AREA

    caption: str = ""


@dataclass(frozen=True)
class ChecklistElement(Element):
    """Checklist whose rows are kept as the raw JSON text they were saved with."""

    kind: ClassVar[ElementKind] = ElementKind.CHECKLIST

    content: str = "[]"


@dataclass(frozen=True)
class FuelMileageElement(Element):
    kind: ClassVar[ElementKind] = ElementKind.FUEL_MILEAGE


@dataclass(frozen=True)
class QrPlaceholderElement(Element):
    kind: ClassVar[ElementKind] = ElementKind.QR_PLACEHOLDER


@dataclass(frozen=True)
class Template:
    """A document layout: canvas size plus elements in insertion order."""

    id: str
    name: str
    category: TemplateCategory
    canvas_width: float
    canvas_height: float
    elements: Tuple[Element, ...] = ()


# --- Render-time data ------------------------------------------------------


@dataclass(frozen=True)
class Customer:
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Vehicle:
    brand: str = ""
    model: str = ""
    plate: str = ""


@dataclass(frozen=True)
class Reservation:
    number: str = ""
    start_date: Optional[date] = None
    total_amount: float = 0.0
    paid_amount: float = 0.0


@dataclass(frozen=True)
class StoreInfo:
    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    logo: str = ""  # image URL or data URI; empty when the store has none


@dataclass(frozen=True)
class DataContext:
    """Business records bound into a template when it is rendered.

    ``current_date`` is captured once so repeated renders stay identical.
    """

    customer: Customer = field(default_factory=Customer)
    vehicle: Vehicle = field(default_factory=Vehicle)
    reservation: Reservation = field(default_factory=Reservation)
    store: StoreInfo = field(default_factory=StoreInfo)
    current_date: date = field(default_factory=date.today)


def validate_geometry(kind: ElementKind, geometry: Geometry) -> List[str]:
    """Return the problems found in ``geometry``; never raises."""
    problems = []
    if geometry.width <= 0:
        problems.append("width must be greater than 0")
    if kind == ElementKind.DIVIDER:
        if geometry.height < 0:
            problems.append("divider thickness must not be negative")
    elif geometry.height <= 0:
        problems.append("height must be greater than 0")
    return problems


def validate_style(style: ElementStyle) -> List[str]:
    """Return the problems found in ``style``; never raises."""
    problems = []
    if not 0.0 <= style.opacity <= 1.0:
        problems.append("opacity must be between 0 and 1")
    if style.border_width < 0:
        problems.append("border_width must not be negative")
    if style.padding < 0:
        problems.append("padding must not be negative")
    if style.text_align not in TEXT_ALIGNMENTS:
        problems.append(f"text_align must be one of {', '.join(TEXT_ALIGNMENTS)}")
    return problems


def clamp_style_value(key: str, value):
    """Clamp a property-panel value into the range the model expects."""
    if key == "opacity":
        return min(1.0, max(0.0, float(value)))
    if key in ("border_width", "padding", "border_radius", "font_size", "line_height"):
        return max(0.0, float(value))
    if key == "z_index":
        return int(value)
    if key == "text_align" and value not in TEXT_ALIGNMENTS:
        return "left"
    return value


def coerce_style_value(key: str, value: Any) -> Any:
    """Convert ``value`` to the type of the ``key`` style field.

    Raises:
        TypeError: the value cannot stand for that field.
        ValueError: the value does not parse as a number.
    """
    expected = STYLE_FIELD_TYPES[key]
    if expected is str:
        if not isinstance(value, (str, int, float)):
            raise TypeError(f"{key} must be a string, got {type(value).__name__}")
        return str(value)
    if not isinstance(value, (str, int, float)):
        raise TypeError(f"{key} must be a number, got {type(value).__name__}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{key} must be a finite number")
    return int(number) if expected is int else number
