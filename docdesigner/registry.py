"""Element variant registry.

Each :class:`ElementKind` has one :class:`VariantSpec` describing how to build
a default element of that kind and how the renderer turns it into a payload.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

from .constants import (
    CHECKLIST_PRESETS,
    DEFAULT_ANCHOR,
    DEFAULT_LOCALE,
    ELEMENT_PRESETS,
    FUEL_MILEAGE_LABELS,
    FUEL_MILEAGE_PLACEHOLDER,
    QR_GRID_SIZE,
    TABLE_AMOUNT,
    TABLE_DESIGNATION,
    TABLE_HEADERS,
)
from .logger import get_logger
from .substitution import substitute
from .types import (
    BoundTextElement,
    ChecklistElement,
    ChecklistItem,
    DataContext,
    DividerElement,
    Element,
    ElementKind,
    ElementStyle,
    FuelMileageElement,
    Geometry,
    LogoElement,
    QrPlaceholderElement,
    SignatureAreaElement,
    StaticTextElement,
    TableElement,
)

LOGGER = get_logger(__name__)


# --- Render payloads --------------------------------------------------------


@dataclass(frozen=True)
class TextPayload:
    text: str


@dataclass(frozen=True)
class LogoPayload:
    """Store logo drawn with object-fit cover, or a labelled placeholder box."""

    image: str
    label: str
    fit: str = "cover"

    @property
    def is_placeholder(self) -> bool:
        return not self.image


@dataclass(frozen=True)
class TablePayload:
    headers: Tuple[str, str, str]
    rows: Tuple[Tuple[str, str, str], ...]


@dataclass(frozen=True)
class DividerPayload:
    thickness: float


@dataclass(frozen=True)
class SignaturePayload:
    caption: str


@dataclass(frozen=True)
class ChecklistPayload:
    items: Tuple[ChecklistItem, ...]


@dataclass(frozen=True)
class FuelMileagePayload:
    odometer_label: str
    odometer: str
    fuel_label: str
    fuel_level: str


@dataclass(frozen=True)
class QrPayload:
    cells: Tuple[Tuple[bool, ...], ...]


Payload = Union[
    TextPayload,
    LogoPayload,
    TablePayload,
    DividerPayload,
    SignaturePayload,
    ChecklistPayload,
    FuelMileagePayload,
    QrPayload,
]

RenderFn = Callable[[Element, DataContext, str], Payload]


# --- Checklist content ------------------------------------------------------


def decode_checklist(content: str) -> List[ChecklistItem]:
    """Decode checklist JSON; malformed content yields an empty list."""
    try:
        raw = json.loads(content or "[]")
    except (json.JSONDecodeError, TypeError):
        LOGGER.warning("Ignoring malformed checklist content")
        return []
    if not isinstance(raw, list):
        return []
    items = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        items.append(ChecklistItem(label=str(entry.get("label", "")), checked=bool(entry.get("checked", False))))
    return items


def encode_checklist(items: Iterable[ChecklistItem]) -> str:
    return json.dumps(
        [{"label": item.label, "checked": item.checked} for item in items],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def checklist_content_from_seed(seed: Any) -> str:
    """Turn a preset name, a list of labels or raw JSON into checklist content."""
    if isinstance(seed, (list, tuple)):
        return encode_checklist(
            item if isinstance(item, ChecklistItem) else ChecklistItem(label=str(item)) for item in seed
        )
    text = str(seed or "")
    preset = CHECKLIST_PRESETS.get(text.lower())
    if preset is not None:
        return encode_checklist(ChecklistItem(label=label) for label in preset)
    return text if text.strip() else "[]"


# --- Per-kind renderers ------------------------------------------------------


def _render_static_text(element: Element, context: DataContext, locale: str) -> Payload:
    return TextPayload(text=element.text)


def _render_bound_text(element: Element, context: DataContext, locale: str) -> Payload:
    return TextPayload(text=substitute(element.text, context, locale))


def _render_logo(element: Element, context: DataContext, locale: str) -> Payload:
    return LogoPayload(image=context.store.logo, label=element.label)


def _render_table(element: Element, context: DataContext, locale: str) -> Payload:
    headers = TABLE_HEADERS.get(locale, TABLE_HEADERS[DEFAULT_LOCALE])
    row = (
        substitute(TABLE_DESIGNATION, context, locale),
        "1",
        substitute(TABLE_AMOUNT, context, locale),
    )
    return TablePayload(headers=headers, rows=(row,))


def _render_divider(element: Element, context: DataContext, locale: str) -> Payload:
    return DividerPayload(thickness=element.geometry.height)


def _render_signature(element: Element, context: DataContext, locale: str) -> Payload:
    return SignaturePayload(caption=element.caption)


def _render_checklist(element: Element, context: DataContext, locale: str) -> Payload:
    return ChecklistPayload(items=tuple(decode_checklist(element.content)))


def _render_fuel_mileage(element: Element, context: DataContext, locale: str) -> Payload:
    odometer_label, fuel_label = FUEL_MILEAGE_LABELS.get(locale, FUEL_MILEAGE_LABELS[DEFAULT_LOCALE])
    odometer, fuel_level = FUEL_MILEAGE_PLACEHOLDER
    return FuelMileagePayload(
        odometer_label=odometer_label,
        odometer=odometer,
        fuel_label=fuel_label,
        fuel_level=fuel_level,
    )


def _render_qr(element: Element, context: DataContext, locale: str) -> Payload:
    return QrPayload(cells=tuple(tuple(True for _ in range(QR_GRID_SIZE)) for _ in range(QR_GRID_SIZE)))


# --- Registry ------------------------------------------------------------------


@dataclass(frozen=True)
class VariantSpec:
    """Construction and render contract for one element kind."""

    kind: ElementKind
    element_class: Type[Element]
    content_attr: Optional[str]
    consumes: Tuple[str, ...]
    render: RenderFn
    uses_text_style: bool = True


VARIANTS: Dict[ElementKind, VariantSpec] = {
    spec.kind: spec
    for spec in (
        VariantSpec(ElementKind.STATIC_TEXT, StaticTextElement, "text", ("content", "geometry", "style"), _render_static_text),
        VariantSpec(ElementKind.BOUND_TEXT, BoundTextElement, "text", ("content", "geometry", "style"), _render_bound_text),
        VariantSpec(ElementKind.LOGO, LogoElement, "label", ("geometry", "style"), _render_logo),
        VariantSpec(ElementKind.TABLE, TableElement, None, ("geometry", "style"), _render_table),
        VariantSpec(ElementKind.DIVIDER, DividerElement, None, ("geometry",), _render_divider, uses_text_style=False),
        VariantSpec(
            ElementKind.SIGNATURE_AREA,
            SignatureAreaElement,
            "caption",
            ("content", "geometry", "style"),
            _render_signature,
        ),
        VariantSpec(ElementKind.CHECKLIST, ChecklistElement, "content", ("content", "geometry", "style"), _render_checklist),
        VariantSpec(ElementKind.FUEL_MILEAGE, FuelMileageElement, None, ("geometry", "style"), _render_fuel_mileage),
        VariantSpec(ElementKind.QR_PLACEHOLDER, QrPlaceholderElement, None, ("geometry",), _render_qr),
    )
}


def variant_for(kind: ElementKind) -> VariantSpec:
    return VARIANTS[kind]


def parse_kind(value: Union[str, ElementKind]) -> ElementKind:
    """Accept an enum member or its value; raises ``ValueError`` otherwise."""
    if isinstance(value, ElementKind):
        return value
    return ElementKind(str(value).strip().lower().replace("-", "_"))


def content_of(element: Element) -> str:
    """Return the kind-specific content of ``element`` ("" for structural kinds)."""
    attr = variant_for(element.kind).content_attr
    if attr is None:
        return ""
    return getattr(element, attr)


def with_content(element: Element, content: str) -> Element:
    """Return ``element`` with its content replaced; structural kinds are returned as-is."""
    attr = variant_for(element.kind).content_attr
    if attr is None:
        return element
    if getattr(element, attr) == content:
        return element
    return replace(element, **{attr: content})


def build_element(
    kind: ElementKind,
    element_id: str,
    seed: Any = None,
    x: Optional[float] = None,
    y: Optional[float] = None,
) -> Element:
    """Create an element of ``kind`` with registry defaults.

    Args:
        kind: Element kind to create.
        element_id: Identifier for the new element.
        seed: Optional initial content. Checklists also accept a preset
            name or a list of labels.
        x: Horizontal position; defaults to the registry anchor.
        y: Vertical position; defaults to the registry anchor.
    """
    spec = variant_for(kind)
    preset = ELEMENT_PRESETS[kind]
    anchor_x, anchor_y = DEFAULT_ANCHOR
    geometry = Geometry(
        x=anchor_x if x is None else float(x),
        y=anchor_y if y is None else float(y),
        width=float(preset["width"]),
        height=float(preset["height"]),
    )
    style = ElementStyle(**preset.get("style", {}))
    kwargs: Dict[str, Any] = {"id": element_id, "geometry": geometry, "style": style}
    if spec.content_attr is not None:
        raw = preset["content"] if seed is None else seed
        if kind == ElementKind.CHECKLIST:
            kwargs[spec.content_attr] = checklist_content_from_seed(raw)
        else:
            kwargs[spec.content_attr] = str(raw)
    return spec.element_class(**kwargs)
