"""Turn a template plus business data into draw instructions.

The editor canvas, the preview and the print sink all consume the output of
:func:`render`, so what is edited is what is printed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Dict, List, Tuple

from .constants import DEFAULT_LOCALE
from .registry import Payload, variant_for
from .store import ordered_elements
from .types import DataContext, ElementKind, ElementStyle, Template


@dataclass(frozen=True)
class DrawInstruction:
    element_id: str
    kind: ElementKind
    x: float
    y: float
    width: float
    height: float
    style: ElementStyle
    payload: Payload
    principal: bool = False


@dataclass(frozen=True)
class RenderedDocument:
    canvas_width: float
    canvas_height: float
    instructions: Tuple[DrawInstruction, ...]


def render(template: Template, context: DataContext, locale: str = DEFAULT_LOCALE) -> RenderedDocument:
    """Render ``template`` against ``context``.

    Pure: the same template, context and locale always produce an equal
    document. Instructions come back in paint order, and the first logo in
    that order is flagged as the principal logo.
    """
    instructions = []
    principal_seen = False
    for element in ordered_elements(template):
        principal = False
        if element.kind == ElementKind.LOGO and not principal_seen:
            principal = principal_seen = True
        geometry = element.geometry
        instructions.append(
            DrawInstruction(
                element_id=element.id,
                kind=element.kind,
                x=geometry.x,
                y=geometry.y,
                width=geometry.width,
                height=geometry.height,
                style=element.style,
                payload=variant_for(element.kind).render(element, context, locale),
                principal=principal,
            )
        )
    return RenderedDocument(
        canvas_width=template.canvas_width,
        canvas_height=template.canvas_height,
        instructions=tuple(instructions),
    )


def _plain(value: Any) -> Any:
    if is_dataclass(value):
        return {key: _plain(item) for key, item in asdict(value).items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def instruction_to_dict(instruction: DrawInstruction) -> Dict[str, Any]:
    """Flatten one instruction into the variant map QML delegates read."""
    payload = _plain(instruction.payload)
    if instruction.kind == ElementKind.LOGO:
        payload["isPlaceholder"] = instruction.payload.is_placeholder
    return {
        "elementId": instruction.element_id,
        "kind": instruction.kind.value,
        "x": instruction.x,
        "y": instruction.y,
        "width": instruction.width,
        "height": instruction.height,
        "style": asdict(instruction.style),
        "payload": payload,
        "principal": instruction.principal,
    }


def render_to_dicts(template: Template, context: DataContext, locale: str = DEFAULT_LOCALE) -> List[Dict[str, Any]]:
    return [instruction_to_dict(instruction) for instruction in render(template, context, locale).instructions]
