"""Template store operations.

Templates are immutable values. Every operation here returns a new
:class:`Template` (or the same object when nothing changes) and never
mutates its argument, so holders of an earlier value are unaffected.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .constants import (
    BLANK_CANVAS_SIZE,
    DUPLICATE_OFFSET,
    TEMPLATE_FORMAT,
    TEMPLATE_FORMAT_VERSION,
)
from .errors import TemplateFormatError, UnknownCategoryError
from .logger import get_logger
from .registry import build_element, content_of, parse_kind, variant_for, with_content
from .types import (
    GEOMETRY_FIELDS,
    STYLE_FIELDS,
    Element,
    ElementKind,
    ElementStyle,
    Geometry,
    Template,
    TemplateCategory,
    coerce_style_value,
)

LOGGER = get_logger(__name__)


def parse_category(value: Union[str, TemplateCategory]) -> TemplateCategory:
    if isinstance(value, TemplateCategory):
        return value
    try:
        return TemplateCategory(str(value).strip().lower().replace("-", "_"))
    except ValueError:
        raise UnknownCategoryError(str(value)) from None


def create_blank(
    category: Union[str, TemplateCategory],
    template_id: Optional[str] = None,
    name: Optional[str] = None,
) -> Template:
    """Return an empty template on an A4 canvas."""
    category = parse_category(category)
    width, height = BLANK_CANVAS_SIZE
    return Template(
        id=template_id or f"tpl-blank-{category.value}",
        name=name or "Nouveau Design",
        category=category,
        canvas_width=width,
        canvas_height=height,
        elements=(),
    )


def create_default(category: Union[str, TemplateCategory], locale: str = "fr") -> Template:
    """Return the pre-authored template for ``category`` in ``locale``."""
    from .defaults import build_default_template

    return build_default_template(parse_category(category), locale)


# --- Lookup ---------------------------------------------------------------------


def get_element(template: Template, element_id: str) -> Optional[Element]:
    for element in template.elements:
        if element.id == element_id:
            return element
    return None


def ordered_elements(template: Template) -> List[Element]:
    """Return elements in paint order: ``z_index`` first, then insertion order."""
    indexed = list(enumerate(template.elements))
    indexed.sort(key=lambda pair: (pair[1].style.z_index, pair[0]))
    return [element for _, element in indexed]


def main_logo(template: Template) -> Optional[Element]:
    """Return the logo element that is treated as the document's main logo.

    When several logo elements exist, the first one in paint order wins.
    """
    for element in ordered_elements(template):
        if element.kind == ElementKind.LOGO:
            return element
    return None


def next_element_id(template: Template, kind: ElementKind) -> str:
    """Return ``<kind>_<n>`` with ``n`` above every numeric suffix in use."""
    max_id = 0
    for element in template.elements:
        try:
            id_parts = element.id.rsplit("_", 1)
            if len(id_parts) == 2:
                max_id = max(max_id, int(id_parts[1]) + 1)
        except ValueError:
            pass
    existing = {element.id for element in template.elements}
    candidate = f"{kind.value}_{max_id}"
    while candidate in existing:
        max_id += 1
        candidate = f"{kind.value}_{max_id}"
    return candidate


# --- Mutations --------------------------------------------------------------------


def add_element_with_id(
    template: Template,
    kind: Union[str, ElementKind],
    seed: Any = None,
) -> Tuple[Template, str]:
    """Append a new element and return the new template together with its id."""
    kind = parse_kind(kind)
    element_id = next_element_id(template, kind)
    element = build_element(kind, element_id, seed)
    return replace(template, elements=template.elements + (element,)), element_id


def add_element(template: Template, kind: Union[str, ElementKind], seed: Any = None) -> Template:
    return add_element_with_id(template, kind, seed)[0]


def _apply_changes(element: Element, changes: Mapping[str, Any]) -> Element:
    geometry_changes = {}
    style_changes = {}
    updated = element
    for key, value in changes.items():
        if key in GEOMETRY_FIELDS:
            geometry_changes[key] = float(value)
        elif key in STYLE_FIELDS:
            style_changes[key] = coerce_style_value(key, value)
        elif key == "content":
            updated = with_content(updated, "" if value is None else str(value))
        else:
            LOGGER.debug("Ignoring unknown element property %r on %s", key, element.id)
    if geometry_changes:
        updated = replace(updated, geometry=replace(updated.geometry, **geometry_changes))
    if style_changes:
        updated = replace(updated, style=replace(updated.style, **style_changes))
    return updated


def update_element(template: Template, element_id: str, changes: Mapping[str, Any]) -> Template:
    """Merge ``changes`` into the element with ``element_id``.

    Keys may name geometry fields, style fields or ``content``. A stale id
    returns ``template`` itself. Style values are converted to their field
    types, so a value such as ``"abc"`` for ``z_index`` raises ``ValueError``.
    """
    for index, element in enumerate(template.elements):
        if element.id == element_id:
            updated = _apply_changes(element, changes)
            if updated == element:
                return template
            elements = template.elements[:index] + (updated,) + template.elements[index + 1:]
            return replace(template, elements=elements)
    LOGGER.debug("update_element: no element %r", element_id)
    return template


def move_element(template: Template, element_id: str, x: float, y: float) -> Template:
    return update_element(template, element_id, {"x": x, "y": y})


def resize_element(template: Template, element_id: str, width: float, height: float) -> Template:
    return update_element(template, element_id, {"width": width, "height": height})


def remove_element(template: Template, element_id: str) -> Template:
    elements = tuple(element for element in template.elements if element.id != element_id)
    if len(elements) == len(template.elements):
        return template
    return replace(template, elements=elements)


def duplicate_element(
    template: Template,
    element_id: str,
    offset: float = DUPLICATE_OFFSET,
) -> Tuple[Template, Optional[str]]:
    """Append a shifted copy of an element; returns ``(template, new_id)``."""
    source = get_element(template, element_id)
    if source is None:
        return template, None
    new_id = next_element_id(template, source.kind)
    geometry = replace(
        source.geometry,
        x=max(0.0, source.geometry.x + offset),
        y=max(0.0, source.geometry.y + offset),
    )
    copy = replace(source, id=new_id, geometry=geometry)
    return replace(template, elements=template.elements + (copy,)), new_id


def insert_element(template: Template, element: Element) -> Tuple[Template, str]:
    """Append ``element``, renaming it when its id is already taken."""
    if get_element(template, element.id) is not None:
        element = replace(element, id=next_element_id(template, element.kind))
    return replace(template, elements=template.elements + (element,)), element.id


# --- Serialization ------------------------------------------------------------------


def element_to_dict(element: Element) -> Dict[str, Any]:
    geometry = element.geometry
    return {
        "id": element.id,
        "kind": element.kind.value,
        "content": content_of(element),
        "geometry": {field: getattr(geometry, field) for field in GEOMETRY_FIELDS},
        "style": {field: getattr(element.style, field) for field in STYLE_FIELDS},
    }


def element_from_dict(data: Mapping[str, Any]) -> Element:
    try:
        kind = parse_kind(data["kind"])
        geometry_data = data["geometry"]
        geometry = Geometry(**{field: float(geometry_data[field]) for field in GEOMETRY_FIELDS})
        style_data = data.get("style", {})
        if not isinstance(style_data, Mapping):
            raise TypeError("element style must be an object")
        style = ElementStyle(
            **{field: coerce_style_value(field, style_data[field]) for field in STYLE_FIELDS if field in style_data}
        )
        element_id = str(data["id"])
    except (KeyError, TypeError, ValueError) as exc:
        raise TemplateFormatError(f"Invalid element entry: {exc}") from exc
    spec = variant_for(kind)
    kwargs: Dict[str, Any] = {"id": element_id, "geometry": geometry, "style": style}
    if spec.content_attr is not None:
        kwargs[spec.content_attr] = str(data.get("content", ""))
    return spec.element_class(**kwargs)


def to_dict(template: Template) -> Dict[str, Any]:
    """Serialize ``template`` to plain JSON-compatible data."""
    return {
        "format": TEMPLATE_FORMAT,
        "version": TEMPLATE_FORMAT_VERSION,
        "id": template.id,
        "name": template.name,
        "category": template.category.value,
        "canvas_width": template.canvas_width,
        "canvas_height": template.canvas_height,
        "elements": [element_to_dict(element) for element in template.elements],
    }


def from_dict(data: Mapping[str, Any]) -> Template:
    """Rebuild a template from :func:`to_dict` output.

    Raises:
        TemplateFormatError: ``data`` is not a template of a known version.
    """
    if not isinstance(data, Mapping) or data.get("format") != TEMPLATE_FORMAT:
        raise TemplateFormatError("Not a document template")
    version = data.get("version")
    if version != TEMPLATE_FORMAT_VERSION:
        raise TemplateFormatError(f"Unsupported template version: {version!r}")
    elements_data = data.get("elements", [])
    if not isinstance(elements_data, list):
        raise TemplateFormatError("Template elements must be a list")
    try:
        category = parse_category(data["category"])
        template = Template(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            category=category,
            canvas_width=float(data["canvas_width"]),
            canvas_height=float(data["canvas_height"]),
            elements=tuple(element_from_dict(entry) for entry in elements_data),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise TemplateFormatError(f"Invalid template: {exc}") from exc
    ids = [element.id for element in template.elements]
    if len(ids) != len(set(ids)):
        raise TemplateFormatError("Duplicate element ids in template")
    return template


def serialize(template: Template) -> str:
    return json.dumps(to_dict(template), ensure_ascii=False, sort_keys=True, indent=2)


def deserialize(text: Union[str, bytes]) -> Template:
    """Parse :func:`serialize` output.

    Raises:
        TemplateFormatError: the text is not valid template JSON.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateFormatError(f"Template is not UTF-8: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TemplateFormatError(f"Template is not valid JSON: {exc}") from exc
    return from_dict(data)
