"""Pointer-driven interaction state machine for the template canvas.

The controller is single-pointer and single-focus: at most one element is
selected, dragged, resized or edited at any time. All state lives in an
explicit :class:`EditorSession`; nothing is stored at module level.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from .constants import DEFAULT_LOCALE, MIN_DIVIDER_THICKNESS, MIN_ELEMENT_SIZE
from .logger import get_logger
from .registry import content_of, decode_checklist, encode_checklist, variant_for
from .store import (
    duplicate_element,
    get_element,
    move_element,
    remove_element,
    resize_element,
    update_element,
)
from .types import ChecklistItem, ElementKind, Template

LOGGER = get_logger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Selected:
    element_id: str


@dataclass(frozen=True)
class Dragging:
    element_id: str
    pointer_start: Point
    element_start: Point


@dataclass(frozen=True)
class Resizing:
    element_id: str
    pointer_start: Point
    size_start: Point


@dataclass(frozen=True)
class Editing:
    element_id: str
    draft: str


State = Union[Idle, Selected, Dragging, Resizing, Editing]


@dataclass
class EditorSession:
    """Everything the editor needs for one open template."""

    template: Template
    state: State = field(default_factory=Idle)
    locale: str = DEFAULT_LOCALE

    @property
    def selected_element_id(self) -> Optional[str]:
        if isinstance(self.state, Idle):
            return None
        return self.state.element_id

    @property
    def drag_state(self) -> Optional[Dragging]:
        return self.state if isinstance(self.state, Dragging) else None


class InteractionController:
    """Translate pointer and edit events into template updates."""

    def __init__(self, session: EditorSession):
        self.session = session

    @property
    def state(self) -> State:
        return self.session.state

    @property
    def template(self) -> Template:
        return self.session.template

    def _set_template(self, template: Template) -> bool:
        if template is self.session.template:
            return False
        self.session.template = template
        return True

    # --- Selection ------------------------------------------------------------
    def select(self, element_id: Optional[str]) -> None:
        if not element_id or get_element(self.template, element_id) is None:
            self.deselect()
            return
        self._finish_gesture()
        self.session.state = Selected(element_id)

    def deselect(self) -> None:
        self._finish_gesture()
        self.session.state = Idle()

    def _finish_gesture(self) -> None:
        """End any drag or resize in progress, keeping the element selected."""
        state = self.session.state
        if isinstance(state, (Dragging, Resizing)):
            self.session.state = Selected(state.element_id)
        elif isinstance(state, Editing):
            # Leaving edit mode by interacting elsewhere discards the draft.
            self.session.state = Selected(state.element_id)

    # --- Pointer events --------------------------------------------------------
    def pointer_down(self, element_id: Optional[str], x: float, y: float) -> None:
        """Handle a press on ``element_id``, or on empty canvas when it is ``None``."""
        element = get_element(self.template, element_id) if element_id else None
        if element is None:
            self.deselect()
            return
        self._finish_gesture()
        self.session.state = Dragging(
            element_id=element.id,
            pointer_start=(float(x), float(y)),
            element_start=(element.geometry.x, element.geometry.y),
        )

    def begin_resize(self, element_id: str, x: float, y: float) -> None:
        """Start resizing from the element's bottom-right handle."""
        element = get_element(self.template, element_id)
        if element is None:
            return
        self._finish_gesture()
        self.session.state = Resizing(
            element_id=element.id,
            pointer_start=(float(x), float(y)),
            size_start=(element.geometry.width, element.geometry.height),
        )

    def pointer_move(self, x: float, y: float) -> bool:
        """Apply a pointer move; returns ``True`` when the template changed."""
        state = self.session.state
        if isinstance(state, Dragging):
            return self._drag_to(state, float(x), float(y))
        if isinstance(state, Resizing):
            return self._resize_to(state, float(x), float(y))
        return False

    def _drag_to(self, state: Dragging, x: float, y: float) -> bool:
        start_x, start_y = state.pointer_start
        element_x, element_y = state.element_start
        new_x = max(0.0, element_x + (x - start_x))
        new_y = max(0.0, element_y + (y - start_y))
        # Re-baseline so every move is relative to the last one.
        self.session.state = Dragging(state.element_id, (x, y), (new_x, new_y))
        return self._set_template(move_element(self.template, state.element_id, new_x, new_y))

    def _resize_to(self, state: Resizing, x: float, y: float) -> bool:
        element = get_element(self.template, state.element_id)
        if element is None:
            self.session.state = Idle()
            return False
        start_x, start_y = state.pointer_start
        width, height = state.size_start
        min_height = MIN_DIVIDER_THICKNESS if element.kind == ElementKind.DIVIDER else MIN_ELEMENT_SIZE
        new_width = max(MIN_ELEMENT_SIZE, width + (x - start_x))
        new_height = max(min_height, height + (y - start_y))
        self.session.state = Resizing(state.element_id, (x, y), (new_width, new_height))
        return self._set_template(resize_element(self.template, state.element_id, new_width, new_height))

    def pointer_up(self) -> None:
        state = self.session.state
        if isinstance(state, (Dragging, Resizing)):
            self.session.state = Selected(state.element_id)

    # --- Inline text editing ---------------------------------------------------
    def double_click(self, element_id: str) -> bool:
        """Enter edit mode on an already selected element that has content."""
        self._finish_gesture()
        state = self.session.state
        if not isinstance(state, Selected) or state.element_id != element_id:
            return False
        element = get_element(self.template, element_id)
        if element is None or variant_for(element.kind).content_attr is None:
            return False
        self.session.state = Editing(element_id, content_of(element))
        return True

    def set_draft(self, text: str) -> None:
        state = self.session.state
        if isinstance(state, Editing):
            self.session.state = Editing(state.element_id, text)

    def commit_edit(self) -> bool:
        state = self.session.state
        if not isinstance(state, Editing):
            return False
        self.session.state = Selected(state.element_id)
        return self._set_template(update_element(self.template, state.element_id, {"content": state.draft}))

    def cancel_edit(self) -> None:
        state = self.session.state
        if isinstance(state, Editing):
            self.session.state = Selected(state.element_id)

    # --- Element commands ------------------------------------------------------
    def toggle_checklist_item(self, element_id: str, index: int) -> bool:
        """Flip one checklist row; the selection state is left untouched."""
        element = get_element(self.template, element_id)
        if element is None or element.kind != ElementKind.CHECKLIST:
            return False
        items = decode_checklist(element.content)
        if not 0 <= index < len(items):
            return False
        target = items[index]
        items[index] = ChecklistItem(label=target.label, checked=not target.checked)
        return self._set_template(update_element(self.template, element_id, {"content": encode_checklist(items)}))

    def update_selected(self, changes: Mapping[str, Any]) -> bool:
        element_id = self.session.selected_element_id
        if element_id is None:
            return False
        return self._set_template(update_element(self.template, element_id, changes))

    def delete_selected(self) -> bool:
        element_id = self.session.selected_element_id
        if element_id is None:
            return False
        self.session.state = Idle()
        return self._set_template(remove_element(self.template, element_id))

    def duplicate_selected(self) -> Optional[str]:
        element_id = self.session.selected_element_id
        if element_id is None:
            return None
        template, new_id = duplicate_element(self.template, element_id)
        if new_id is None:
            return None
        self._set_template(template)
        self.session.state = Selected(new_id)
        LOGGER.debug("Duplicated %s as %s", element_id, new_id)
        return new_id

    def replace_template(self, template: Template) -> None:
        """Swap in a different template, e.g. after loading from disk."""
        self.session.template = template
        self.session.state = Idle()
