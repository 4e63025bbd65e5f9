"""Core TemplateModel class for the document designer.

This module provides the Qt model that exposes the elements of the template
being edited to QML and forwards pointer and edit events to the
:class:`~docdesigner.controller.InteractionController`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional

from PySide6.QtCore import (
    QAbstractListModel,
    QModelIndex,
    Property,
    Qt,
    Signal,
    Slot,
)
from PySide6.QtQml import QJSValue

from .clipboard import ClipboardMixin
from .constants import DEFAULT_LOCALE, MIN_DIVIDER_THICKNESS, MIN_ELEMENT_SIZE, PLACEHOLDERS
from .controller import EditorSession, Editing, InteractionController
from .defaults import sample_context
from .logger import get_logger
from .registry import content_of, decode_checklist
from .renderer import RenderedDocument, instruction_to_dict, render
from .store import (
    add_element_with_id,
    create_blank,
    create_default,
    duplicate_element,
    from_dict,
    get_element,
    move_element,
    ordered_elements,
    parse_category,
    remove_element,
    to_dict,
    update_element,
)
from .types import STYLE_FIELDS, DataContext, Element, ElementKind, Template, TemplateCategory, clamp_style_value

LOGGER = get_logger(__name__)


class TemplateModel(ClipboardMixin, QAbstractListModel):
    """Qt model exposing template elements to QML in paint order."""

    IdRole = Qt.UserRole + 1
    KindRole = Qt.UserRole + 2
    XRole = Qt.UserRole + 3
    YRole = Qt.UserRole + 4
    WidthRole = Qt.UserRole + 5
    HeightRole = Qt.UserRole + 6
    ContentRole = Qt.UserRole + 7
    ZIndexRole = Qt.UserRole + 8
    SelectedRole = Qt.UserRole + 9
    EditingRole = Qt.UserRole + 10
    DrawDataRole = Qt.UserRole + 11

    elementsChanged = Signal()
    selectionChanged = Signal()
    editingChanged = Signal()
    templateChanged = Signal()
    localeChanged = Signal()
    previewModeChanged = Signal()

    def __init__(
        self,
        template: Optional[Template] = None,
        context: Optional[DataContext] = None,
        locale: str = DEFAULT_LOCALE,
    ):
        super().__init__()
        if template is None:
            template = create_default(TemplateCategory.QUOTE, locale)
        self._session = EditorSession(template=template, locale=locale)
        self._controller = InteractionController(self._session)
        self._context = context if context is not None else sample_context()
        self._rows: List[Element] = ordered_elements(template)
        self._draw_data: Dict[str, Dict[str, Any]] = {}
        self._preview_mode = False
        self._refresh_draw_data()

    # --- Python API ------------------------------------------------------------
    @property
    def session(self) -> EditorSession:
        return self._session

    @property
    def controller(self) -> InteractionController:
        return self._controller

    def currentTemplate(self) -> Template:
        return self._session.template

    def setTemplate(self, template: Template) -> None:
        """Replace the whole template and clear the selection."""
        rows = ordered_elements(template)
        self.beginResetModel()
        self._controller.replace_template(template)
        self._rows = rows
        self._refresh_draw_data()
        self.endResetModel()
        self.elementsChanged.emit()
        self.selectionChanged.emit()
        self.editingChanged.emit()
        self.templateChanged.emit()

    def setDataContext(self, context: DataContext) -> None:
        self._context = context
        self._refresh_draw_data()
        self._emit_rows_changed([self.DrawDataRole])
        self.elementsChanged.emit()

    def to_dict(self) -> Dict[str, Any]:
        return to_dict(self._session.template)

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Load a template from :meth:`to_dict` output.

        Raises:
            TemplateFormatError: ``data`` is not a valid template.
        """
        self.setTemplate(from_dict(data))

    def renderDocument(self) -> RenderedDocument:
        """Render the current template for the editor, the preview and printing."""
        return render(self._session.template, self._context, self._session.locale)

    # --- Internal sync -----------------------------------------------------------
    def _refresh_draw_data(self) -> None:
        self._draw_data = {
            instruction.element_id: instruction_to_dict(instruction)
            for instruction in self.renderDocument().instructions
        }

    def _emit_rows_changed(self, roles: Optional[List[int]] = None) -> None:
        if not self._rows:
            return
        top = self.index(0, 0)
        bottom = self.index(len(self._rows) - 1, 0)
        self.dataChanged.emit(top, bottom, roles or [])

    def _sync_rows(self) -> None:
        rows = ordered_elements(self._session.template)
        self._refresh_draw_data()
        if [element.id for element in rows] == [element.id for element in self._rows]:
            changed = [index for index, element in enumerate(rows) if element != self._rows[index]]
            self._rows = rows
            for row in changed:
                index = self.index(row, 0)
                self.dataChanged.emit(index, index, [])
        else:
            self.beginResetModel()
            self._rows = rows
            self.endResetModel()
        self.elementsChanged.emit()

    def _commit(self, template: Template) -> None:
        if template is self._session.template:
            return
        self._session.template = template
        self._sync_rows()

    def _after(self, changed: bool, selected_before: Optional[str], editing_before: Any) -> None:
        if changed:
            self._sync_rows()
        selected_after = self._session.selected_element_id
        editing_after = self._session.state if isinstance(self._session.state, Editing) else None
        if selected_after != selected_before or editing_after != editing_before:
            self._emit_rows_changed([self.SelectedRole, self.EditingRole])
        if selected_after != selected_before:
            self.selectionChanged.emit()
        if editing_after != editing_before:
            self.editingChanged.emit()

    def _snapshot(self):
        state = self._session.state
        return self._session.selected_element_id, state if isinstance(state, Editing) else None

    # --- Qt model overrides -----------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = QModelIndex()) -> int:  # type: ignore[override]
        return len(self._rows)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._rows)):
            return None

        element = self._rows[index.row()]
        if role == self.IdRole:
            return element.id
        if role == self.KindRole:
            return element.kind.value
        if role == self.XRole:
            return element.geometry.x
        if role == self.YRole:
            return element.geometry.y
        if role == self.WidthRole:
            return element.geometry.width
        if role == self.HeightRole:
            return element.geometry.height
        if role == self.ContentRole:
            return content_of(element)
        if role == self.ZIndexRole:
            return element.style.z_index
        if role == self.SelectedRole:
            return element.id == self._session.selected_element_id
        if role == self.EditingRole:
            state = self._session.state
            return isinstance(state, Editing) and state.element_id == element.id
        if role == self.DrawDataRole:
            return self._draw_data.get(element.id, {})
        return None

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return {
            self.IdRole: b"elementId",
            self.KindRole: b"kind",
            self.XRole: b"x",
            self.YRole: b"y",
            self.WidthRole: b"width",
            self.HeightRole: b"height",
            self.ContentRole: b"content",
            self.ZIndexRole: b"zIndex",
            self.SelectedRole: b"selected",
            self.EditingRole: b"editing",
            self.DrawDataRole: b"drawData",
        }

    # --- Properties exposed to QML -----------------------------------------
    @Property(int, notify=elementsChanged)
    def count(self) -> int:
        return len(self._rows)

    @Property(float, notify=templateChanged)
    def canvasWidth(self) -> float:
        return self._session.template.canvas_width

    @Property(float, notify=templateChanged)
    def canvasHeight(self) -> float:
        return self._session.template.canvas_height

    @Property(str, notify=templateChanged)
    def category(self) -> str:
        return self._session.template.category.value

    def _get_template_name(self) -> str:
        return self._session.template.name

    def _set_template_name(self, name: str) -> None:
        template = self._session.template
        if name == template.name:
            return
        self._session.template = replace(template, name=name)
        self.templateChanged.emit()

    templateName = Property(str, _get_template_name, _set_template_name, notify=templateChanged)

    def _get_locale(self) -> str:
        return self._session.locale

    def _set_locale(self, locale: str) -> None:
        if not locale or locale == self._session.locale:
            return
        self._session.locale = locale
        self._refresh_draw_data()
        self._emit_rows_changed([self.DrawDataRole])
        self.localeChanged.emit()
        self.elementsChanged.emit()

    locale = Property(str, _get_locale, _set_locale, notify=localeChanged)

    def _get_preview_mode(self) -> bool:
        return self._preview_mode

    def _set_preview_mode(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._preview_mode:
            return
        if enabled:
            before = self._snapshot()
            self._controller.deselect()
            self._after(False, *before)
        self._preview_mode = enabled
        self.previewModeChanged.emit()

    previewMode = Property(bool, _get_preview_mode, _set_preview_mode, notify=previewModeChanged)

    @Property(str, notify=selectionChanged)
    def selectedElementId(self) -> str:
        return self._session.selected_element_id or ""

    @Property(str, notify=editingChanged)
    def editingElementId(self) -> str:
        state = self._session.state
        return state.element_id if isinstance(state, Editing) else ""

    @Property(str, notify=editingChanged)
    def editDraft(self) -> str:
        state = self._session.state
        return state.draft if isinstance(state, Editing) else ""

    @Property(list, notify=elementsChanged)
    def renderedElements(self) -> List[Dict[str, Any]]:
        """Renderer output for the current data context, in paint order."""
        return [self._draw_data[element.id] for element in self._rows if element.id in self._draw_data]

    @Property(list, constant=True)
    def placeholders(self) -> List[str]:
        return list(PLACEHOLDERS)

    @Property(list, constant=True)
    def elementKinds(self) -> List[str]:
        return [kind.value for kind in ElementKind]

    @Property(list, constant=True)
    def categories(self) -> List[str]:
        return [category.value for category in TemplateCategory]

    # --- Element commands --------------------------------------------------------
    @Slot(str, result=str)
    def addElement(self, kind: str) -> str:
        return self._add_element(kind)

    @Slot(str, float, float, result=str)
    def addElementAt(self, kind: str, x: float, y: float) -> str:
        return self._add_element(kind, x, y)

    def _add_element(self, kind: str, x: Optional[float] = None, y: Optional[float] = None) -> str:
        try:
            template, element_id = add_element_with_id(self._session.template, kind)
        except ValueError:
            LOGGER.warning("Unknown element kind %r", kind)
            return ""
        if x is not None and y is not None:
            template = move_element(template, element_id, max(0.0, x), max(0.0, y))
        self._commit(template)
        self.selectElement(element_id)
        return element_id

    @Slot(str, result=bool)
    def removeElement(self, element_id: str) -> bool:
        before = self._snapshot()
        if element_id == before[0]:
            self._controller.deselect()
        template = remove_element(self._session.template, element_id)
        changed = template is not self._session.template
        self._session.template = template
        self._after(changed, *before)
        return changed

    @Slot(str, result=str)
    def duplicateElement(self, element_id: str) -> str:
        template, new_id = duplicate_element(self._session.template, element_id)
        if new_id is None:
            return ""
        self._commit(template)
        self.selectElement(new_id)
        return new_id

    @Slot(str, "QVariant", result=bool)
    def updateElement(self, element_id: str, changes: Any) -> bool:
        """Apply property-panel changes; geometry and style values are clamped first."""
        if isinstance(changes, QJSValue):
            changes = changes.toVariant()
        if not isinstance(changes, dict) or not changes:
            return False
        element = get_element(self._session.template, element_id)
        if element is None:
            return False
        try:
            cleaned = {key: self._clamp_value(element, key, value) for key, value in changes.items()}
            template = update_element(self._session.template, element_id, cleaned)
        except (TypeError, ValueError) as exc:
            LOGGER.warning("Rejected changes for %s: %s", element_id, exc)
            return False
        before = self._session.template
        self._commit(template)
        return self._session.template is not before

    @staticmethod
    def _clamp_value(element: Element, key: str, value: Any) -> Any:
        if key in STYLE_FIELDS:
            return clamp_style_value(key, value)
        if key in ("x", "y"):
            return max(0.0, float(value))
        if key == "width":
            return max(MIN_ELEMENT_SIZE, float(value))
        if key == "height":
            minimum = MIN_DIVIDER_THICKNESS if element.kind == ElementKind.DIVIDER else MIN_ELEMENT_SIZE
            return max(minimum, float(value))
        return value

    @Slot(str, str, result=bool)
    def setElementContent(self, element_id: str, content: str) -> bool:
        return self.updateElement(element_id, {"content": content})

    @Slot(str, result="QVariantMap")
    def getElement(self, element_id: str) -> Dict[str, Any]:
        element = get_element(self._session.template, element_id)
        if element is None:
            return {}
        data = dict(self._draw_data.get(element_id, {}))
        data["content"] = content_of(element)
        return data

    @Slot(str, result=list)
    def checklistItems(self, element_id: str) -> List[Dict[str, Any]]:
        element = get_element(self._session.template, element_id)
        if element is None or element.kind != ElementKind.CHECKLIST:
            return []
        return [{"label": item.label, "checked": item.checked} for item in decode_checklist(element.content)]

    @Slot(str, int, result=bool)
    def toggleChecklistItem(self, element_id: str, index: int) -> bool:
        before = self._snapshot()
        changed = self._controller.toggle_checklist_item(element_id, index)
        self._after(changed, *before)
        return changed

    # --- Selection and pointer events -------------------------------------------
    @Slot(str)
    def selectElement(self, element_id: str) -> None:
        before = self._snapshot()
        self._controller.select(element_id or None)
        self._after(False, *before)

    @Slot()
    def clearSelection(self) -> None:
        before = self._snapshot()
        self._controller.deselect()
        self._after(False, *before)

    @Slot(str, float, float)
    def pointerDown(self, element_id: str, x: float, y: float) -> None:
        before = self._snapshot()
        self._controller.pointer_down(element_id or None, x, y)
        self._after(False, *before)

    @Slot(float, float, result=bool)
    def pointerMove(self, x: float, y: float) -> bool:
        before = self._snapshot()
        changed = self._controller.pointer_move(x, y)
        self._after(changed, *before)
        return changed

    @Slot()
    def pointerUp(self) -> None:
        before = self._snapshot()
        self._controller.pointer_up()
        self._after(False, *before)

    @Slot(str, float, float)
    def beginResize(self, element_id: str, x: float, y: float) -> None:
        before = self._snapshot()
        self._controller.begin_resize(element_id, x, y)
        self._after(False, *before)

    # --- Inline editing ------------------------------------------------------------
    @Slot(str, result=bool)
    def beginEdit(self, element_id: str) -> bool:
        before = self._snapshot()
        started = self._controller.double_click(element_id)
        self._after(False, *before)
        return started

    @Slot(str)
    def setEditDraft(self, text: str) -> None:
        before = self._snapshot()
        self._controller.set_draft(text)
        self._after(False, *before)

    @Slot(result=bool)
    def commitEdit(self) -> bool:
        before = self._snapshot()
        changed = self._controller.commit_edit()
        self._after(changed, *before)
        return changed

    @Slot()
    def cancelEdit(self) -> None:
        before = self._snapshot()
        self._controller.cancel_edit()
        self._after(False, *before)

    @Slot(result=bool)
    def deleteSelected(self) -> bool:
        before = self._snapshot()
        changed = self._controller.delete_selected()
        self._after(changed, *before)
        return changed

    @Slot(result=str)
    def duplicateSelected(self) -> str:
        before = self._snapshot()
        new_id = self._controller.duplicate_selected()
        self._after(new_id is not None, *before)
        return new_id or ""

    # --- Whole-template commands -------------------------------------------------
    @Slot(str, result=bool)
    def newBlankTemplate(self, category: str) -> bool:
        try:
            template = create_blank(parse_category(category))
        except ValueError:
            LOGGER.warning("Unknown template category %r", category)
            return False
        self.setTemplate(template)
        return True

    @Slot(str, result=bool)
    def loadDefaultTemplate(self, category: str) -> bool:
        try:
            template = create_default(parse_category(category), self._session.locale)
        except ValueError:
            LOGGER.warning("Unknown template category %r", category)
            return False
        self.setTemplate(template)
        return True
