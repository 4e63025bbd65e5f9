"""Tests for the Qt-facing TemplateModel and the designer window."""

import json

import pytest
from PySide6.QtCore import QByteArray, QMimeData, QModelIndex
from PySide6.QtGui import QGuiApplication
from PySide6.QtQml import QQmlApplicationEngine

from docdesigner import ui
from docdesigner.constants import CLIPBOARD_FORMAT, CLIPBOARD_MIME_TYPE
from docdesigner.manager import EditorSettings
from docdesigner.model import TemplateModel
from docdesigner.registry import decode_checklist
from docdesigner.renderer import instruction_to_dict
from docdesigner.store import create_blank, create_default, get_element, serialize, to_dict
from docdesigner.types import DataContext, ElementKind, Reservation
from docdesigner.ui import create_designer_window


@pytest.fixture
def empty_model(app):
    return TemplateModel(create_blank("quote"), context=DataContext())


@pytest.fixture
def invoice_model(app):
    context = DataContext(reservation=Reservation(total_amount=75000, paid_amount=50000))
    return TemplateModel(create_default("invoice", "fr"), context=context)


def _role(model, row, role):
    return model.data(model.index(row, 0), role)


class TestTemplateModelBasics:
    def test_default_model_loads_quote(self, app):
        model = TemplateModel()
        assert model.rowCount() == len(create_default("quote", "fr").elements)
        assert model.category == "quote"

    def test_empty_model(self, empty_model):
        assert empty_model.rowCount() == 0
        assert empty_model.count == 0
        assert empty_model.canvasWidth == 595.0

    def test_role_names(self, empty_model):
        names = set(empty_model.roleNames().values())
        assert {b"elementId", b"kind", b"x", b"y", b"width", b"height", b"selected", b"drawData"} <= names

    def test_invalid_index_returns_none(self, empty_model):
        assert empty_model.data(QModelIndex(), TemplateModel.IdRole) is None

    def test_add_element(self, empty_model):
        element_id = empty_model.addElement("bound_text")
        assert element_id == "bound_text_0"
        assert empty_model.rowCount() == 1
        assert _role(empty_model, 0, TemplateModel.KindRole) == "bound_text"
        assert _role(empty_model, 0, TemplateModel.ContentRole) == "{{client_name}}"
        assert empty_model.selectedElementId == element_id

    def test_add_element_at_position(self, empty_model):
        element_id = empty_model.addElementAt("logo", 30.0, -5.0)
        element = get_element(empty_model.currentTemplate(), element_id)
        assert (element.geometry.x, element.geometry.y) == (30.0, 0.0)

    def test_add_unknown_kind(self, empty_model):
        assert empty_model.addElement("sticker") == ""
        assert empty_model.rowCount() == 0

    def test_remove_element(self, empty_model):
        element_id = empty_model.addElement("static_text")
        assert empty_model.removeElement(element_id) is True
        assert empty_model.rowCount() == 0
        assert empty_model.selectedElementId == ""
        assert empty_model.removeElement(element_id) is False

    def test_update_element_clamps_style(self, empty_model):
        element_id = empty_model.addElement("static_text")
        assert empty_model.updateElement(element_id, {"opacity": 3, "x": 12}) is True
        element = get_element(empty_model.currentTemplate(), element_id)
        assert element.style.opacity == 1.0
        assert element.geometry.x == 12.0

    def test_update_missing_element(self, empty_model):
        assert empty_model.updateElement("ghost", {"x": 1}) is False

    def test_update_element_clamps_geometry(self, empty_model):
        element_id = empty_model.addElement("static_text")
        assert empty_model.updateElement(element_id, {"width": -5, "height": 0, "x": -30}) is True
        geometry = get_element(empty_model.currentTemplate(), element_id).geometry
        assert (geometry.x, geometry.y, geometry.width, geometry.height) == (0.0, 150.0, 10.0, 10.0)

    def test_divider_height_may_go_down_to_one(self, empty_model):
        element_id = empty_model.addElement("divider")
        empty_model.updateElement(element_id, {"height": 0})
        assert get_element(empty_model.currentTemplate(), element_id).geometry.height == 1.0

    def test_update_element_rejects_mistyped_values(self, empty_model):
        element_id = empty_model.addElement("static_text")
        before = empty_model.currentTemplate()
        assert empty_model.updateElement(element_id, {"z_index": "abc"}) is False
        assert empty_model.updateElement(element_id, {"width": "wide"}) is False
        assert empty_model.currentTemplate() is before

    def test_duplicate_element(self, empty_model):
        element_id = empty_model.addElement("static_text")
        new_id = empty_model.duplicateElement(element_id)
        assert new_id and new_id != element_id
        assert empty_model.rowCount() == 2
        assert empty_model.selectedElementId == new_id

    def test_template_name_property(self, empty_model):
        empty_model.templateName = "Devis Été"
        assert empty_model.currentTemplate().name == "Devis Été"


class TestPointerSlots:
    def test_drag_updates_rows(self, empty_model):
        element_id = empty_model.addElement("static_text")
        empty_model.pointerDown(element_id, 60.0, 160.0)
        assert empty_model.pointerMove(70.0, 180.0) is True
        empty_model.pointerUp()
        assert _role(empty_model, 0, TemplateModel.XRole) == 60.0
        assert _role(empty_model, 0, TemplateModel.YRole) == 170.0
        assert _role(empty_model, 0, TemplateModel.SelectedRole) is True

    def test_pointer_down_on_canvas_clears_selection(self, empty_model):
        empty_model.addElement("static_text")
        empty_model.pointerDown("", 1.0, 1.0)
        assert empty_model.selectedElementId == ""

    def test_selection_signal(self, empty_model):
        element_id = empty_model.addElement("static_text")
        empty_model.clearSelection()
        received = []
        empty_model.selectionChanged.connect(lambda: received.append(empty_model.selectedElementId))
        empty_model.selectElement(element_id)
        assert received == [element_id]

    def test_resize(self, empty_model):
        element_id = empty_model.addElement("static_text")
        empty_model.beginResize(element_id, 250.0, 190.0)
        empty_model.pointerMove(260.0, 200.0)
        empty_model.pointerUp()
        assert _role(empty_model, 0, TemplateModel.WidthRole) == 210.0
        assert _role(empty_model, 0, TemplateModel.HeightRole) == 50.0

    def test_inline_edit(self, empty_model):
        element_id = empty_model.addElement("static_text")
        assert empty_model.beginEdit(element_id) is True
        assert empty_model.editingElementId == element_id
        assert _role(empty_model, 0, TemplateModel.EditingRole) is True
        empty_model.setEditDraft("Bonjour")
        assert empty_model.editDraft == "Bonjour"
        assert empty_model.commitEdit() is True
        assert empty_model.editingElementId == ""
        assert _role(empty_model, 0, TemplateModel.ContentRole) == "Bonjour"

    def test_delete_and_duplicate_selected(self, empty_model):
        element_id = empty_model.addElement("static_text")
        copy_id = empty_model.duplicateSelected()
        assert copy_id and copy_id != element_id
        assert empty_model.deleteSelected() is True
        assert empty_model.rowCount() == 1


class TestChecklistSlots:
    def test_toggle_checklist_item(self, empty_model):
        element_id = empty_model.addElement("checklist")
        empty_model.clearSelection()
        assert empty_model.toggleChecklistItem(element_id, 1) is True
        items = empty_model.checklistItems(element_id)
        assert [item["checked"] for item in items[:3]] == [False, True, False]
        assert empty_model.selectedElementId == ""

    def test_checklist_items_for_other_kind(self, empty_model):
        element_id = empty_model.addElement("logo")
        assert empty_model.checklistItems(element_id) == []


class TestRenderedElements:
    def test_invoice_preview_is_substituted(self, invoice_model):
        texts = [
            entry["payload"].get("text", "")
            for entry in invoice_model.renderedElements
            if entry["kind"] == "bound_text"
        ]
        assert any("75 000" in text for text in texts)
        assert any("25 000" in text for text in texts)

    def test_draw_data_role(self, invoice_model):
        entry = _role(invoice_model, 0, TemplateModel.DrawDataRole)
        assert entry["elementId"] == _role(invoice_model, 0, TemplateModel.IdRole)

    def test_locale_change_rerenders(self, invoice_model):
        changes = []
        invoice_model.localeChanged.connect(lambda: changes.append(invoice_model.locale))
        invoice_model.locale = "en"
        assert changes == ["en"]
        texts = [entry["payload"].get("text", "") for entry in invoice_model.renderedElements]
        assert any("75,000" in text for text in texts)

    def test_set_data_context(self, empty_model):
        empty_model.addElement("bound_text")
        empty_model.setDataContext(DataContext())
        (entry,) = empty_model.renderedElements
        assert entry["payload"]["text"] == ""

    def test_render_document_matches_rows(self, invoice_model):
        document = invoice_model.renderDocument()
        assert [instruction_to_dict(instruction) for instruction in document.instructions] == (
            invoice_model.renderedElements
        )
        assert (document.canvas_width, document.canvas_height) == (
            invoice_model.canvasWidth,
            invoice_model.canvasHeight,
        )


class TestPreviewMode:
    def test_preview_is_off_by_default(self, invoice_model):
        assert invoice_model.previewMode is False

    def test_entering_preview_clears_selection(self, invoice_model):
        invoice_model.selectElement(_role(invoice_model, 0, TemplateModel.IdRole))
        changes = []
        invoice_model.previewModeChanged.connect(lambda: changes.append(invoice_model.previewMode))
        invoice_model.previewMode = True
        assert changes == [True]
        assert invoice_model.selectedElementId == ""

    def test_preview_shows_same_draw_data_as_canvas(self, invoice_model):
        editor = [_role(invoice_model, row, TemplateModel.DrawDataRole) for row in range(invoice_model.rowCount())]
        invoice_model.previewMode = True
        assert invoice_model.renderedElements == editor

    def test_leaving_preview(self, invoice_model):
        invoice_model.previewMode = True
        invoice_model.previewMode = False
        assert invoice_model.previewMode is False


class TestWholeTemplate:
    def test_load_default_template(self, empty_model):
        assert empty_model.loadDefaultTemplate("check_out") is True
        assert empty_model.category == "check_out"
        assert any(
            element.kind == ElementKind.CHECKLIST for element in empty_model.currentTemplate().elements
        )

    def test_new_blank_template(self, invoice_model):
        assert invoice_model.newBlankTemplate("contract") is True
        assert invoice_model.rowCount() == 0

    def test_unknown_category(self, empty_model):
        assert empty_model.newBlankTemplate("brochure") is False
        assert empty_model.loadDefaultTemplate("brochure") is False

    def test_to_dict_from_dict(self, invoice_model, empty_model):
        empty_model.from_dict(invoice_model.to_dict())
        assert empty_model.currentTemplate() == invoice_model.currentTemplate()
        assert empty_model.rowCount() == invoice_model.rowCount()


class TestClipboard:
    def test_copy_and_paste_element(self, empty_model):
        element_id = empty_model.addElement("signature_area")
        assert empty_model.copyElementToClipboard(element_id) is True
        assert empty_model.hasClipboardElement() is True
        new_id = empty_model.pasteFromClipboard()
        assert new_id and new_id != element_id
        pasted = get_element(empty_model.currentTemplate(), new_id)
        original = get_element(empty_model.currentTemplate(), element_id)
        assert pasted.caption == original.caption
        assert pasted.geometry.x == original.geometry.x + 20
        assert empty_model.selectedElementId == new_id

    def test_copy_missing_element(self, empty_model):
        assert empty_model.copyElementToClipboard("ghost") is False

    def test_paste_ignores_foreign_payload(self, empty_model):
        mime_data = QMimeData()
        mime_data.setData(CLIPBOARD_MIME_TYPE, QByteArray(json.dumps({"format": "other"}).encode("utf-8")))
        QGuiApplication.clipboard().setMimeData(mime_data)
        assert empty_model.hasClipboardElement() is False
        assert empty_model.pasteFromClipboard() == ""

    def test_non_utf8_clipboard_data_is_ignored(self, empty_model):
        mime_data = QMimeData()
        mime_data.setData(CLIPBOARD_MIME_TYPE, QByteArray(b"\xff\xfe\x00garbage"))
        QGuiApplication.clipboard().setMimeData(mime_data)
        assert empty_model.hasClipboardElement() is False
        assert empty_model.pasteFromClipboard() == ""

    def test_paste_rejects_mistyped_style(self, empty_model):
        element_id = empty_model.addElement("static_text")
        element = to_dict(empty_model.currentTemplate())["elements"][0]
        element["style"]["z_index"] = "abc"
        payload = {"format": CLIPBOARD_FORMAT, "version": 1, "element": element}
        mime_data = QMimeData()
        mime_data.setData(CLIPBOARD_MIME_TYPE, QByteArray(json.dumps(payload).encode("utf-8")))
        QGuiApplication.clipboard().setMimeData(mime_data)
        assert empty_model.pasteFromClipboard() == ""
        assert [entry.id for entry in empty_model.currentTemplate().elements] == [element_id]

    def test_paste_checklist_keeps_items(self, empty_model):
        element_id = empty_model.addElement("checklist")
        empty_model.toggleChecklistItem(element_id, 0)
        empty_model.copySelectedToClipboard()
        new_id = empty_model.pasteFromClipboard()
        items = decode_checklist(get_element(empty_model.currentTemplate(), new_id).content)
        assert items[0].checked is True


class TestCreateDesignerWindow:
    def test_create_window(self, app, invoice_model):
        engine = create_designer_window(invoice_model)
        assert isinstance(engine, QQmlApplicationEngine)
        assert engine.rootObjects()


class TestMain:
    @pytest.fixture(autouse=True)
    def isolated_settings(self, monkeypatch, qsettings):
        monkeypatch.setattr(ui, "EditorSettings", lambda: EditorSettings(qsettings))

    def test_smoke_run(self, app):
        assert ui.main(["--smoke", "--category", "invoice", "--locale", "ar"]) == 0

    def test_unknown_category_exits_with_error(self, app):
        assert ui.main(["--smoke", "--category", "brochure"]) == 2

    def test_file_argument_accepts_url(self, app, monkeypatch, tmp_path):
        path = tmp_path / "devis.doctpl"
        path.write_text(serialize(create_default("quote", "ar")), encoding="utf-8")
        opened = []
        original = ui.TemplateManager.loadTemplate

        def record(manager, file_path):
            opened.append((file_path, original(manager, file_path)))
            return opened[-1][1]

        monkeypatch.setattr(ui.TemplateManager, "loadTemplate", record)
        assert ui.main(["--smoke", path.as_uri()]) == 0
        assert opened == [(path.as_uri(), True)]
