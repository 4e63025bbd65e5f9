"""Tests for the template store, the variant registry and value types."""

import json

import pytest

from docdesigner.constants import TEMPLATE_FORMAT, TEMPLATE_FORMAT_VERSION
from docdesigner.errors import TemplateFormatError, UnknownCategoryError
from docdesigner.registry import (
    VARIANTS,
    build_element,
    content_of,
    decode_checklist,
    encode_checklist,
    parse_kind,
)
from docdesigner.store import (
    add_element,
    add_element_with_id,
    create_blank,
    create_default,
    deserialize,
    duplicate_element,
    from_dict,
    get_element,
    insert_element,
    main_logo,
    move_element,
    next_element_id,
    ordered_elements,
    remove_element,
    resize_element,
    serialize,
    to_dict,
    update_element,
)
from docdesigner.types import (
    ChecklistItem,
    ElementKind,
    ElementStyle,
    Geometry,
    TemplateCategory,
    clamp_style_value,
    coerce_style_value,
    validate_geometry,
    validate_style,
)


@pytest.fixture
def blank():
    return create_blank(TemplateCategory.QUOTE)


class TestValidation:
    def test_valid_geometry_has_no_problems(self):
        assert validate_geometry(ElementKind.STATIC_TEXT, Geometry(0, 0, 10, 10)) == []

    def test_zero_width_is_reported(self):
        assert validate_geometry(ElementKind.STATIC_TEXT, Geometry(0, 0, 0, 10))

    def test_divider_may_have_zero_thickness(self):
        assert validate_geometry(ElementKind.DIVIDER, Geometry(0, 0, 100, 0)) == []
        assert validate_geometry(ElementKind.STATIC_TEXT, Geometry(0, 0, 100, 0))

    def test_style_problems(self):
        style = ElementStyle(opacity=1.5, border_width=-1, text_align="justify")
        assert len(validate_style(style)) == 3
        assert validate_style(ElementStyle()) == []

    def test_clamp_style_value(self):
        assert clamp_style_value("opacity", 2) == 1.0
        assert clamp_style_value("opacity", -1) == 0.0
        assert clamp_style_value("padding", -5) == 0.0
        assert clamp_style_value("z_index", 3.0) == 3
        assert clamp_style_value("text_align", "justify") == "left"
        assert clamp_style_value("color", "#fff") == "#fff"

    def test_coerce_style_value(self):
        assert coerce_style_value("z_index", 4.0) == 4
        assert coerce_style_value("opacity", "0.5") == 0.5
        assert coerce_style_value("font_weight", 600) == "600"
        with pytest.raises(ValueError):
            coerce_style_value("border_width", "thick")
        with pytest.raises(TypeError):
            coerce_style_value("color", None)


class TestRegistry:
    def test_every_kind_is_registered(self):
        assert set(VARIANTS) == set(ElementKind)

    def test_parse_kind_accepts_hyphenated_names(self):
        assert parse_kind("bound-text") == ElementKind.BOUND_TEXT
        assert parse_kind("QR_PLACEHOLDER") == ElementKind.QR_PLACEHOLDER
        with pytest.raises(ValueError):
            parse_kind("sticker")

    def test_build_element_uses_preset_and_anchor(self):
        element = build_element(ElementKind.STATIC_TEXT, "static_text_0")
        assert element.geometry == Geometry(50.0, 150.0, 200.0, 40.0)
        assert element.text == "Texte Statique"

    def test_build_checklist_from_preset_name(self):
        element = build_element(ElementKind.CHECKLIST, "checklist_0", "equipment")
        items = decode_checklist(element.content)
        assert [item.label for item in items][:2] == ["Roue de secours", "Cric"]
        assert not any(item.checked for item in items)

    def test_build_checklist_from_labels(self):
        element = build_element(ElementKind.CHECKLIST, "checklist_0", ["A", "B", "C"])
        assert [item.label for item in decode_checklist(element.content)] == ["A", "B", "C"]

    def test_structural_kinds_have_no_content(self):
        assert content_of(build_element(ElementKind.DIVIDER, "divider_0")) == ""

    def test_checklist_codec(self):
        items = [ChecklistItem("Freins", True), ChecklistItem("Klaxon")]
        assert decode_checklist(encode_checklist(items)) == items

    def test_malformed_checklist_content_decodes_empty(self):
        assert decode_checklist("not json") == []
        assert decode_checklist('{"label": "x"}') == []
        assert decode_checklist('[1, {"label": "ok"}]') == [ChecklistItem("ok")]


class TestCreate:
    def test_blank_template(self, blank):
        assert blank.id == "tpl-blank-quote"
        assert (blank.canvas_width, blank.canvas_height) == (595.0, 842.0)
        assert blank.elements == ()

    @pytest.mark.parametrize("category", list(TemplateCategory))
    @pytest.mark.parametrize("locale", ["fr", "ar"])
    def test_default_templates(self, category, locale):
        template = create_default(category, locale)
        assert template.id == f"tpl-default-{category.value}-{locale}"
        assert (template.canvas_width, template.canvas_height) == (800.0, 1100.0)
        ids = [element.id for element in template.elements]
        assert len(ids) == len(set(ids))
        assert main_logo(template) is not None

    def test_defaults_are_deterministic(self):
        assert create_default("contract", "fr") == create_default("contract", "fr")

    def test_unknown_locale_uses_french(self):
        assert create_default("quote", "de") == create_default("quote", "fr")

    def test_category_names_are_parsed(self):
        assert create_default("deposit-receipt").category == TemplateCategory.DEPOSIT_RECEIPT

    def test_unknown_category(self):
        with pytest.raises(UnknownCategoryError) as excinfo:
            create_blank("brochure")
        assert excinfo.value.category == "brochure"

    def test_invoice_binds_total_and_remaining(self):
        template = create_default("invoice", "fr")
        texts = [element.text for element in template.elements if element.kind == ElementKind.BOUND_TEXT]
        assert any("{{total_amount}}" in text for text in texts)
        assert any("{{remaining_amount}}" in text for text in texts)

    def test_inspection_templates_carry_checklists(self):
        template = create_default("check_out", "fr")
        kinds = {element.kind for element in template.elements}
        assert {ElementKind.CHECKLIST, ElementKind.FUEL_MILEAGE, ElementKind.QR_PLACEHOLDER} <= kinds


class TestMutations:
    def test_add_element_appends_with_fresh_id(self, blank):
        template, first = add_element_with_id(blank, ElementKind.STATIC_TEXT)
        template, second = add_element_with_id(template, "static_text")
        assert (first, second) == ("static_text_0", "static_text_1")
        assert [element.id for element in template.elements] == [first, second]

    def test_add_does_not_mutate_input(self, blank):
        add_element(blank, ElementKind.LOGO)
        assert blank.elements == ()

    def test_add_then_remove_is_identity(self):
        template = create_default("quote", "fr")
        added, element_id = add_element_with_id(template, ElementKind.TABLE)
        assert remove_element(added, element_id) == template

    def test_next_id_resumes_after_highest_suffix(self):
        template = create_default("contract", "fr")
        assert next_element_id(template, ElementKind.DIVIDER) == "divider_7"

    def test_update_merges_geometry_style_and_content(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.STATIC_TEXT)
        updated = update_element(template, element_id, {"x": 5, "font_size": 20.0, "content": "Bonjour"})
        element = get_element(updated, element_id)
        assert element.geometry.x == 5.0
        assert element.geometry.width == 200.0
        assert element.style.font_size == 20.0
        assert element.text == "Bonjour"

    def test_update_with_missing_id_is_noop(self, blank):
        template = add_element(blank, ElementKind.STATIC_TEXT)
        assert update_element(template, "nope_9", {"x": 1}) is template

    def test_update_with_same_values_returns_same_template(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.STATIC_TEXT)
        assert update_element(template, element_id, {"x": 50.0}) is template

    def test_unknown_keys_are_ignored(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.STATIC_TEXT)
        assert update_element(template, element_id, {"rotation": 45}) is template

    def test_update_rejects_mistyped_style(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.STATIC_TEXT)
        with pytest.raises(ValueError):
            update_element(template, element_id, {"z_index": "abc"})

    def test_content_on_structural_kind_is_ignored(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.DIVIDER)
        assert update_element(template, element_id, {"content": "x"}) is template

    def test_move_and_resize(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.LOGO)
        template = resize_element(move_element(template, element_id, 1, 2), element_id, 30, 40)
        assert get_element(template, element_id).geometry == Geometry(1.0, 2.0, 30.0, 40.0)

    def test_remove_missing_id_is_noop(self, blank):
        assert remove_element(blank, "ghost") is blank

    def test_duplicate_offsets_copy(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.STATIC_TEXT)
        template, new_id = duplicate_element(template, element_id)
        copy = get_element(template, new_id)
        assert new_id == "static_text_1"
        assert (copy.geometry.x, copy.geometry.y) == (70.0, 170.0)
        assert copy.text == get_element(template, element_id).text

    def test_duplicate_missing_id(self, blank):
        assert duplicate_element(blank, "ghost") == (blank, None)

    def test_insert_renames_on_collision(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.STATIC_TEXT)
        template, new_id = insert_element(template, get_element(template, element_id))
        assert new_id != element_id
        assert len(template.elements) == 2

    def test_ordered_elements_sort_by_z_then_insertion(self, blank):
        template, first = add_element_with_id(blank, ElementKind.STATIC_TEXT)
        template, second = add_element_with_id(template, ElementKind.STATIC_TEXT)
        template, third = add_element_with_id(template, ElementKind.STATIC_TEXT)
        template = update_element(template, first, {"z_index": 20})
        assert [element.id for element in ordered_elements(template)] == [second, third, first]


class TestSerialization:
    @pytest.mark.parametrize("category", list(TemplateCategory))
    def test_round_trip(self, category):
        template = create_default(category, "ar")
        assert deserialize(serialize(template)) == template

    def test_round_trip_preserves_edits(self, blank):
        template, element_id = add_element_with_id(blank, ElementKind.CHECKLIST, ["Cric"])
        template = update_element(template, element_id, {"opacity": 0.5, "z_index": 3})
        assert deserialize(serialize(template).encode("utf-8")) == template

    def test_serialized_form_is_versioned(self, blank):
        data = json.loads(serialize(blank))
        assert data["format"] == TEMPLATE_FORMAT
        assert data["version"] == TEMPLATE_FORMAT_VERSION

    def test_to_dict_from_dict(self):
        template = create_default("invoice", "fr")
        assert from_dict(to_dict(template)) == template

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "not json",
            "[]",
            json.dumps({"format": "something-else", "version": 1}),
            json.dumps({"format": TEMPLATE_FORMAT, "version": 99}),
        ],
    )
    def test_invalid_payloads(self, text):
        with pytest.raises(TemplateFormatError):
            deserialize(text)

    def test_unknown_element_kind(self, blank):
        data = to_dict(add_element(blank, ElementKind.STATIC_TEXT))
        data["elements"][0]["kind"] = "sticker"
        with pytest.raises(TemplateFormatError):
            from_dict(data)

    def test_duplicate_element_ids(self, blank):
        data = to_dict(add_element(blank, ElementKind.STATIC_TEXT))
        data["elements"].append(dict(data["elements"][0]))
        with pytest.raises(TemplateFormatError):
            from_dict(data)

    def test_missing_geometry(self, blank):
        data = to_dict(add_element(blank, ElementKind.STATIC_TEXT))
        del data["elements"][0]["geometry"]
        with pytest.raises(TemplateFormatError):
            from_dict(data)

    @pytest.mark.parametrize(
        "field, value",
        [("z_index", "abc"), ("font_size", [12]), ("opacity", None), ("color", {"r": 1}), ("padding", "inf")],
    )
    def test_bad_style_values_are_rejected(self, field, value):
        data = to_dict(create_default("invoice", "fr"))
        data["elements"][0]["style"][field] = value
        with pytest.raises(TemplateFormatError):
            deserialize(json.dumps(data))

    def test_style_must_be_an_object(self, blank):
        data = to_dict(add_element(blank, ElementKind.STATIC_TEXT))
        data["elements"][0]["style"] = ["#fff"]
        with pytest.raises(TemplateFormatError):
            from_dict(data)

    def test_numeric_style_strings_are_converted(self, blank):
        data = to_dict(add_element(blank, ElementKind.STATIC_TEXT))
        data["elements"][0]["style"].update({"z_index": "7", "font_size": "14", "font_weight": 700})
        (element,) = from_dict(data).elements
        assert element.style.z_index == 7
        assert element.style.font_size == 14.0
        assert element.style.font_weight == "700"
        assert ordered_elements(from_dict(data)) == [element]
