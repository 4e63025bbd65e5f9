"""Tests for placeholder substitution and locale formatting."""

from datetime import date

import pytest

from docdesigner.constants import PLACEHOLDERS
from docdesigner.substitution import (
    find_placeholders,
    format_amount,
    format_date,
    resolve_placeholders,
    substitute,
    unknown_placeholders,
)
from docdesigner.types import Customer, DataContext, Reservation, StoreInfo, Vehicle


@pytest.fixture
def context():
    return DataContext(
        customer=Customer(first_name="Karim", last_name="Benali", phone="0550 12 34 56", email="k.benali@gmail.com"),
        vehicle=Vehicle(brand="Volkswagen", model="Golf 8", plate="01234-124-16"),
        reservation=Reservation(
            number="RES-42",
            start_date=date(2024, 3, 5),
            total_amount=75000,
            paid_amount=50000,
        ),
        store=StoreInfo(name="Auto Hydra", phone="021 00 00 00", email="contact@hydra.dz", address="Hydra, Alger"),
        current_date=date(2024, 3, 1),
    )


class TestFormatting:
    @pytest.mark.parametrize(
        "locale, expected",
        [("fr", "75 000"), ("ar", "75.000"), ("en", "75,000")],
    )
    def test_amount_grouping_per_locale(self, locale, expected):
        assert format_amount(75000, locale) == expected

    def test_amount_is_rounded_to_whole_units(self):
        assert format_amount(1234.6, "fr") == "1 235"

    def test_small_and_negative_amounts(self):
        assert format_amount(0, "fr") == "0"
        assert format_amount(999, "fr") == "999"
        assert format_amount(-25000, "fr") == "-25 000"

    def test_unknown_locale_falls_back_to_french(self):
        assert format_amount(1000000, "de") == "1 000 000"

    def test_date_patterns(self):
        day = date(2024, 3, 5)
        assert format_date(day, "fr") == "05/03/2024"
        assert format_date(day, "ar") == "05/03/2024"
        assert format_date(day, "en") == "03/05/2024"

    def test_missing_date_is_empty(self):
        assert format_date(None, "fr") == ""


class TestSubstitute:
    def test_replaces_known_tokens(self, context):
        text = "Client: {{client_name}} ({{client_phone}})"
        assert substitute(text, context) == "Client: Karim Benali (0550 12 34 56)"

    def test_spaced_tokens_are_left_as_written(self, context):
        assert substitute("{{ vehicle_plate }}", context) == "{{ vehicle_plate }}"

    def test_amounts_and_dates_follow_locale(self, context):
        text = "{{total_amount}} / {{remaining_amount}} / {{res_date}}"
        assert substitute(text, context, "fr") == "75 000 / 25 000 / 05/03/2024"
        assert substitute(text, context, "en") == "75,000 / 25,000 / 03/05/2024"

    def test_unknown_tokens_are_kept(self, context):
        assert substitute("Hello {{nickname}}", context) == "Hello {{nickname}}"

    def test_text_without_tokens_is_returned_unchanged(self, context):
        text = "Merci pour votre confiance"
        assert substitute(text, context) is text

    def test_store_name_defaults(self):
        assert substitute("{{store_name}}", DataContext()) == "DriveFlow"

    def test_current_date_comes_from_context(self, context):
        assert substitute("{{current_date}}", context) == "01/03/2024"

    def test_is_idempotent(self, context):
        text = "{{client_name}} {{total_amount}} {{unknown}} {{store_address}}"
        once = substitute(text, context)
        assert substitute(once, context) == once

    def test_values_cannot_inject_tokens(self, context):
        sneaky = DataContext(customer=Customer(first_name="{{store_name}}", last_name="{"))
        once = substitute("{{client_name}}}", sneaky)
        assert "{{" not in once
        assert substitute(once, sneaky) == once


class TestPlaceholderHelpers:
    def test_resolve_covers_vocabulary(self, context):
        values = resolve_placeholders(context)
        assert set(values) == set(PLACEHOLDERS)
        assert values["vehicle_model"] == "Golf 8"

    def test_find_placeholders_in_order_without_duplicates(self):
        text = "{{b_name}} {{a_name}} {{b_name}}"
        assert find_placeholders(text) == ["b_name", "a_name"]

    def test_unknown_placeholders(self):
        assert unknown_placeholders("{{client_name}} {{shoe_size}}") == ["shoe_size"]
