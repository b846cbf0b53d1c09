"""Tests for input normalization helpers."""

import pytest

from hierarchy_admin.utils.normalization import normalize_digit_fields, strip_non_digits


class TestStripNonDigits:
    """Tests for strip_non_digits."""

    def test_strips_organization_tax_id_punctuation(self):
        """Test that a formatted unit tax id becomes digit-only."""
        assert strip_non_digits("12.345.678/0001-90") == "12345678000190"

    def test_strips_personal_tax_id_punctuation(self):
        """Test that a formatted personal tax id becomes digit-only."""
        assert strip_non_digits("123.456.789-01") == "12345678901"

    def test_strips_letters_and_whitespace(self):
        """Test that any non-digit character is removed."""
        assert strip_non_digits(" ab1 2-c3 ") == "123"

    def test_non_string_values_pass_through(self):
        """Test that None and numbers are left for the validator to report."""
        assert strip_non_digits(None) is None
        assert strip_non_digits(123) == 123

    @pytest.mark.parametrize(
        "value",
        ["12.345.678/0001-90", "", "abc", "  99 ", "1-2-3", "0001", "ção 4"],
    )
    def test_is_idempotent(self, value):
        """Test that applying the normalizer twice equals applying it once."""
        once = strip_non_digits(value)
        assert strip_non_digits(once) == once


class TestNormalizeDigitFields:
    """Tests for normalize_digit_fields."""

    def test_only_listed_fields_are_normalized(self):
        """Test that other fields keep their punctuation."""
        payload = {"tax_id": "12.345.678/0001-90", "trade_name": "Loja 1-A"}

        normalized = normalize_digit_fields(payload, ["tax_id"])

        assert normalized == {"tax_id": "12345678000190", "trade_name": "Loja 1-A"}

    def test_missing_fields_are_not_added(self):
        """Test that absent fields stay absent."""
        assert normalize_digit_fields({"name": "x"}, ["tax_id"]) == {"name": "x"}

    def test_input_payload_is_not_mutated(self):
        """Test that a copy is returned."""
        payload = {"tax_id": "1.2"}
        normalize_digit_fields(payload, ["tax_id"])
        assert payload == {"tax_id": "1.2"}
