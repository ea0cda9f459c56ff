"""Unit tests for the editable field allow-list."""

import pytest

from src.price_editor.core.errors import FieldValidationError, UnknownFieldError
from src.price_editor.core.fields import (
    FIELDS,
    clean_field_value,
    get_field,
    normalize_price,
    sanitize_field,
    sanitize_text,
    validate_field,
)


class TestNormalizePrice:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("19.99", "19.99"),
            ("19,99", "19.99"),
            ("1 234,50 €", "1234.50"),
            ("$ 5", "5"),
            ("  7.10  ", "7.10"),
        ],
    )
    def test_strips_currency_and_uses_dot(self, raw, expected):
        assert normalize_price(raw) == expected

    def test_none_becomes_empty(self):
        assert normalize_price(None) == ""


class TestValidation:
    def test_unknown_field_is_rejected(self):
        with pytest.raises(UnknownFieldError) as exc_info:
            get_field("weight")

        assert exc_info.value.message == "Unknown field: weight"
        assert exc_info.value.status_code == 400

    def test_regular_price_cannot_be_empty(self):
        with pytest.raises(FieldValidationError, match="Price cannot be empty"):
            validate_field("regular_price", "  ")

    def test_sale_price_may_be_empty(self):
        validate_field("sale_price", "")
        assert sanitize_field("sale_price", "") == ""
        assert sanitize_field("sale_price", None) == ""

    @pytest.mark.parametrize(
        ("value", "message"),
        [
            ("abc", "Price must be a number"),
            ("1.2.3", "Price must be a number"),
            ("-5", "Price cannot be negative"),
            ("1000000000", "Price value is too large"),
        ],
    )
    def test_bad_prices(self, value, message):
        with pytest.raises(FieldValidationError, match=message):
            validate_field("regular_price", value)

    def test_price_at_upper_bound_is_accepted(self):
        validate_field("regular_price", "999999999.99")

    def test_title_rules(self):
        with pytest.raises(FieldValidationError, match="Title cannot be empty"):
            validate_field("title", "   ")
        with pytest.raises(FieldValidationError, match="max 200 characters"):
            validate_field("title", "x" * 201)
        validate_field("title", "x" * 200)

    def test_choice_fields(self):
        validate_field("tax_status", "shipping")
        validate_field("stock_status", " onbackorder ")
        with pytest.raises(FieldValidationError, match="Invalid tax status value"):
            validate_field("tax_status", "exempt")
        with pytest.raises(FieldValidationError, match="Invalid stock status value"):
            validate_field("stock_status", "gone")

    def test_tax_class_accepts_any_text(self):
        assert clean_field_value("tax_class", "") == ""
        assert clean_field_value("tax_class", "reduced-rate") == "reduced-rate"


class TestSanitization:
    def test_text_is_stripped_of_tags_and_whitespace(self):
        assert sanitize_text("  <b>New</b>\n  shoes\t") == "New shoes"

    def test_clean_title(self):
        assert clean_field_value("title", "<script>x</script>Boots") == "xBoots"

    def test_clean_price(self):
        assert clean_field_value("regular_price", "12,50 €") == "12.50"

    def test_every_field_describes_itself(self):
        descriptors = {spec.name: spec.describe() for spec in FIELDS.values()}

        assert set(descriptors) == {
            "title",
            "regular_price",
            "sale_price",
            "tax_status",
            "tax_class",
            "stock_status",
        }
        assert descriptors["title"]["label"] == "Title"
        assert descriptors["stock_status"]["choices"] == [
            "instock",
            "outofstock",
            "onbackorder",
        ]
        assert FIELDS["title"].attribute == "name"
