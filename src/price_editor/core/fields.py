"""Editable product fields: allow-list, validation and sanitization.

Each editable field maps to one attribute of the host product payload. The
attribute name doubles as the getter/setter pair: the old value is read from
it and the change is written back under the same key.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from src.price_editor.core.errors import FieldValidationError, UnknownFieldError

MAX_PRICE = Decimal("999999999.99")
MAX_TITLE_LENGTH = 200

TAX_STATUSES = ("taxable", "shipping", "none")
STOCK_STATUSES = ("instock", "outofstock", "onbackorder")
PRODUCT_STATUSES = ("publish", "draft", "private", "pending")

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")


def sanitize_text(value: Any) -> str:
    """Strip tags, line breaks and runs of whitespace from a text value."""
    text = "" if value is None else str(value)
    text = _TAG_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def normalize_price(value: Any) -> str:
    """Turn a user-typed price into a plain decimal string.

    Commas become decimal points and everything other than digits, dots and
    minus signs (currency symbols, spaces, thousands separators) is dropped:
    ``"1 234,50 €"`` becomes ``"1234.50"``.
    """
    text = "" if value is None else str(value).strip()
    text = text.replace(",", ".")
    return _NON_NUMERIC_RE.sub("", text)


def _parse_price(value: Any, allow_empty: bool) -> Decimal | None:
    raw = "" if value is None else str(value).strip()
    if raw == "":
        if allow_empty:
            return None
        raise FieldValidationError("Price cannot be empty")

    normalized = normalize_price(raw)
    try:
        amount = Decimal(normalized)
    except InvalidOperation:
        raise FieldValidationError("Price must be a number") from None

    if amount < 0:
        raise FieldValidationError("Price cannot be negative")
    if amount > MAX_PRICE:
        raise FieldValidationError("Price value is too large")
    return amount


def validate_regular_price(value: Any) -> None:
    _parse_price(value, allow_empty=False)


def validate_sale_price(value: Any) -> None:
    _parse_price(value, allow_empty=True)


def validate_title(value: Any) -> None:
    title = "" if value is None else str(value).strip()
    if not title:
        raise FieldValidationError("Title cannot be empty")
    if len(title) > MAX_TITLE_LENGTH:
        raise FieldValidationError(
            f"Title is too long (max {MAX_TITLE_LENGTH} characters)"
        )


def _choice_validator(allowed: tuple[str, ...], message: str) -> Callable[[Any], None]:
    def validate(value: Any) -> None:
        if sanitize_text(value) not in allowed:
            raise FieldValidationError(message)

    return validate


def _accept_any(value: Any) -> None:
    # An empty tax class selects the standard rate.
    return None


def sanitize_price(value: Any) -> str:
    return normalize_price(value)


def sanitize_sale_price(value: Any) -> str:
    text = "" if value is None else str(value).strip()
    if text == "":
        return ""
    return normalize_price(text)


@dataclass(frozen=True)
class FieldSpec:
    """One entry of the editable-field allow-list."""

    name: str
    attribute: str
    label: str
    kind: str
    sanitize: Callable[[Any], str]
    validate: Callable[[Any], None]
    choices: tuple[str, ...] = ()

    def describe(self) -> dict[str, Any]:
        """Client-facing descriptor used to build the grid editors."""
        return {
            "name": self.name,
            "label": self.label,
            "type": self.kind,
            "choices": list(self.choices),
        }


FIELDS: dict[str, FieldSpec] = {
    spec.name: spec
    for spec in (
        FieldSpec(
            name="title",
            attribute="name",
            label="Title",
            kind="text",
            sanitize=sanitize_text,
            validate=validate_title,
        ),
        FieldSpec(
            name="regular_price",
            attribute="regular_price",
            label="Regular price",
            kind="price",
            sanitize=sanitize_price,
            validate=validate_regular_price,
        ),
        FieldSpec(
            name="sale_price",
            attribute="sale_price",
            label="Sale price",
            kind="price",
            sanitize=sanitize_sale_price,
            validate=validate_sale_price,
        ),
        FieldSpec(
            name="tax_status",
            attribute="tax_status",
            label="Tax status",
            kind="choice",
            sanitize=sanitize_text,
            validate=_choice_validator(TAX_STATUSES, "Invalid tax status value"),
            choices=TAX_STATUSES,
        ),
        FieldSpec(
            name="tax_class",
            attribute="tax_class",
            label="Tax class",
            kind="tax_class",
            sanitize=sanitize_text,
            validate=_accept_any,
        ),
        FieldSpec(
            name="stock_status",
            attribute="stock_status",
            label="Stock status",
            kind="choice",
            sanitize=sanitize_text,
            validate=_choice_validator(STOCK_STATUSES, "Invalid stock status value"),
            choices=STOCK_STATUSES,
        ),
    )
}


def get_field(name: str) -> FieldSpec:
    """Look up an editable field, rejecting names outside the allow-list."""
    spec = FIELDS.get(name)
    if spec is None:
        raise UnknownFieldError(name)
    return spec


def validate_field(name: str, value: Any) -> None:
    """Raise FieldValidationError if ``value`` is not acceptable for ``name``."""
    get_field(name).validate(value)


def sanitize_field(name: str, value: Any) -> str:
    """Return the value as it will be written to the host store."""
    return get_field(name).sanitize(value)


def clean_field_value(name: str, value: Any) -> str:
    """Validate then sanitize a submitted value in one step."""
    spec = get_field(name)
    spec.validate(value)
    return spec.sanitize(value)
