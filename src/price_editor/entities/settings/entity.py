"""Entity: editor settings chosen by store managers."""

from typing import Any

from pydantic import BaseModel, Field

from src.price_editor.core.fields import sanitize_text

# Column key -> label. "product" and "actions" are always shown and never stored.
AVAILABLE_COLUMNS: dict[str, str] = {
    "sku": "SKU",
    "status": "Status",
    "regular_price": "Regular Price",
    "sale_price": "Sale Price",
    "tax_status": "Tax Status",
    "tax_class": "Tax Class",
    "stock_status": "Stock Status",
    "categories": "Categories",
}
ALWAYS_VISIBLE_COLUMNS = ("product", "actions")

DEFAULT_COLUMNS = ["sku", "regular_price", "sale_price", "stock_status", "tax_status"]
DEFAULT_START_CATEGORY = "all"
DEFAULT_INSTRUCTIONS = (
    "Welcome to the Woo Price Editor! This tool allows you to quickly edit "
    "product information in bulk.\n\n"
    "How to use:\n"
    "• Click on any editable field to modify it directly\n"
    "• Price fields: Enter new prices and they'll be saved automatically when you click away\n"
    "• Title field: Click to edit, then press Enter to save or Escape to cancel\n"
    "• Dropdown fields: Select new values from the dropdown menu\n"
    "• Use the filters above the table to narrow down products\n"
    "• Toggle column visibility using the column checkboxes\n"
    "• All changes are saved automatically to your WooCommerce store\n\n"
    "Tips:\n"
    "• Use the search bar to find products by title, SKU, or ID\n"
    "• Filter by category, status, tax status, or stock status\n"
    "• Click the edit or view icons to open products in the standard WooCommerce interface"
)


class EditorSettings(BaseModel):
    """Defaults applied when the editor grid opens."""

    start_category: str = Field(default=DEFAULT_START_CATEGORY)
    default_columns: list[str] = Field(default_factory=lambda: list(DEFAULT_COLUMNS))
    instructions: str = Field(default=DEFAULT_INSTRUCTIONS)


class SettingsUpdate(BaseModel):
    """Partial settings submitted from the settings screen."""

    start_category: str | None = None
    default_columns: list[str] | None = None
    instructions: str | None = None


class SanitizedSettings(BaseModel):
    settings: EditorSettings
    notices: list[str] = Field(default_factory=list)


def _strip_markup(text: str) -> str:
    # Keep line breaks; only tags are removed.
    return "\n".join(sanitize_text(line) for line in text.splitlines()).strip()


def sanitize_settings(
    update: SettingsUpdate,
    current: EditorSettings,
    category_slugs: set[str],
) -> SanitizedSettings:
    """Validate submitted settings against the catalog and column list.

    Invalid values are replaced with defaults and reported as notices rather
    than rejected, mirroring a settings form that always saves.
    """
    data: dict[str, Any] = current.model_dump()
    notices: list[str] = []

    if update.start_category is not None:
        if update.start_category == DEFAULT_START_CATEGORY:
            data["start_category"] = DEFAULT_START_CATEGORY
        elif update.start_category in category_slugs:
            data["start_category"] = update.start_category
        else:
            notices.append("Invalid category selected. Using default value.")
            data["start_category"] = DEFAULT_START_CATEGORY

    if update.default_columns is not None:
        columns = [c for c in update.default_columns if c in AVAILABLE_COLUMNS]
        # Keep submitted order, drop duplicates.
        columns = list(dict.fromkeys(columns))
        if not columns:
            notices.append(
                "At least one column must be selected. Using default columns."
            )
            columns = list(DEFAULT_COLUMNS)
        data["default_columns"] = columns

    if update.instructions is not None:
        instructions = _strip_markup(update.instructions)
        data["instructions"] = instructions or DEFAULT_INSTRUCTIONS

    return SanitizedSettings(settings=EditorSettings(**data), notices=notices)


def merge_with_defaults(stored: dict[str, Any] | None) -> EditorSettings:
    """Fill missing keys from defaults and drop always-visible columns."""
    merged: dict[str, Any] = EditorSettings().model_dump()
    for key, value in (stored or {}).items():
        if key in merged and value is not None:
            merged[key] = value

    merged["default_columns"] = [
        c for c in merged["default_columns"] if c not in ALWAYS_VISIBLE_COLUMNS
    ]
    return EditorSettings(**merged)
