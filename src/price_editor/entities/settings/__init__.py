"""Editor settings entity module.

- EditorSettings: Domain model with defaults and sanitization
- EditorSettingsTable: Database persistence model
- EditorSettingsRepository: Data access layer
"""

from .entity import (
    ALWAYS_VISIBLE_COLUMNS,
    AVAILABLE_COLUMNS,
    DEFAULT_COLUMNS,
    DEFAULT_INSTRUCTIONS,
    EditorSettings,
    SanitizedSettings,
    SettingsUpdate,
    merge_with_defaults,
    sanitize_settings,
)
from .repository import EditorSettingsRepository
from .table import EditorSettingsTable

__all__ = [
    "ALWAYS_VISIBLE_COLUMNS",
    "AVAILABLE_COLUMNS",
    "DEFAULT_COLUMNS",
    "DEFAULT_INSTRUCTIONS",
    "EditorSettings",
    "EditorSettingsRepository",
    "EditorSettingsTable",
    "SanitizedSettings",
    "SettingsUpdate",
    "merge_with_defaults",
    "sanitize_settings",
]
