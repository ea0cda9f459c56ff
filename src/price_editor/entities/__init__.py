"""Entities organized by business concept.

- product: views of host products exchanged with the grid (no table; the
  host store owns products)
- settings: editor settings, the one table this service owns
"""

from .settings import EditorSettings, EditorSettingsRepository, EditorSettingsTable

__all__ = [
    "EditorSettings",
    "EditorSettingsRepository",
    "EditorSettingsTable",
]
