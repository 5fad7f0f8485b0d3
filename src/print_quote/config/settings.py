"""
Centralized settings and path configuration for the quote tool.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_package_root() -> Path:
    """Get the print_quote package directory."""
    return Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Compiled pricing table the engine reads
    pricing_table: Path

    # Editable CSV sheets the table is compiled from
    pricing_sheets: Path

    # Calculator input limits (F170 build envelope is 254 mm per axis)
    min_dimension_mm: int = 10
    max_dimension_mm: int = 254
    min_infill_percent: int = 10
    max_infill_percent: int = 100
    min_quantity: int = 1
    max_quantity: int = 100

    # Default part shown when the calculator opens
    default_dimension_mm: int = 100
    default_infill_percent: int = 50

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        data_dir = get_package_root() / 'data'

        table_override = os.environ.get('PRINT_QUOTE_PRICING_TABLE')
        pricing_table = Path(table_override) if table_override else data_dir / 'pricing_table.json'

        return cls(
            project_root=root,
            pricing_table=pricing_table,
            pricing_sheets=data_dir / 'sheets',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
