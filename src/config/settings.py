"""Application configuration settings."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional


@dataclass
class LayoutSettings:
    """Tree layout geometry (in canvas units)."""

    node_width: float = 280
    node_height: float = 120

    # Gap between sibling slots and between levels
    horizontal_gap: float = 40
    vertical_gap: float = 100

    margin: float = 50

    # Canvas size reported when there is nothing to lay out
    empty_width: float = 800
    empty_height: float = 600


@dataclass
class HierarchySettings:
    """Hierarchy building configuration."""

    # "treat_as_root" or "exclude" for employees whose manager is unknown
    orphan_policy: str = "treat_as_root"


@dataclass
class UndoSettings:
    """Undo buffer configuration."""

    window_seconds: float = 8.0


@dataclass
class SeedSettings:
    """Demo data seeding configuration."""

    seed_on_startup: bool = True
    seed: int = 12345


@dataclass
class Settings:
    """Main application settings."""

    # Application info
    app_name: str = "Org Chart API"
    app_version: str = "1.0.0"
    debug: bool = False

    layout: LayoutSettings = field(default_factory=LayoutSettings)
    hierarchy: HierarchySettings = field(default_factory=HierarchySettings)
    undo: UndoSettings = field(default_factory=UndoSettings)
    seed: SeedSettings = field(default_factory=SeedSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            app_name=os.getenv("APP_NAME", "Org Chart API"),
            app_version=os.getenv("APP_VERSION", "1.0.0"),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            layout=LayoutSettings(
                node_width=float(os.getenv("LAYOUT_NODE_WIDTH", "280")),
                node_height=float(os.getenv("LAYOUT_NODE_HEIGHT", "120")),
                horizontal_gap=float(os.getenv("LAYOUT_HORIZONTAL_GAP", "40")),
                vertical_gap=float(os.getenv("LAYOUT_VERTICAL_GAP", "100")),
                margin=float(os.getenv("LAYOUT_MARGIN", "50")),
            ),
            hierarchy=HierarchySettings(
                orphan_policy=os.getenv("HIERARCHY_ORPHAN_POLICY", "treat_as_root"),
            ),
            undo=UndoSettings(
                window_seconds=float(os.getenv("UNDO_WINDOW_SECONDS", "8")),
            ),
            seed=SeedSettings(
                seed_on_startup=os.getenv("SEED_ON_STARTUP", "true").lower() == "true",
                seed=int(os.getenv("SEED_VALUE", "12345")),
            ),
        )


# Singleton settings instance
_settings: Optional[Settings] = None


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
    get_settings.cache_clear()
