"""ICC profile parsing and Display P3 classification."""

from .display_p3 import (
    APPLE_DISPLAY_P3,
    LEGACY_DISPLAY_P3,
    REFERENCE_PROFILES,
    DisplayP3Reference,
    is_display_p3,
    is_display_p3_tags,
    validate_display_p3,
)
from .reader import IccReader

__all__ = [
    "IccReader",
    "DisplayP3Reference",
    "APPLE_DISPLAY_P3",
    "LEGACY_DISPLAY_P3",
    "REFERENCE_PROFILES",
    "is_display_p3",
    "is_display_p3_tags",
    "validate_display_p3",
]
