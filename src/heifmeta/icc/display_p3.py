"""Display P3 classification of an embedded ICC profile.

Profile numbers reach us as human-readable descriptions with limited
precision, so the string fields are compared exactly (after trimming and
lower-casing) and the colorants are compared against tolerance bands.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from heifmeta.config import DisplayP3Config, get_config
from heifmeta.models import IccTag, Metadata

XYZ = tuple[float, float, float]


@dataclass(frozen=True)
class Band:
    """Inclusive numeric range."""

    low: float
    high: float

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high


# A channel constrains x, y and z; None leaves a component free
Channel = tuple[Band | None, Band | None, Band | None]

RED_BANDS: Channel = (Band(0.50512, 0.52512), Band(0.2312, 0.2512), None)
GREEN_BANDS: Channel = (
    Band(0.28198, 0.30198),
    Band(0.68225, 0.70225),
    Band(0.03189, 0.05189),
)
BLUE_BANDS: Channel = (
    Band(0.1471, 0.1671),
    Band(0.05657, 0.07657),
    Band(0.77407, 0.79407),
)


@dataclass(frozen=True)
class DisplayP3Reference:
    """Reference values one Display P3 profile variant must match."""

    name: str
    xyz_values: str
    media_white_point: XYZ
    description: str = "display p3"
    color_space: str = "rgb"
    connection_space: str = "xyz"
    red: Channel = RED_BANDS
    green: Channel = GREEN_BANDS
    blue: Channel = BLUE_BANDS

    def white_point_bands(self, tolerance: float) -> Channel:
        x, y, z = self.media_white_point
        return (
            Band(x - tolerance, x + tolerance),
            Band(y - tolerance, y + tolerance),
            Band(z - tolerance, z + tolerance),
        )


APPLE_DISPLAY_P3 = DisplayP3Reference(
    name="apple",
    xyz_values="0.9642 1 0.82491",
    media_white_point=(0.9642, 1.0, 0.8249),
)

LEGACY_DISPLAY_P3 = DisplayP3Reference(
    name="legacy",
    xyz_values="0.964 1 0.825",
    media_white_point=(0.9505, 1.0, 1.0891),
)

REFERENCE_PROFILES: dict[str, DisplayP3Reference] = {
    APPLE_DISPLAY_P3.name: APPLE_DISPLAY_P3,
    LEGACY_DISPLAY_P3.name: LEGACY_DISPLAY_P3,
}

DEFAULT_WHITE_POINT_TOLERANCE = 0.01

# Tag names as they appear in an ICC directory, with older aliases
DESCRIPTION_NAMES = ("profile description",)
COLOR_SPACE_NAMES = ("color space",)
CONNECTION_SPACE_NAMES = ("profile connection space",)
XYZ_VALUES_NAMES = ("xyz values",)
WHITE_POINT_NAMES = ("media white point",)
RED_NAMES = ("red colorant", "red matrix column")
GREEN_NAMES = ("green colorant", "green matrix column")
BLUE_NAMES = ("blue colorant", "blue matrix column")

_TRIPLE_PATTERN = re.compile(r"^\(\s*(.*)\s*\)$")


def resolve_references(names: Iterable[str]) -> list[DisplayP3Reference]:
    """Look up reference profiles by name.

    Raises:
        ValueError: If a name is not a known reference profile
    """
    references = []
    for name in names:
        key = name.strip().lower()
        if key not in REFERENCE_PROFILES:
            known = ", ".join(sorted(REFERENCE_PROFILES))
            raise ValueError(f"Unknown Display P3 reference profile {name!r} (known: {known})")
        references.append(REFERENCE_PROFILES[key])
    return references


def parse_xyz_triple(text: str | None) -> XYZ | None:
    """Parse ``"(x, y, z)"`` into floats, or return None."""
    if text is None:
        return None
    match = _TRIPLE_PATTERN.match(text.strip())
    if not match:
        return None
    parts = [part.strip() for part in match.group(1).split(",")]
    if len(parts) != 3:
        return None
    try:
        x, y, z = (float(part) for part in parts)
    except ValueError:
        return None
    return (x, y, z)


def channel_matches(text: str | None, bands: Channel) -> bool:
    """Check a ``"(x, y, z)"`` description against per-component bands."""
    xyz = parse_xyz_triple(text)
    if xyz is None:
        return False
    return all(band is None or band.contains(value) for value, band in zip(xyz, bands))


def _normalise(tags: Mapping[str, str]) -> dict[str, str]:
    return {name.strip().lower(): value.strip().lower() for name, value in tags.items()}


def _lookup(tags: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        if name in tags:
            return tags[name]
    return None


def matches_reference(
    tags: Mapping[str, str],
    reference: DisplayP3Reference,
    white_point_tolerance: float = DEFAULT_WHITE_POINT_TOLERANCE,
) -> bool:
    """Check already-normalised tag descriptions against one reference."""
    exact = (
        (DESCRIPTION_NAMES, reference.description),
        (COLOR_SPACE_NAMES, reference.color_space),
        (CONNECTION_SPACE_NAMES, reference.connection_space),
        (XYZ_VALUES_NAMES, reference.xyz_values),
    )
    for names, expected in exact:
        if _lookup(tags, names) != expected:
            return False

    channels = (
        (WHITE_POINT_NAMES, reference.white_point_bands(white_point_tolerance)),
        (RED_NAMES, reference.red),
        (GREEN_NAMES, reference.green),
        (BLUE_NAMES, reference.blue),
    )
    return all(channel_matches(_lookup(tags, names), bands) for names, bands in channels)


def is_display_p3_tags(
    tags: Mapping[str, str],
    references: Iterable[DisplayP3Reference] = (APPLE_DISPLAY_P3, LEGACY_DISPLAY_P3),
    white_point_tolerance: float = DEFAULT_WHITE_POINT_TOLERANCE,
) -> bool:
    """Classify a ``{tag name: description}`` mapping.

    Names and values are compared trimmed and case-insensitively. The
    result is True when any reference validates completely; a missing or
    malformed field makes that reference fail.
    """
    normalised = _normalise(tags)
    return any(
        matches_reference(normalised, reference, white_point_tolerance) for reference in references
    )


def validate_display_p3(
    metadata: Metadata,
    references: Iterable[DisplayP3Reference] = (APPLE_DISPLAY_P3, LEGACY_DISPLAY_P3),
    white_point_tolerance: float = DEFAULT_WHITE_POINT_TOLERANCE,
) -> bool:
    """Return True if the file's ICC directory describes Display P3."""
    icc = metadata.icc
    if icc is None or not icc.contains(IccTag.PROFILE_DESCRIPTION):
        return False
    return is_display_p3_tags(icc.descriptions_by_name(), references, white_point_tolerance)


def is_display_p3(metadata: Metadata, settings: DisplayP3Config | None = None) -> bool:
    """Classify ``metadata`` with the configured reference profiles."""
    settings = settings or get_config().display_p3
    return validate_display_p3(
        metadata,
        resolve_references(settings.profiles),
        settings.white_point_tolerance,
    )
