"""Quiet output formatter - one-line summary."""

from heifmeta.icc.display_p3 import is_display_p3 as classify_display_p3
from heifmeta.models import HeifTag, IccTag, Metadata


def format_quiet(metadata: Metadata, is_display_p3: bool | None = None) -> str:
    """Format metadata as one-line summary.

    Format: filename | brand | resolution | EXIF: n item(s) | ICC: description | P3: yes/no
    """
    parts = []
    heif = metadata.heif

    parts.append(metadata.filename or "<stream>")
    parts.append(heif.get_description(HeifTag.MAJOR_BRAND) or "N/A")

    width = heif.get_value(HeifTag.IMAGE_WIDTH)
    height = heif.get_value(HeifTag.IMAGE_HEIGHT)
    if width and height:
        parts.append(f"{width}x{height}")
    else:
        parts.append("N/A")

    count = len(metadata.exif_payloads)
    parts.append(f"EXIF: {count} item(s)" if count else "EXIF: no")

    if metadata.icc is not None:
        description = metadata.icc.get_description(IccTag.PROFILE_DESCRIPTION)
        parts.append(f"ICC: {description or 'yes'}")
    else:
        parts.append("ICC: no")

    if is_display_p3 is None:
        is_display_p3 = classify_display_p3(metadata)
    parts.append("P3: yes" if is_display_p3 else "P3: no")

    if metadata.has_errors:
        parts.append(f"errors: {len(metadata.errors)}")

    return " | ".join(parts)


def format_quiet_list(metadata_list: list[Metadata]) -> str:
    """Format multiple metadata objects as one-line summaries.

    Args:
        metadata_list: List of Metadata objects

    Returns:
        Multiple lines, one per file
    """
    return "\n".join(format_quiet(m) for m in metadata_list)
