"""Full output formatter - every tag and the box inventory."""

from heifmeta.icc.display_p3 import is_display_p3 as classify_display_p3
from heifmeta.models import Directory, Metadata


def _format_directory(directory: Directory, indent: int = 2) -> list[str]:
    """Format a directory's tags as indented lines."""
    prefix = " " * indent
    lines = []
    for tag in directory.tags.values():
        if tag.description == "":
            continue
        lines.append(f"{prefix}{tag.name}: {tag.description}")
    for error in directory.errors:
        lines.append(f"{prefix}[error] {error}")
    return lines


def format_full(metadata: Metadata, is_display_p3: bool | None = None) -> str:
    """Format metadata as comprehensive full output.

    Includes the file info, every HEIF and ICC tag, the box inventory and
    the raw payload sizes.
    """
    lines = []
    if is_display_p3 is None:
        is_display_p3 = classify_display_p3(metadata)

    lines.append("=" * 70)
    lines.append("HEIF METADATA REPORT (FULL)")
    lines.append("=" * 70)
    lines.append("")

    # File Info
    fi = metadata.file_info
    if fi is not None:
        lines.append("## FILE INFORMATION")
        lines.append(f"  filename: {fi.filename}")
        lines.append(f"  path: {fi.path}")
        lines.append(f"  size_bytes: {fi.size_bytes}")
        lines.append(f"  size_human: {fi.size_human}")
        if fi.modified:
            lines.append(f"  modified: {fi.modified.isoformat()}")
        lines.append(f"  extension: {fi.extension}")
        lines.append("")

    # Directories
    for directory in metadata.directories:
        lines.append(f"## {directory.name.upper()}")
        lines.extend(_format_directory(directory))
        lines.append("")

    # Payloads
    lines.append("## PAYLOADS")
    for index, payload in enumerate(metadata.exif_payloads):
        lines.append(f"  exif[{index}]: {len(payload)} bytes")
    for index, payload in enumerate(metadata.icc_payloads):
        lines.append(f"  icc[{index}]: {len(payload)} bytes")
    lines.append(f"  display_p3: {'yes' if is_display_p3 else 'no'}")
    lines.append("")

    # Box inventory
    boxes = metadata.heif.boxes
    lines.append(f"## BOXES ({len(boxes)})")
    for box in boxes:
        indent = "  " * (box.depth + 1)
        size = "to end" if box.extends_to_end else f"{box.size} bytes"
        lines.append(f"{indent}{box.type} @ {box.offset} ({size})")

    lines.append("")
    lines.append("=" * 70)

    return "\n".join(lines)
