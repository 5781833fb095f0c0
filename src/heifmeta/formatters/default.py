"""Default output formatter - concise HEIF metadata summary."""

from heifmeta.icc.display_p3 import is_display_p3 as classify_display_p3
from heifmeta.models import HeifTag, IccTag, Metadata

# ICC fields shown in the default view, in display order
SUMMARY_ICC_TAGS = (
    IccTag.PROFILE_DESCRIPTION,
    IccTag.COLOR_SPACE,
    IccTag.PROFILE_CONNECTION_SPACE,
    IccTag.MEDIA_WHITE_POINT,
)


def format_default(metadata: Metadata, is_display_p3: bool | None = None) -> str:
    """Format metadata as concise default output.

    Covers:
    - File info (name, size)
    - Container info (brand, primary item, resolution, rotation)
    - EXIF items found
    - ICC profile summary and Display P3 classification
    - Errors recorded during the walk
    """
    lines = []
    heif = metadata.heif
    if is_display_p3 is None:
        is_display_p3 = classify_display_p3(metadata)

    lines.append("=" * 70)
    lines.append(f"File: {metadata.filename or '<stream>'}")
    lines.append("=" * 70)

    # Container section
    lines.append("")
    lines.append("## CONTAINER")
    lines.append(f"  Brand:        {heif.get_description(HeifTag.MAJOR_BRAND) or 'Unknown'}")
    compatible = heif.get_description(HeifTag.COMPATIBLE_BRANDS)
    if compatible:
        lines.append(f"  Compatible:   {compatible}")
    primary = heif.get_description(HeifTag.PRIMARY_ITEM_ID)
    if primary:
        lines.append(f"  Primary Item: {primary}")

    width = heif.get_value(HeifTag.IMAGE_WIDTH)
    height = heif.get_value(HeifTag.IMAGE_HEIGHT)
    if width and height:
        lines.append(f"  Resolution:   {width}x{height}")
    rotation = heif.get_description(HeifTag.IMAGE_ROTATION)
    if rotation:
        lines.append(f"  Rotation:     {rotation}")
    if metadata.file_info is not None:
        lines.append(f"  Size:         {metadata.file_info.size_human}")

    # EXIF section
    lines.append("")
    lines.append("## EXIF")
    if metadata.exif_payloads:
        item_ids = heif.get_description(HeifTag.EXIF_ITEM_IDS)
        total = sum(len(p) for p in metadata.exif_payloads)
        lines.append(f"  Items:        {len(metadata.exif_payloads)} ({total} bytes)")
        if item_ids:
            lines.append(f"  Item IDs:     {item_ids}")
    else:
        lines.append("  Items:        None")

    # Colour section
    lines.append("")
    lines.append("## COLOUR")
    colour_type = heif.get_description(HeifTag.COLOUR_TYPE)
    if colour_type:
        lines.append(f"  Format:       {colour_type}")
    icc = metadata.icc
    if icc is not None:
        for tag in SUMMARY_ICC_TAGS:
            description = icc.get_description(tag)
            if description is not None:
                label = f"{icc.get_tag_name(tag)}:"
                lines.append(f"  {label:<14}{description}")
    else:
        lines.append("  ICC Profile:  None")
    lines.append(f"  Display P3:   {'Yes' if is_display_p3 else 'No'}")

    # Errors
    if metadata.has_errors:
        lines.append("")
        lines.append("## ERRORS")
        for error in metadata.errors:
            lines.append(f"  - {error}")

    lines.append("")
    lines.append("=" * 70)

    return "\n".join(lines)
