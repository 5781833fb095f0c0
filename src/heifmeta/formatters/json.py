"""JSON output formatter."""

import json
from typing import Any

from heifmeta.models import Metadata


def format_json(metadata: Metadata, indent: int = 2) -> str:
    """Format metadata as JSON string.

    Bytes fields (the raw EXIF and ICC payloads) are encoded as base64.

    Args:
        metadata: Metadata object
        indent: JSON indentation level

    Returns:
        JSON formatted string
    """
    return metadata.model_dump_json(indent=indent)


def format_json_list(metadata_list: list[Metadata], indent: int = 2) -> str:
    """Format multiple metadata objects as JSON array.

    Args:
        metadata_list: List of Metadata objects
        indent: JSON indentation level

    Returns:
        JSON array formatted string
    """
    data = [to_dict(m) for m in metadata_list]
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def to_dict(metadata: Metadata) -> dict[str, Any]:
    """Convert metadata to a JSON-compatible dictionary."""
    return json.loads(metadata.model_dump_json())
