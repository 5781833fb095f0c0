"""Pydantic models for heifmeta."""

from .box import BoxInfo
from .directory import Directory, HeifDirectory, IccDirectory, Tag
from .file import FileInfo, format_size
from .metadata import ExtractionResult, Metadata
from .tags import HEIF_TAG_NAMES, ICC_TAG_NAMES, HeifTag, IccTag

__all__ = [
    # Main models
    "Metadata",
    "ExtractionResult",
    # Directories
    "Directory",
    "HeifDirectory",
    "IccDirectory",
    "Tag",
    # Tag identifiers
    "HeifTag",
    "IccTag",
    "HEIF_TAG_NAMES",
    "ICC_TAG_NAMES",
    # File
    "FileInfo",
    "format_size",
    # Boxes
    "BoxInfo",
]
