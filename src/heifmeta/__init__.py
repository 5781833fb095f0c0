"""heifmeta - HEIF/HEIC metadata toolkit.

Extract EXIF and ICC data from HEIF images and tell whether the embedded
colour profile is Display P3.

Usage:
    from heifmeta import read_metadata, read_exif_bytes, extract

    # Raw EXIF bytes (TIFF header onwards), or None
    exif = read_exif_bytes("photo.heic")

    # Everything at once
    result = extract("photo.heic")
    if result.is_display_p3:
        print("Display P3 profile")

    # Full directories and diagnostics
    metadata = read_metadata("photo.heic")
    for error in metadata.errors:
        print(error)

    # Export as JSON
    print(metadata.model_dump_json())
"""

from heifmeta._version import __version__
from heifmeta.config import HeifMetaConfig, get_config, load_config, reset_config
from heifmeta.exceptions import (
    BoxFormatError,
    HeifMetaError,
    HeifMetaWarning,
    ImageProcessingError,
    TruncatedStreamError,
)
from heifmeta.formatters import (
    format_default,
    format_full,
    format_json,
    format_quiet,
    to_dict,
)
from heifmeta.heif import BoxHandler, HeifReader
from heifmeta.icc import IccReader, is_display_p3, validate_display_p3
from heifmeta.models import (
    BoxInfo,
    ExtractionResult,
    FileInfo,
    HeifDirectory,
    HeifTag,
    IccDirectory,
    IccTag,
    Metadata,
)
from heifmeta.reader import (
    extract,
    get_exif_and_display_p3_info,
    get_file_info,
    read_exif_and_icc_bytes,
    read_exif_bytes,
    read_files,
    read_metadata,
)

__all__ = [
    # Version
    "__version__",
    # Main functions
    "read_metadata",
    "read_exif_bytes",
    "read_exif_and_icc_bytes",
    "get_exif_and_display_p3_info",
    "extract",
    "read_files",
    "get_file_info",
    # Readers
    "HeifReader",
    "BoxHandler",
    "IccReader",
    "is_display_p3",
    "validate_display_p3",
    # Models
    "Metadata",
    "ExtractionResult",
    "HeifDirectory",
    "IccDirectory",
    "HeifTag",
    "IccTag",
    "BoxInfo",
    "FileInfo",
    # Formatters
    "format_default",
    "format_full",
    "format_json",
    "format_quiet",
    "to_dict",
    # Configuration
    "HeifMetaConfig",
    "get_config",
    "load_config",
    "reset_config",
    # Errors
    "HeifMetaError",
    "TruncatedStreamError",
    "BoxFormatError",
    "ImageProcessingError",
    "HeifMetaWarning",
]
