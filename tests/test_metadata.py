"""Tests for metadata models."""

from datetime import datetime

from heifmeta import __version__
from heifmeta.models import (
    BoxInfo,
    ExtractionResult,
    FileInfo,
    HeifDirectory,
    HeifTag,
    IccDirectory,
    IccTag,
    Metadata,
    format_size,
)


def test_version():
    """Test that version is defined and follows semver format."""
    assert __version__
    # Check semver format (x.y.z)
    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_format_size():
    """Test human-readable size formatting."""
    assert format_size(0) == "0 B"
    assert format_size(1023) == "1023 B"
    assert format_size(1024) == "1.00 KB"
    assert format_size(1024 * 1024) == "1.00 MB"
    assert format_size(-1) == "N/A"


def test_file_info():
    """Test FileInfo size formatting."""
    file_info = FileInfo(
        path="/test/photo.heic",
        filename="photo.heic",
        extension=".heic",
        size_bytes=2048,
        modified=datetime(2024, 1, 15, 12, 30),
    )
    assert file_info.size_human == "2.00 KB"


def test_metadata_defaults():
    """Test Metadata default values."""
    metadata = Metadata()
    assert metadata.filename is None
    assert metadata.icc is None
    assert metadata.exif_payloads == []
    assert metadata.directories == [metadata.heif]
    assert metadata.has_errors is False


def test_directory_tags():
    """Test setting and reading tags."""
    heif = HeifDirectory()
    heif.set(HeifTag.IMAGE_WIDTH, "4032 pixels", 4032)
    assert heif.contains(HeifTag.IMAGE_WIDTH)
    assert heif.get_description(HeifTag.IMAGE_WIDTH) == "4032 pixels"
    assert heif.get_value(HeifTag.IMAGE_WIDTH) == 4032
    assert heif.get(HeifTag.IMAGE_WIDTH).name == "Image Width"
    assert heif.get_description(HeifTag.IMAGE_HEIGHT) is None
    assert heif.get_value(HeifTag.IMAGE_HEIGHT) is None


def test_directory_replaces_tag():
    """Test setting a tag twice keeps the latest value."""
    icc = IccDirectory()
    icc.set(IccTag.COLOR_SPACE, "RGB")
    icc.set(IccTag.COLOR_SPACE, "GRAY")
    assert icc.descriptions_by_name() == {"Color space": "GRAY"}


def test_unknown_tag_name():
    """Test tags without a display name get a placeholder."""
    assert HeifDirectory.get_tag_name(0x99) == "Unknown tag (0x0099)"


def test_errors_collected():
    """Test errors from every directory are collected."""
    metadata = Metadata(icc=IccDirectory())
    metadata.heif.add_error("heif problem")
    metadata.icc.add_error("icc problem")
    assert metadata.has_errors
    assert metadata.errors == ["heif problem", "icc problem"]


def test_box_info():
    """Test the zero size sentinel on inventory entries."""
    assert BoxInfo(type="mdat", size=0, offset=100).extends_to_end
    assert not BoxInfo(type="ftyp", size=24, offset=0).extends_to_end


def test_json_round_trip():
    """Test payload bytes survive JSON serialisation."""
    metadata = Metadata(exif_payloads=[b"\x00\x01Exif"], icc_payloads=[b"ICC"])
    restored = Metadata.model_validate_json(metadata.model_dump_json())
    assert restored.exif_payloads == [b"\x00\x01Exif"]


def test_extraction_result():
    """Test ExtractionResult defaults."""
    result = ExtractionResult()
    assert not result.has_exif
    assert result.is_display_p3 is False
