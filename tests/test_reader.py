"""End-to-end tests for the public entry points."""

import io

import pytest

from builders import (
    EXIF_ITEM,
    TIFF_DATA,
    NonSeekableStream,
    heif_with_idat_exif,
    heif_with_mdat_exif,
)
from heifmeta import (
    ExtractionResult,
    HeifMetaWarning,
    ImageProcessingError,
    Metadata,
    extract,
    get_exif_and_display_p3_info,
    read_exif_and_icc_bytes,
    read_exif_bytes,
    read_files,
    read_metadata,
)
from heifmeta.heif.walker import OUT_OF_ORDER_MESSAGE
from heifmeta.models import HeifTag

JPEG_HEADER = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00" + b"\x00" * 64


class TestReadMetadata:
    """Test read_metadata on paths and streams."""

    def test_path(self, heif_file):
        """Test reading from a path fills in file info."""
        metadata = read_metadata(str(heif_file))
        assert isinstance(metadata, Metadata)
        assert metadata.filename == "photo.heic"
        assert metadata.file_info.extension == ".heic"
        assert metadata.file_info.size_bytes == heif_file.stat().st_size
        assert metadata.heif.get_description(HeifTag.MAJOR_BRAND) == "heic"
        assert metadata.heif.get_value(HeifTag.IMAGE_WIDTH) == 4032

    def test_pathlike(self, heif_file):
        """Test os.PathLike sources are accepted."""
        assert read_metadata(heif_file).filename == "photo.heic"

    def test_stream_left_open(self, idat_heif):
        """Test caller-owned streams are not closed."""
        stream = io.BytesIO(idat_heif)
        metadata = read_metadata(stream)
        assert metadata.file_info is None
        assert not stream.closed

    def test_file_not_found(self):
        """Test a missing path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_metadata("/nonexistent/photo.heic")


class TestScenarios:
    """Test complete files."""

    def test_exif_in_idat(self, idat_heif):
        """Test an Exif item stored in idat."""
        assert read_exif_bytes(io.BytesIO(idat_heif)) == TIFF_DATA

    def test_exif_in_mdat(self, mdat_heif):
        """Test an Exif item stored in mdat."""
        assert read_exif_bytes(io.BytesIO(mdat_heif)) == TIFF_DATA

    def test_display_p3_mapping(self, mdat_heif):
        """Test the Exif to Display P3 mapping."""
        assert get_exif_and_display_p3_info(io.BytesIO(mdat_heif)) == {TIFF_DATA: True}

    def test_no_icc_is_not_p3(self):
        """Test a file without a profile maps to False."""
        assert get_exif_and_display_p3_info(io.BytesIO(heif_with_idat_exif())) == {TIFF_DATA: False}

    def test_exif_and_icc(self, idat_heif, p3_profile):
        """Test the combined artifact is Exif followed by the profile."""
        assert read_exif_and_icc_bytes(io.BytesIO(idat_heif)) == TIFF_DATA + p3_profile

    def test_jpeg_input(self):
        """Test a JPEG yields nothing and no ordering diagnostic."""
        metadata = read_metadata(io.BytesIO(JPEG_HEADER))
        assert metadata.exif_payloads == []
        assert OUT_OF_ORDER_MESSAGE not in metadata.errors
        assert read_exif_bytes(io.BytesIO(JPEG_HEADER)) is None
        assert get_exif_and_display_p3_info(io.BytesIO(JPEG_HEADER)) == {None: False}

    def test_late_meta_non_seekable(self, p3_profile):
        """Test a forward-only stream with mdat before meta."""
        data = heif_with_mdat_exif(icc=p3_profile, order=("ftyp", "mdat", "meta"))
        with pytest.warns(HeifMetaWarning):
            result = extract(NonSeekableStream(data))
        assert result.exif is None
        assert result.is_display_p3 is True
        assert OUT_OF_ORDER_MESSAGE in result.errors

    def test_late_meta_seekable(self, p3_profile):
        """Test a seekable stream with mdat before meta."""
        data = heif_with_mdat_exif(icc=p3_profile, order=("ftyp", "mdat", "meta"))
        assert read_exif_bytes(io.BytesIO(data)) == TIFF_DATA

    def test_short_exif_item(self):
        """Test an Exif item shorter than its header raises."""
        data = heif_with_idat_exif(exif=b"\x00\x00\x00\x06Ex")
        with pytest.raises(ImageProcessingError):
            read_exif_bytes(io.BytesIO(data))


class TestExtract:
    """Test the all-in-one extract()."""

    def test_result(self, heif_file, p3_profile):
        """Test every artifact is filled in."""
        result = extract(heif_file)
        assert isinstance(result, ExtractionResult)
        assert result.has_exif
        assert result.exif == TIFF_DATA
        assert result.icc == p3_profile
        assert result.combined == TIFF_DATA + p3_profile
        assert result.is_display_p3 is True
        assert result.errors == []

    def test_empty(self):
        """Test a file with nothing to extract."""
        result = extract(io.BytesIO(JPEG_HEADER))
        assert result.exif is None
        assert result.icc is None
        assert result.combined is None
        assert result.is_display_p3 is False

    def test_json_serialisable(self, idat_heif):
        """Test bytes fields serialise as base64."""
        result = extract(io.BytesIO(idat_heif))
        assert '"exif":"' in result.model_dump_json()


class TestReadFiles:
    """Test batch reading."""

    def test_missing_files_warn(self, heif_file):
        """Test failures become warnings and the rest are returned."""
        with pytest.warns(HeifMetaWarning, match="Failed to read"):
            results = read_files([str(heif_file), "/nonexistent/photo.heic"])
        assert len(results) == 1
        assert results[0].exif_payloads == [EXIF_ITEM]
