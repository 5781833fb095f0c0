"""Tests for building byte artifacts from captured payloads."""

import pytest

from heifmeta.exceptions import ImageProcessingError
from heifmeta.heif.assembler import EXIF_HEADER_LENGTH, assemble_exif, assemble_exif_and_icc


def test_header_length():
    """Test the Exif item header is 4 offset bytes plus Exif\\0\\0."""
    assert EXIF_HEADER_LENGTH == 10


def test_single_buffer_trimmed():
    """Test the first ten bytes are removed."""
    assert assemble_exif([b"0123456789TIFF"]) == b"TIFF"


def test_buffers_concatenated_in_order():
    """Test each buffer is trimmed and joined in capture order."""
    buffers = [b"H" * 10 + b"first", b"h" * 10 + b"second"]
    assert assemble_exif(buffers) == b"firstsecond"


def test_trimming_law():
    """Test the output length is the input length minus ten per buffer."""
    buffers = [b"x" * 25, b"y" * 11, b"z" * 40]
    result = assemble_exif(buffers)
    assert len(result) == sum(len(b) for b in buffers) - EXIF_HEADER_LENGTH * len(buffers)


def test_empty_is_none():
    """Test no buffers or only headers yield None."""
    assert assemble_exif([]) is None
    assert assemble_exif([b"0123456789"]) is None


def test_short_buffer_raises():
    """Test a buffer shorter than the header is wrapped with its cause."""
    with pytest.raises(ImageProcessingError) as excinfo:
        assemble_exif([b"0123456789abc", b"short"])
    assert "Failed to extract EXIF data bytes" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_exif_and_icc():
    """Test ICC profiles follow the trimmed Exif bytes untouched."""
    assert assemble_exif_and_icc([b"0123456789TIFF"], [b"ICC1", b"ICC2"]) == b"TIFFICC1ICC2"


def test_icc_only():
    """Test ICC bytes alone are still returned."""
    assert assemble_exif_and_icc([], [b"ICC"]) == b"ICC"


def test_exif_and_icc_empty():
    """Test nothing captured yields None."""
    assert assemble_exif_and_icc([], []) is None
