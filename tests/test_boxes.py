"""Tests for box headers and payload parsers."""

import struct

import pytest

from builders import (
    box,
    colr_icc,
    colr_nclx,
    ftyp,
    full_box,
    hdlr,
    iloc,
    infe,
    irot,
    ispe,
    large_box,
    pitm,
)
from heifmeta.exceptions import BoxFormatError, TruncatedStreamError
from heifmeta.heif import boxes
from heifmeta.heif.boxes import read_box, read_full_box_header
from heifmeta.utils.stream import StreamReader


def payload_of(data: bytes) -> bytes:
    """Strip a plain 8-byte box header."""
    return data[8:]


class TestReadBox:
    """Test box header decoding."""

    def test_compact_header(self):
        """Test a 32-bit size header."""
        reader = StreamReader.from_bytes(box("ftyp", b"\x00" * 12))
        header = read_box(reader)
        assert header.type == "ftyp"
        assert header.size == 20
        assert header.offset == 0
        assert header.header_size == 8
        assert header.payload_size == 12
        assert header.end == 20
        assert reader.position == 8

    def test_extended_size(self):
        """Test size 1 is followed by a 64-bit size."""
        reader = StreamReader.from_bytes(large_box("mdat", b"\x00" * 4))
        header = read_box(reader)
        assert header.size == 20
        assert header.header_size == 16
        assert header.payload_offset == 16
        assert header.payload_size == 4

    def test_uuid_extended_type(self):
        """Test a uuid box carries its 16-byte user type."""
        user_type = bytes(range(16))
        data = struct.pack(">I4s", 8 + 16 + 2, b"uuid") + user_type + b"\x00\x00"
        header = read_box(StreamReader.from_bytes(data))
        assert header.type == "uuid"
        assert header.user_type == user_type
        assert header.header_size == 24
        assert header.payload_size == 2

    def test_size_zero_extends_to_end(self):
        """Test the zero size sentinel."""
        header = read_box(StreamReader.from_bytes(struct.pack(">I4s", 0, b"mdat")))
        assert header.extends_to_end
        assert header.end is None
        assert header.payload_size is None

    def test_extended_size_smaller_than_header(self):
        """Test a 64-bit size that cannot hold its own header."""
        data = struct.pack(">I4sQ", 1, b"free", 10)
        with pytest.raises(BoxFormatError):
            read_box(StreamReader.from_bytes(data))

    def test_degenerate_compact_size_is_returned(self):
        """Test a 32-bit size below 8 is left for the walker to handle."""
        header = read_box(StreamReader.from_bytes(struct.pack(">I4s", 4, b"free")))
        assert header.size == 4

    def test_truncated_header(self):
        """Test a header cut short raises."""
        with pytest.raises(TruncatedStreamError):
            read_box(StreamReader.from_bytes(b"\x00\x00\x00\x10fty"))

    def test_kind_is_lower_case(self):
        """Test comparisons use the lower-cased type."""
        header = read_box(StreamReader.from_bytes(box("Exif")))
        assert header.type == "Exif"
        assert header.kind == "exif"

    def test_full_box_header(self):
        """Test version and flags are split."""
        reader = StreamReader.from_bytes(b"\x02\x00\x00\x05")
        assert read_full_box_header(reader) == (2, 5)


class TestPayloadParsers:
    """Test parsers for individual box payloads."""

    def test_file_type(self):
        """Test ftyp brands."""
        file_type = boxes.parse_file_type(payload_of(ftyp("heic", 0, ("mif1", "heic", "miaf"))))
        assert file_type.major_brand == "heic"
        assert file_type.minor_version == 0
        assert file_type.compatible_brands == ["mif1", "heic", "miaf"]

    def test_handler(self):
        """Test hdlr type and name."""
        handler = boxes.parse_handler(payload_of(hdlr("pict", "Picture")))
        assert handler.handler_type == "pict"
        assert handler.name == "Picture"

    def test_primary_item(self):
        """Test pitm item id."""
        assert boxes.parse_primary_item(payload_of(pitm(7))) == 7

    def test_item_info_entry_v2(self):
        """Test a version 2 infe entry."""
        item = boxes.parse_item_info_entry(payload_of(infe(3, "Exif", "exif data")))
        assert item.item_id == 3
        assert item.item_type == "Exif"
        assert item.item_name == "exif data"
        assert item.is_exif

    def test_item_info_entry_v3(self):
        """Test a version 3 infe entry with a 32-bit id."""
        item = boxes.parse_item_info_entry(payload_of(infe(70000, "hvc1", version=3)))
        assert item.item_id == 70000
        assert not item.is_exif

    def test_item_info_entry_v0(self):
        """Test an old-style infe entry has no item type."""
        payload = struct.pack(">HH", 5, 0) + b"name\x00text/plain\x00"
        item = boxes.parse_item_info_entry(payload_of(full_box("infe", payload, version=0)))
        assert item.item_id == 5
        assert item.item_type is None
        assert item.item_name == "name"
        assert item.content_type == "text/plain"
        assert not item.is_exif

    def test_item_location_applies_base_offset(self):
        """Test iloc extents include the base offset."""
        data = iloc([(2, 0, [(100, 50), (200, 10)])], base_offset=1000)
        (location,) = boxes.parse_item_location(payload_of(data))
        assert location.item_id == 2
        assert location.construction_method == 0
        assert location.base_offset == 1000
        assert location.extents == [(1100, 50), (1200, 10)]

    def test_item_location_construction_method(self):
        """Test version 1 carries the construction method."""
        data = iloc([(1, 0, [(0, 4)]), (2, 1, [(8, 16)])], version=1)
        locations = boxes.parse_item_location(payload_of(data))
        assert [loc.construction_method for loc in locations] == [0, 1]

    def test_item_location_version_0(self):
        """Test version 0 has no construction method."""
        data = iloc([(9, 0, [(64, 32)])], version=0, offset_size=8, length_size=4)
        (location,) = boxes.parse_item_location(payload_of(data))
        assert location.item_id == 9
        assert location.extents == [(64, 32)]

    def test_item_location_version_2(self):
        """Test version 2 uses 32-bit item ids and counts."""
        data = iloc([(80000, 1, [(0, 12)])], version=2)
        (location,) = boxes.parse_item_location(payload_of(data))
        assert location.item_id == 80000
        assert location.construction_method == 1

    def test_item_location_unsupported_version(self):
        """Test unknown iloc versions are rejected."""
        data = full_box("iloc", b"\x00" * 8, version=3)
        with pytest.raises(BoxFormatError):
            boxes.parse_item_location(payload_of(data))

    def test_spatial_extents(self):
        """Test ispe dimensions."""
        assert boxes.parse_spatial_extents(payload_of(ispe(4032, 3024))) == (4032, 3024)

    def test_rotation(self):
        """Test irot angle in degrees."""
        assert boxes.parse_rotation(payload_of(irot(3))) == 270
        assert boxes.parse_rotation(payload_of(irot(0))) == 0

    def test_colour_nclx(self):
        """Test nclx colour information."""
        colour = boxes.parse_colour_info(payload_of(colr_nclx(12, 13, 1, True)))
        assert colour.colour_type == "nclx"
        assert colour.colour_primaries == 12
        assert colour.transfer_characteristics == 13
        assert colour.matrix_coefficients == 1
        assert colour.full_range is True
        assert colour.icc_profile is None

    def test_colour_icc(self):
        """Test prof and rICC carry the profile bytes."""
        assert boxes.parse_colour_info(payload_of(colr_icc(b"PROFILE"))).icc_profile == b"PROFILE"
        colour = boxes.parse_colour_info(payload_of(colr_icc(b"RESTRICTED", "rICC")))
        assert colour.icc_profile == b"RESTRICTED"
