"""ISO-BMFF box headers and the payload parsers for HEIF metadata boxes."""

from dataclasses import dataclass, field

from heifmeta.exceptions import BoxFormatError
from heifmeta.utils.stream import StreamReader

BOX_HEADER_SIZE = 8
FULL_BOX_HEADER_SIZE = 4
EXTENDED_SIZE_MARKER = 1
TO_END_MARKER = 0
EXTENDED_TYPE = "uuid"

# Box types the handler knows about
BOX_FILE_TYPE = "ftyp"
BOX_META = "meta"
BOX_HANDLER = "hdlr"
BOX_PRIMARY_ITEM = "pitm"
BOX_ITEM_INFO = "iinf"
BOX_ITEM_INFO_ENTRY = "infe"
BOX_ITEM_LOCATION = "iloc"
BOX_ITEM_DATA = "idat"
BOX_ITEM_PROPERTIES = "iprp"
BOX_ITEM_PROPERTY_CONTAINER = "ipco"
BOX_COLOUR_INFO = "colr"
BOX_IMAGE_SPATIAL_EXTENTS = "ispe"
BOX_IMAGE_ROTATION = "irot"
BOX_MEDIA_DATA = "mdat"

ITEM_TYPE_EXIF = "exif"

COLOUR_TYPE_NCLX = "nclx"
ICC_COLOUR_TYPES = ("prof", "ricc")


@dataclass(frozen=True)
class Box:
    """A parsed box header.

    ``size`` counts the whole box including its header, measured from
    ``offset``. A size of 0 means the box runs to the end of its scope.
    """

    type: str
    size: int
    offset: int
    header_size: int = BOX_HEADER_SIZE
    user_type: bytes | None = None

    @property
    def kind(self) -> str:
        """Lower-cased type used for comparisons."""
        return self.type.lower()

    @property
    def extends_to_end(self) -> bool:
        return self.size == TO_END_MARKER

    @property
    def payload_offset(self) -> int:
        return self.offset + self.header_size

    @property
    def payload_size(self) -> int | None:
        """Bytes after the header, or None for a box that runs to the end."""
        if self.extends_to_end:
            return None
        return self.size - self.header_size

    @property
    def end(self) -> int | None:
        if self.extends_to_end:
            return None
        return self.offset + self.size


def read_box(reader: StreamReader) -> Box:
    """Read one box header at the current position.

    Raises:
        TruncatedStreamError: If the stream ends inside the header
        BoxFormatError: If an extended header declares a size smaller than itself
    """
    offset = reader.position
    size = reader.read_uint32()
    box_type = reader.read_fourcc()
    header_size = BOX_HEADER_SIZE

    if size == EXTENDED_SIZE_MARKER:
        size = reader.read_uint64()
        header_size += 8

    user_type = None
    if box_type.lower() == EXTENDED_TYPE:
        user_type = reader.read_bytes(16)
        header_size += 16

    if size != TO_END_MARKER and size < header_size and header_size > BOX_HEADER_SIZE:
        raise BoxFormatError(
            f"Box '{box_type}' at offset {offset} declares size {size} "
            f"smaller than its {header_size}-byte header"
        )

    return Box(
        type=box_type,
        size=size,
        offset=offset,
        header_size=header_size,
        user_type=user_type,
    )


def read_full_box_header(reader: StreamReader) -> tuple[int, int]:
    """Read the version byte and 24-bit flags of a full box."""
    version_and_flags = reader.read_uint32()
    return version_and_flags >> 24, version_and_flags & 0xFFFFFF


@dataclass
class FileType:
    major_brand: str
    minor_version: int
    compatible_brands: list[str] = field(default_factory=list)


@dataclass
class Handler:
    handler_type: str
    name: str = ""


@dataclass
class ItemInfo:
    item_id: int
    item_type: str | None = None
    item_name: str = ""
    content_type: str | None = None

    @property
    def is_exif(self) -> bool:
        return self.item_type is not None and self.item_type.strip().lower() == ITEM_TYPE_EXIF


@dataclass
class ItemLocation:
    """Where an item's bytes live.

    Extents are ``(offset, length)`` pairs with the base offset already
    applied. Construction method 0 means file offsets, 1 means offsets
    into the ``idat`` payload.
    """

    item_id: int
    construction_method: int = 0
    data_reference_index: int = 0
    base_offset: int = 0
    extents: list[tuple[int, int]] = field(default_factory=list)


@dataclass
class ColourInfo:
    colour_type: str
    icc_profile: bytes | None = None
    colour_primaries: int | None = None
    transfer_characteristics: int | None = None
    matrix_coefficients: int | None = None
    full_range: bool | None = None


def parse_file_type(payload: bytes) -> FileType:
    reader = StreamReader.from_bytes(payload)
    file_type = FileType(
        major_brand=reader.read_fourcc(),
        minor_version=reader.read_uint32(),
    )
    while reader.remaining() >= 4:
        file_type.compatible_brands.append(reader.read_fourcc())
    return file_type


def parse_handler(payload: bytes) -> Handler:
    reader = StreamReader.from_bytes(payload)
    read_full_box_header(reader)
    reader.skip(4)  # pre_defined
    handler = Handler(handler_type=reader.read_fourcc())
    if reader.remaining() > 12:
        reader.skip(12)
        handler.name = reader.read_null_terminated()
    return handler


def parse_primary_item(payload: bytes) -> int:
    reader = StreamReader.from_bytes(payload)
    version, _ = read_full_box_header(reader)
    return reader.read_uint16() if version == 0 else reader.read_uint32()


def parse_item_info_entry(payload: bytes) -> ItemInfo:
    """Parse an ``infe`` box of any version."""
    reader = StreamReader.from_bytes(payload)
    version, _ = read_full_box_header(reader)

    if version < 2:
        item = ItemInfo(item_id=reader.read_uint16())
        reader.skip(2)  # item_protection_index
        item.item_name = reader.read_null_terminated()
        if reader.remaining():
            item.content_type = reader.read_null_terminated()
        return item

    item_id = reader.read_uint16() if version == 2 else reader.read_uint32()
    reader.skip(2)  # item_protection_index
    item = ItemInfo(item_id=item_id, item_type=reader.read_fourcc())
    item.item_name = reader.read_null_terminated()
    if item.item_type == "mime" and reader.remaining():
        item.content_type = reader.read_null_terminated()
    return item


def parse_item_location(payload: bytes) -> list[ItemLocation]:
    """Parse an ``iloc`` box (versions 0 to 2)."""
    reader = StreamReader.from_bytes(payload)
    version, _ = read_full_box_header(reader)
    if version > 2:
        raise BoxFormatError(f"Unsupported iloc version {version}")

    sizes = reader.read_uint16()
    offset_size = (sizes >> 12) & 0x0F
    length_size = (sizes >> 8) & 0x0F
    base_offset_size = (sizes >> 4) & 0x0F
    index_size = sizes & 0x0F if version in (1, 2) else 0

    item_count = reader.read_uint16() if version < 2 else reader.read_uint32()

    locations = []
    for _ in range(item_count):
        item_id = reader.read_uint16() if version < 2 else reader.read_uint32()
        construction_method = 0
        if version in (1, 2):
            construction_method = reader.read_uint16() & 0x0F
        location = ItemLocation(
            item_id=item_id,
            construction_method=construction_method,
            data_reference_index=reader.read_uint16(),
            base_offset=reader.read_uint(base_offset_size),
        )
        extent_count = reader.read_uint16()
        for _ in range(extent_count):
            if index_size:
                reader.read_uint(index_size)
            extent_offset = reader.read_uint(offset_size)
            extent_length = reader.read_uint(length_size)
            location.extents.append((location.base_offset + extent_offset, extent_length))
        locations.append(location)
    return locations


def parse_spatial_extents(payload: bytes) -> tuple[int, int]:
    reader = StreamReader.from_bytes(payload)
    read_full_box_header(reader)
    return reader.read_uint32(), reader.read_uint32()


def parse_rotation(payload: bytes) -> int:
    """Return the anti-clockwise rotation in degrees."""
    reader = StreamReader.from_bytes(payload)
    return (reader.read_uint8() & 0x03) * 90


def parse_colour_info(payload: bytes) -> ColourInfo:
    reader = StreamReader.from_bytes(payload)
    colour = ColourInfo(colour_type=reader.read_fourcc())
    kind = colour.colour_type.lower()
    if kind == COLOUR_TYPE_NCLX:
        colour.colour_primaries = reader.read_uint16()
        colour.transfer_characteristics = reader.read_uint16()
        colour.matrix_coefficients = reader.read_uint16()
        colour.full_range = bool(reader.read_uint8() & 0x80)
    elif kind in ICC_COLOUR_TYPES:
        colour.icc_profile = reader.read_remaining()
    return colour
