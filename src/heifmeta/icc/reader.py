"""ICC profile reader.

The profile is a 128-byte header, a tag table and the tagged element
data. Header fields are stored in the directory under their byte offset,
tag-table elements under their signature (see ``IccTag``).
"""

import struct

from heifmeta.exceptions import TruncatedStreamError
from heifmeta.models import IccDirectory, IccTag, Metadata
from heifmeta.utils.stream import StreamReader

ICC_HEADER_SIZE = 128
ICC_SIGNATURE = "acsp"
TAG_TABLE_ENTRY_SIZE = 12

PROFILE_CLASSES = {
    "scnr": "Input Device",
    "mntr": "Display Device",
    "prtr": "Output Device",
    "link": "DeviceLink",
    "spac": "ColorSpace Conversion",
    "abst": "Abstract",
    "nmcl": "Named Color",
}

PLATFORMS = {
    "APPL": "Apple Computer, Inc.",
    "MSFT": "Microsoft Corporation",
    "SGI ": "Silicon Graphics, Inc.",
    "SUNW": "Sun Microsystems, Inc.",
    "TGNT": "Taligent, Inc.",
}

RENDERING_INTENTS = {
    0: "Perceptual",
    1: "Media-Relative Colorimetric",
    2: "Saturation",
    3: "ICC-Absolute Colorimetric",
}

TEXT_TAGS = frozenset(
    {
        IccTag.PROFILE_DESCRIPTION,
        IccTag.COPYRIGHT,
        IccTag.DEVICE_MFG_DESCRIPTION,
        IccTag.DEVICE_MODEL_DESCRIPTION,
    }
)
XYZ_TAGS = frozenset(
    {
        IccTag.MEDIA_WHITE_POINT,
        IccTag.RED_COLORANT,
        IccTag.GREEN_COLORANT,
        IccTag.BLUE_COLORANT,
        IccTag.LUMINANCE,
    }
)


def format_number(value: float, places: int) -> str:
    """Format with at most ``places`` decimals, dropping trailing zeros."""
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def format_xyz_values(xyz: tuple[float, float, float]) -> str:
    """Header illuminant style: ``0.9642 1 0.82491``."""
    return " ".join(format_number(v, 5) for v in xyz)


def format_xyz_triple(xyz: tuple[float, float, float]) -> str:
    """XYZType style: ``(0.5151, 0.2412, -0.0011)``."""
    return "(" + ", ".join(format_number(v, 4) for v in xyz) + ")"


def _signature(value: int) -> str:
    return struct.pack(">I", value).decode("latin-1")


class IccReader:
    """Parses ICC profile bytes into an ``IccDirectory``."""

    def extract(self, data: bytes, metadata: Metadata | None = None) -> IccDirectory:
        """Parse ``data`` and attach the directory to ``metadata``.

        Only the first profile of a file becomes ``metadata.icc``; later
        profiles are parsed and returned but not attached.
        """
        directory = IccDirectory()
        try:
            if self._read_header(data, directory):
                self._read_tag_table(data, directory)
        except TruncatedStreamError as e:
            directory.add_error(f"Exception reading ICC profile: {e}")

        if metadata is not None and metadata.icc is None:
            metadata.icc = directory
        return directory

    def _read_header(self, data: bytes, directory: IccDirectory) -> bool:
        if len(data) < ICC_HEADER_SIZE:
            directory.add_error(
                f"ICC profile too short: {len(data)} bytes, header needs {ICC_HEADER_SIZE}"
            )
            return False

        reader = StreamReader.from_bytes(data[:ICC_HEADER_SIZE])
        profile_size = reader.read_uint32()
        cmm_type = reader.read_fourcc()
        version = reader.read_bytes(4)
        profile_class = reader.read_fourcc()
        color_space = reader.read_fourcc()
        connection_space = reader.read_fourcc()
        date_parts = [reader.read_uint16() for _ in range(6)]
        signature = reader.read_fourcc()

        if signature != ICC_SIGNATURE:
            directory.add_error(f"Invalid ICC profile signature: {signature!r}")
            return False

        platform = reader.read_fourcc()
        reader.skip(20)  # flags, manufacturer, model, attributes
        rendering_intent = reader.read_uint32()
        illuminant = (
            reader.read_s15_fixed16(),
            reader.read_s15_fixed16(),
            reader.read_s15_fixed16(),
        )
        creator = reader.read_fourcc()

        directory.set(IccTag.PROFILE_BYTE_COUNT, str(profile_size), profile_size)
        if cmm_type.strip("\x00 "):
            directory.set(IccTag.CMM_TYPE, cmm_type.strip(), cmm_type)
        directory.set(
            IccTag.PROFILE_VERSION,
            f"{version[0]}.{version[1] >> 4}.{version[1] & 0x0F}",
            version[0],
        )
        directory.set(
            IccTag.PROFILE_CLASS,
            PROFILE_CLASSES.get(profile_class, profile_class.strip()),
            profile_class,
        )
        directory.set(IccTag.COLOR_SPACE, color_space.strip(), color_space)
        directory.set(IccTag.PROFILE_CONNECTION_SPACE, connection_space.strip(), connection_space)
        if any(date_parts):
            year, month, day, hour, minute, second = date_parts
            directory.set(
                IccTag.PROFILE_DATETIME,
                f"{year:04d}:{month:02d}:{day:02d} {hour:02d}:{minute:02d}:{second:02d}",
                tuple(date_parts),
            )
        directory.set(IccTag.SIGNATURE, signature, signature)
        if platform.strip("\x00 "):
            directory.set(IccTag.PLATFORM, PLATFORMS.get(platform, platform.strip()), platform)
        directory.set(
            IccTag.RENDERING_INTENT,
            RENDERING_INTENTS.get(rendering_intent, f"Unknown ({rendering_intent})"),
            rendering_intent,
        )
        directory.set(IccTag.XYZ_VALUES, format_xyz_values(illuminant), illuminant)
        if creator.strip("\x00 "):
            directory.set(IccTag.PROFILE_CREATOR, creator.strip(), creator)
        return True

    def _read_tag_table(self, data: bytes, directory: IccDirectory) -> None:
        reader = StreamReader.from_bytes(data)
        reader.skip(ICC_HEADER_SIZE)
        tag_count = reader.read_uint32()
        directory.set(IccTag.TAG_COUNT, str(tag_count), tag_count)

        for _ in range(tag_count):
            signature = reader.read_uint32()
            offset = reader.read_uint32()
            size = reader.read_uint32()
            if offset + size > len(data):
                directory.add_error(
                    f"ICC tag '{_signature(signature)}' extends beyond the profile data"
                )
                continue
            element = data[offset : offset + size]
            try:
                tag = IccTag(signature)
            except ValueError:
                continue
            try:
                self._read_element(tag, element, directory)
            except TruncatedStreamError as e:
                directory.add_error(f"ICC tag '{_signature(tag)}' is malformed: {e}")

    def _read_element(self, tag: IccTag, element: bytes, directory: IccDirectory) -> None:
        if len(element) < 8:
            directory.add_error(f"ICC tag '{_signature(tag)}' is too short")
            return
        type_signature = element[:4].decode("latin-1")

        if tag in XYZ_TAGS:
            if type_signature != "XYZ " or len(element) < 20:
                directory.add_error(f"ICC tag '{_signature(tag)}' is not an XYZType")
                return
            reader = StreamReader.from_bytes(element[8:20])
            xyz = (reader.read_s15_fixed16(), reader.read_s15_fixed16(), reader.read_s15_fixed16())
            directory.set(tag, format_xyz_triple(xyz), xyz)
        elif tag in TEXT_TAGS:
            text = self._read_text(type_signature, element)
            if text is None:
                directory.add_error(
                    f"ICC tag '{_signature(tag)}' has unsupported type '{type_signature}'"
                )
                return
            directory.set(tag, text, text)

    def _read_text(self, type_signature: str, element: bytes) -> str | None:
        if type_signature == "desc":
            reader = StreamReader.from_bytes(element[8:])
            count = reader.read_uint32()
            return reader.read_bytes(min(count, reader.remaining())).split(b"\x00", 1)[0].decode(
                "latin-1"
            )
        if type_signature == "text":
            return element[8:].split(b"\x00", 1)[0].decode("latin-1")
        if type_signature == "mluc":
            reader = StreamReader.from_bytes(element[8:])
            record_count = reader.read_uint32()
            record_size = reader.read_uint32()
            if record_count == 0:
                return ""
            reader.skip(4)  # language and country of the first record
            length = reader.read_uint32()
            offset = reader.read_uint32()
            if record_size < 12 or offset + length > len(element):
                raise TruncatedStreamError("mluc record points outside the tag element")
            return element[offset : offset + length].decode("utf-16-be", errors="replace").rstrip(
                "\x00"
            )
        return None
