"""Per-box decisions for the HEIF walker.

Which boxes are descended into, captured or skipped depends on the phase
of the walk. ``transition()`` is a pure lookup over static tables; the
``BoxHandler`` applies it, interprets captured payloads and owns the
accumulator for one parse.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from heifmeta.exceptions import HeifMetaError
from heifmeta.heif import boxes
from heifmeta.heif.boxes import Box, ItemInfo, ItemLocation, read_full_box_header
from heifmeta.icc.reader import IccReader
from heifmeta.models import BoxInfo, HeifTag, Metadata
from heifmeta.utils.stream import StreamReader


class Phase(str, Enum):
    """Where in the file the walk currently is."""

    FILE = "file"  # top level, meta not seen yet
    META = "meta"  # children of meta
    ITEM_INFO = "item_info"  # children of iinf
    PROPERTIES = "properties"  # iprp/ipco children, ICC profiles live here
    MEDIA = "media"  # top level once meta is known, EXIF items live in mdat


class Action(str, Enum):
    DESCEND = "descend"
    CAPTURE = "capture"
    SKIP = "skip"


class Transition(NamedTuple):
    """What to do with a box and which phases follow it.

    ``child_phase`` applies to the children of a descended container,
    ``next_phase`` to the siblings that come after the box.
    """

    action: Action
    child_phase: Phase | None
    next_phase: Phase


_CONTAINERS: dict[Phase, dict[str, Phase]] = {
    Phase.FILE: {boxes.BOX_META: Phase.META},
    Phase.META: {
        boxes.BOX_ITEM_INFO: Phase.ITEM_INFO,
        boxes.BOX_ITEM_PROPERTIES: Phase.PROPERTIES,
    },
    Phase.ITEM_INFO: {},
    Phase.PROPERTIES: {boxes.BOX_ITEM_PROPERTY_CONTAINER: Phase.PROPERTIES},
    Phase.MEDIA: {},
}

_LEAVES: dict[Phase, frozenset[str]] = {
    Phase.FILE: frozenset({boxes.BOX_FILE_TYPE}),
    Phase.META: frozenset(
        {
            boxes.BOX_HANDLER,
            boxes.BOX_PRIMARY_ITEM,
            boxes.BOX_ITEM_LOCATION,
            boxes.BOX_ITEM_DATA,
        }
    ),
    Phase.ITEM_INFO: frozenset({boxes.BOX_ITEM_INFO_ENTRY}),
    Phase.PROPERTIES: frozenset(
        {
            boxes.BOX_COLOUR_INFO,
            boxes.BOX_IMAGE_SPATIAL_EXTENTS,
            boxes.BOX_IMAGE_ROTATION,
        }
    ),
    Phase.MEDIA: frozenset({boxes.BOX_MEDIA_DATA}),
}

# Phase for the siblings that follow a closed container, when it changes
_AFTER_CONTAINER: dict[tuple[Phase, str], Phase] = {
    (Phase.FILE, boxes.BOX_META): Phase.MEDIA,
}


def transition(phase: Phase, box_type: str) -> Transition:
    """Decide what to do with a box of ``box_type`` seen in ``phase``."""
    kind = box_type.lower()
    child_phase = _CONTAINERS[phase].get(kind)
    if child_phase is not None:
        return Transition(
            Action.DESCEND, child_phase, _AFTER_CONTAINER.get((phase, kind), phase)
        )
    if kind in _LEAVES[phase]:
        return Transition(Action.CAPTURE, None, phase)
    return Transition(Action.SKIP, None, phase)


@dataclass
class ItemTable:
    """Item information gathered from iinf, iloc and idat."""

    items: dict[int, ItemInfo] = field(default_factory=dict)
    locations: dict[int, ItemLocation] = field(default_factory=dict)
    item_data: bytes | None = None
    captured: set[int] = field(default_factory=set)
    # Items with an extent outside an mdat that was read
    outside_mdat: set[int] = field(default_factory=set)

    def exif_locations(self, construction_method: int) -> list[ItemLocation]:
        """EXIF items stored with ``construction_method`` and not yet captured."""
        return [
            location
            for item_id, location in self.locations.items()
            if item_id not in self.captured
            and location.construction_method == construction_method
            and item_id in self.items
            and self.items[item_id].is_exif
        ]


class BoxHandler:
    """Applies phase transitions and records what each box contributes.

    One handler serves one parse; it is never shared between walks.
    """

    def __init__(self, metadata: Metadata | None = None):
        self.metadata = metadata if metadata is not None else Metadata()
        self.item_table = ItemTable()
        self._icc_reader = IccReader()
        self._recorded: set[tuple[int, str]] = set()

    @property
    def has_pending_exif(self) -> bool:
        return bool(self.item_table.exif_locations(0))

    def add_error(self, message: str) -> None:
        self.metadata.heif.add_error(message)

    def record_box(self, box: Box, depth: int) -> None:
        """Add a box to the inventory, once per offset across passes."""
        key = (box.offset, box.type)
        if key in self._recorded:
            return
        self._recorded.add(key)
        self.metadata.heif.boxes.append(
            BoxInfo(
                type=box.type,
                size=box.size,
                offset=box.offset,
                depth=depth,
                header_size=box.header_size,
            )
        )

    def plan(self, box: Box, phase: Phase) -> Transition:
        """Return the transition for ``box``, vetoing mdat reads nobody needs."""
        step = transition(phase, box.type)
        if (
            step.action is Action.CAPTURE
            and box.kind == boxes.BOX_MEDIA_DATA
            and not self.has_pending_exif
        ):
            return Transition(Action.SKIP, None, step.next_phase)
        return step

    def process_container(
        self, box: Box, reader: StreamReader, phase: Phase, end: int | None = None
    ) -> bool:
        """Consume the container's own fields before its children.

        Nothing is read past ``end``. Returns False when the box is too
        short to hold its fields; the caller skips it like any other box.
        """
        kind = box.kind
        if kind == boxes.BOX_META:
            if not self._fits(box, reader, end, boxes.FULL_BOX_HEADER_SIZE):
                return False
            read_full_box_header(reader)
        elif kind == boxes.BOX_ITEM_INFO:
            if not self._fits(box, reader, end, boxes.FULL_BOX_HEADER_SIZE):
                return False
            version, _ = read_full_box_header(reader)
            count_size = 2 if version == 0 else 4
            if not self._fits(box, reader, end, count_size):
                return False
            count = reader.read_uint16() if version == 0 else reader.read_uint32()
            self.metadata.heif.set(HeifTag.ITEM_COUNT, str(count), count)
        return True

    def _fits(self, box: Box, reader: StreamReader, end: int | None, count: int) -> bool:
        if end is None or end - reader.position >= count:
            return True
        self.add_error(f"'{box.type}' box at offset {box.offset} is too short for its header")
        return False

    def process_box(self, box: Box, payload: bytes, phase: Phase) -> Phase:
        """Interpret a captured leaf and return the phase for what follows.

        Payload errors are recorded on the HEIF directory and never end
        the walk.
        """
        try:
            self._interpret(box, payload)
        except HeifMetaError as e:
            self.add_error(f"Unable to parse '{box.type}' box at offset {box.offset}: {e}")
        return transition(phase, box.type).next_phase

    def close_container(self, box: Box, phase: Phase) -> None:
        """Finish a container once all its children are walked."""
        if box.kind == boxes.BOX_META:
            self._capture_item_data()
            exif_ids = [item.item_id for item in self.item_table.items.values() if item.is_exif]
            if exif_ids:
                self.metadata.heif.set(
                    HeifTag.EXIF_ITEM_IDS,
                    ", ".join(str(item_id) for item_id in exif_ids),
                    exif_ids,
                )

    def finish(self) -> None:
        """Report EXIF items in mdat that no single mdat box could supply."""
        for location in self.item_table.exif_locations(0):
            if location.item_id in self.item_table.outside_mdat:
                self.add_error(
                    f"Exif item {location.item_id} is not contained in a single mdat box"
                )

    def _interpret(self, box: Box, payload: bytes) -> None:
        kind = box.kind
        heif = self.metadata.heif

        if kind == boxes.BOX_FILE_TYPE:
            file_type = boxes.parse_file_type(payload)
            heif.set(HeifTag.MAJOR_BRAND, file_type.major_brand.strip(), file_type.major_brand)
            heif.set(HeifTag.MINOR_VERSION, str(file_type.minor_version), file_type.minor_version)
            heif.set(
                HeifTag.COMPATIBLE_BRANDS,
                ", ".join(brand.strip() for brand in file_type.compatible_brands),
                file_type.compatible_brands,
            )
        elif kind == boxes.BOX_HANDLER:
            handler = boxes.parse_handler(payload)
            heif.set(HeifTag.HANDLER_TYPE, handler.handler_type, handler.handler_type)
        elif kind == boxes.BOX_PRIMARY_ITEM:
            item_id = boxes.parse_primary_item(payload)
            heif.set(HeifTag.PRIMARY_ITEM_ID, str(item_id), item_id)
        elif kind == boxes.BOX_ITEM_INFO_ENTRY:
            item = boxes.parse_item_info_entry(payload)
            self.item_table.items[item.item_id] = item
        elif kind == boxes.BOX_ITEM_LOCATION:
            for location in boxes.parse_item_location(payload):
                self.item_table.locations[location.item_id] = location
        elif kind == boxes.BOX_ITEM_DATA:
            self.item_table.item_data = payload
        elif kind == boxes.BOX_COLOUR_INFO:
            self._interpret_colour(boxes.parse_colour_info(payload))
        elif kind == boxes.BOX_IMAGE_SPATIAL_EXTENTS:
            if not heif.contains(HeifTag.IMAGE_WIDTH):
                width, height = boxes.parse_spatial_extents(payload)
                heif.set(HeifTag.IMAGE_WIDTH, f"{width} pixels", width)
                heif.set(HeifTag.IMAGE_HEIGHT, f"{height} pixels", height)
        elif kind == boxes.BOX_IMAGE_ROTATION:
            if not heif.contains(HeifTag.IMAGE_ROTATION):
                degrees = boxes.parse_rotation(payload)
                heif.set(HeifTag.IMAGE_ROTATION, f"{degrees} degrees", degrees)
        elif kind == boxes.BOX_MEDIA_DATA:
            self._capture_media_data(box, payload)

    def _interpret_colour(self, colour: boxes.ColourInfo) -> None:
        heif = self.metadata.heif
        if not heif.contains(HeifTag.COLOUR_TYPE):
            heif.set(HeifTag.COLOUR_TYPE, colour.colour_type, colour.colour_type)

        if colour.icc_profile is not None:
            self.metadata.icc_payloads.append(colour.icc_profile)
            self._icc_reader.extract(colour.icc_profile, self.metadata)
        elif colour.colour_primaries is not None and not heif.contains(HeifTag.COLOUR_PRIMARIES):
            heif.set(HeifTag.COLOUR_PRIMARIES, str(colour.colour_primaries), colour.colour_primaries)
            heif.set(
                HeifTag.TRANSFER_CHARACTERISTICS,
                str(colour.transfer_characteristics),
                colour.transfer_characteristics,
            )
            heif.set(
                HeifTag.MATRIX_COEFFICIENTS,
                str(colour.matrix_coefficients),
                colour.matrix_coefficients,
            )
            heif.set(HeifTag.FULL_RANGE, "Yes" if colour.full_range else "No", colour.full_range)

    def _capture_item_data(self) -> None:
        """Capture EXIF items stored inline in idat."""
        data = self.item_table.item_data
        if data is None:
            return
        for location in self.item_table.exif_locations(1):
            if not location.extents:
                continue
            pieces = []
            for offset, length in location.extents:
                end = len(data) if length == 0 else offset + length
                if end > len(data):
                    self.add_error(f"Exif item {location.item_id} extends beyond idat")
                    break
                pieces.append(data[offset:end])
            else:
                self._append_exif(location.item_id, b"".join(pieces))

    def _capture_media_data(self, box: Box, payload: bytes) -> None:
        """Capture EXIF items whose extents all fall inside this mdat."""
        start = box.payload_offset
        end = start + len(payload)
        for location in self.item_table.exif_locations(0):
            if not location.extents:
                continue
            pieces = []
            for offset, length in location.extents:
                extent_end = end if length == 0 else offset + length
                if offset < start or extent_end > end:
                    self.item_table.outside_mdat.add(location.item_id)
                    break
                pieces.append(payload[offset - start : extent_end - start])
            else:
                self._append_exif(location.item_id, b"".join(pieces))

    def _append_exif(self, item_id: int, data: bytes) -> None:
        self.item_table.captured.add(item_id)
        self.metadata.exif_payloads.append(data)
