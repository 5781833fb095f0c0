"""HEIF box parsing, walking and payload assembly."""

from .assembler import EXIF_HEADER_LENGTH, assemble_exif, assemble_exif_and_icc
from .boxes import Box, read_box
from .handlers import Action, BoxHandler, Phase, Transition, transition
from .walker import HeifReader, OrderTracker

__all__ = [
    # Walking
    "HeifReader",
    "BoxHandler",
    "OrderTracker",
    "Phase",
    "Action",
    "Transition",
    "transition",
    # Boxes
    "Box",
    "read_box",
    # Assembly
    "EXIF_HEADER_LENGTH",
    "assemble_exif",
    "assemble_exif_and_icc",
]
