"""Box tree walker for HEIF files.

The walk is depth-first over nested boxes, driven by an explicit stack
of frames so nesting depth in the input cannot exhaust the call stack.
A truncated or malformed stream ends the walk quietly with whatever was
captured so far.

HEIF does not fix the order of top-level boxes, and items can only be
interpreted once ``meta`` has been read. When another box comes before
``meta`` the reader rewinds and walks the file a second time with the
item tables already known. Sources that cannot rewind keep the first
pass and get a diagnostic instead.
"""

import warnings
from dataclasses import dataclass
from typing import BinaryIO

from heifmeta.config import HeifMetaConfig, WalkerConfig, get_config
from heifmeta.exceptions import HeifMetaError, HeifMetaWarning
from heifmeta.heif import boxes
from heifmeta.heif.assembler import assemble_exif
from heifmeta.heif.boxes import Box, read_box
from heifmeta.heif.handlers import Action, BoxHandler, Phase
from heifmeta.icc.display_p3 import is_display_p3
from heifmeta.utils.stream import StreamReader

# Top-level boxes that may precede meta without forcing a second pass
SAFE_BEFORE_META = frozenset({"ftyp", "free", "skip", "wide", "pdin", "styp"})

OUT_OF_ORDER_MESSAGE = (
    "EXIF data unavailable: non-resettable stream encountered meta box out of order"
)


@dataclass
class _Frame:
    """One level of the walk: a container's extent and the phase inside it."""

    end: int | None
    phase: Phase
    container: Box | None = None
    done: bool = False


class OrderTracker:
    """Watches top-level box order for a late ``meta`` box.

    ``observe()`` returns False when the walk should stop before the given
    box: once meta has been read and a rewind is both needed and possible,
    the second pass covers everything after it.
    """

    def __init__(self, rewindable: bool):
        self.rewindable = rewindable
        self.meta_seen = False
        self.reset_required = False

    def observe(self, box: Box) -> bool:
        if self.meta_seen:
            return not (self.reset_required and self.rewindable)
        if box.kind == boxes.BOX_META:
            self.meta_seen = True
        elif box.kind not in SAFE_BEFORE_META:
            self.reset_required = True
        return True


class HeifReader:
    """Walks HEIF box trees and builds byte artifacts from what it captures."""

    def __init__(self, config: HeifMetaConfig | None = None):
        self.config = config or get_config()

    @property
    def walker_config(self) -> WalkerConfig:
        return self.config.walker

    def extract(self, stream: BinaryIO | StreamReader, handler: BoxHandler) -> BoxHandler:
        """Walk a whole file, rewinding once if meta arrives late.

        Args:
            stream: Source positioned at the start of the file
            handler: Handler whose metadata receives the results

        Returns:
            The handler, for chaining
        """
        reader = stream if isinstance(stream, StreamReader) else StreamReader(stream)
        rewindable = self.walker_config.allow_rewind and reader.supports_rewind()
        if rewindable:
            reader.mark()

        tracker = OrderTracker(rewindable)
        phase = self.walk(reader, None, handler, Phase.FILE, tracker)

        if tracker.meta_seen and tracker.reset_required:
            if rewindable:
                reader.reset()
                self.walk(reader, None, handler, phase)
            else:
                handler.add_error(OUT_OF_ORDER_MESSAGE)
                warnings.warn(OUT_OF_ORDER_MESSAGE, HeifMetaWarning, stacklevel=2)
        handler.finish()
        return handler

    def walk(
        self,
        reader: StreamReader,
        end_offset: int | None,
        handler: BoxHandler,
        phase: Phase,
        tracker: OrderTracker | None = None,
    ) -> Phase:
        """Walk the boxes between the current position and ``end_offset``.

        Args:
            reader: Source positioned at a box boundary
            end_offset: Offset where this scope ends, or None for end of stream
            handler: Handler deciding what happens to each box
            phase: Phase of the boxes at this level
            tracker: Optional observer of top-level box order

        Returns:
            The phase in effect at this level when the walk ends
        """
        root = _Frame(end=end_offset, phase=phase)
        frames = [root]
        max_depth = self.walker_config.max_depth
        depth_reported = False

        try:
            while frames:
                frame = frames[-1]
                if frame.done or (
                    frame.end is not None and frame.end - reader.position < boxes.BOX_HEADER_SIZE
                ):
                    frames.pop()
                    if frame.container is not None:
                        handler.close_container(frame.container, frame.phase)
                        if frame.end is not None and reader.position < frame.end:
                            reader.skip(frame.end - reader.position)
                    if frames and frame.end is not None and reader.position > frame.end:
                        # A child overran this frame; later siblings cannot be located
                        frames[-1].done = True
                    continue

                box = read_box(reader)
                depth = len(frames) - 1
                if depth == 0 and tracker is not None and not tracker.observe(box):
                    break
                handler.record_box(box, depth)

                if box.extends_to_end:
                    # Nothing can follow a box that runs to the end of its scope
                    frame.done = True
                    box_end = frame.end
                else:
                    box_end = box.end
                    if box.size < box.header_size or (
                        frame.end is not None and box_end > frame.end
                    ):
                        frame.done = True
                        continue

                step = handler.plan(box, frame.phase)

                if step.action is Action.DESCEND and depth + 1 > max_depth:
                    if not depth_reported:
                        handler.add_error(
                            f"Box nesting deeper than {max_depth} levels; "
                            f"skipping '{box.type}' at offset {box.offset}"
                        )
                        depth_reported = True
                    step = step._replace(action=Action.SKIP)

                if step.action is Action.DESCEND:
                    if handler.process_container(box, reader, frame.phase, box_end):
                        frame.phase = step.next_phase
                        frames.append(_Frame(end=box_end, phase=step.child_phase, container=box))
                    else:
                        reader.skip(box_end - reader.position)
                elif step.action is Action.CAPTURE:
                    if box_end is None:
                        payload = reader.read_remaining()
                    else:
                        payload = reader.read_bytes(box_end - reader.position)
                    frame.phase = handler.process_box(box, payload, frame.phase)
                elif box_end is None:
                    frame.done = True
                else:
                    reader.skip(box_end - reader.position)
        except HeifMetaError:
            # Truncated or malformed data ends the walk; unwind what is open
            pass
        except OSError as e:
            handler.add_error(f"I/O error while reading boxes: {e}")

        # Containers left open by an early stop still get their close hook
        for frame in reversed(frames):
            if frame.container is not None:
                handler.close_container(frame.container, frame.phase)
        return root.phase

    def extract_exif_bytes(
        self, stream: BinaryIO | StreamReader, handler: BoxHandler
    ) -> bytes | None:
        """Walk the file and return its trimmed EXIF bytes, or None.

        Raises:
            ImageProcessingError: If a captured EXIF buffer is malformed
        """
        self.extract(stream, handler)
        return assemble_exif(handler.metadata.exif_payloads)

    def extract_exif_and_icc_profile_stream(
        self, stream: BinaryIO | StreamReader, handler: BoxHandler
    ) -> dict[bytes | None, bool]:
        """Return ``{exif bytes: is Display P3}`` for one file."""
        exif = self.extract_exif_bytes(stream, handler)
        return {exif: self.is_display_p3(handler)}

    def is_display_p3(self, handler: BoxHandler) -> bool:
        """Classify the ICC profile collected by ``handler``."""
        return is_display_p3(handler.metadata, self.config.display_p3)
