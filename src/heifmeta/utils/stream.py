"""Big-endian primitive reader over a binary stream."""

import io
import struct
from typing import BinaryIO

from heifmeta.exceptions import TruncatedStreamError

# Reads and skips on non-seekable sources happen in blocks of this size
IO_BLOCK_SIZE = 16384


class StreamReader:
    """Positioned reader for fixed-width big-endian values.

    For seekable sources the position is the underlying ``tell()`` and
    ``mark()``/``reset()`` rewind with ``seek()``. Other sources are read
    strictly forward and the position counts bytes consumed since
    construction.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        seekable = getattr(stream, "seekable", None)
        self._seekable = bool(seekable()) if callable(seekable) else False
        self._position = stream.tell() if self._seekable else 0
        self._length: int | None = None
        self._mark: int | None = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "StreamReader":
        """Create a reader over an in-memory buffer."""
        return cls(io.BytesIO(data))

    @property
    def position(self) -> int:
        """Current byte offset."""
        return self._position

    @property
    def length(self) -> int | None:
        """Total stream length, or None when it cannot be known."""
        if not self._seekable:
            return None
        if self._length is None:
            current = self._stream.tell()
            self._length = self._stream.seek(0, io.SEEK_END)
            self._stream.seek(current)
        return self._length

    def remaining(self) -> int | None:
        """Bytes left before the end of the stream, if known."""
        length = self.length
        if length is None:
            return None
        return max(length - self._position, 0)

    def supports_rewind(self) -> bool:
        """Return True if ``mark()``/``reset()`` can re-read earlier bytes."""
        return self._seekable

    def mark(self) -> None:
        """Remember the current position for a later ``reset()``."""
        if not self._seekable:
            raise TruncatedStreamError("Stream does not support rewinding")
        self._mark = self._position

    def reset(self) -> None:
        """Rewind to the last marked position."""
        if self._mark is None:
            raise TruncatedStreamError("Stream was never marked")
        self._stream.seek(self._mark)
        self._position = self._mark

    def read_bytes(self, count: int) -> bytes:
        """Read exactly ``count`` bytes.

        Raises:
            TruncatedStreamError: If fewer than ``count`` bytes remain
        """
        if count < 0:
            raise TruncatedStreamError(f"Negative read length {count} at offset {self._position}")
        remaining = self.remaining()
        if remaining is not None and count > remaining:
            raise TruncatedStreamError(
                f"Attempted to read {count} bytes at offset {self._position}, "
                f"only {remaining} remain"
            )
        chunks = []
        needed = count
        while needed > 0:
            chunk = self._stream.read(min(needed, IO_BLOCK_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            needed -= len(chunk)
        data = b"".join(chunks)
        self._position += len(data)
        if len(data) < count:
            raise TruncatedStreamError(
                f"Attempted to read {count} bytes at offset {self._position - len(data)}, "
                f"only {len(data)} available"
            )
        return data

    def read_remaining(self) -> bytes:
        """Read everything up to the end of the stream."""
        chunks = []
        while True:
            chunk = self._stream.read(IO_BLOCK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
            self._position += len(chunk)
        return b"".join(chunks)

    def skip(self, count: int) -> None:
        """Advance ``count`` bytes without keeping them."""
        if count < 0:
            raise TruncatedStreamError(f"Negative skip length {count} at offset {self._position}")
        if self._seekable:
            remaining = self.remaining()
            if remaining is not None and count > remaining:
                raise TruncatedStreamError(
                    f"Attempted to skip {count} bytes at offset {self._position}, "
                    f"only {remaining} remain"
                )
            self._stream.seek(count, io.SEEK_CUR)
            self._position += count
            return

        needed = count
        while needed > 0:
            chunk = self._stream.read(min(needed, IO_BLOCK_SIZE))
            if not chunk:
                raise TruncatedStreamError(
                    f"Attempted to skip {count} bytes, stream ended {needed} bytes short"
                )
            needed -= len(chunk)
            self._position += len(chunk)

    def read_uint8(self) -> int:
        return self.read_bytes(1)[0]

    def read_uint16(self) -> int:
        return struct.unpack(">H", self.read_bytes(2))[0]

    def read_uint32(self) -> int:
        return struct.unpack(">I", self.read_bytes(4))[0]

    def read_int32(self) -> int:
        return struct.unpack(">i", self.read_bytes(4))[0]

    def read_uint64(self) -> int:
        return struct.unpack(">Q", self.read_bytes(8))[0]

    def read_uint(self, size: int) -> int:
        """Read an unsigned integer of 0, 1, 2, 4 or 8 bytes."""
        if size == 0:
            return 0
        if size not in (1, 2, 4, 8):
            raise TruncatedStreamError(f"Unsupported integer width {size}")
        return int.from_bytes(self.read_bytes(size), "big")

    def read_s15_fixed16(self) -> float:
        """Read an ICC s15Fixed16Number."""
        return self.read_int32() / 65536.0

    def read_fourcc(self) -> str:
        """Read a four-character code."""
        return self.read_bytes(4).decode("latin-1")

    def read_null_terminated(self, max_length: int | None = None, encoding: str = "utf-8") -> str:
        """Read a NUL-terminated string.

        Stops at the terminator, at ``max_length`` bytes or at the end of
        the stream, whichever comes first.
        """
        buffer = bytearray()
        while max_length is None or len(buffer) < max_length:
            chunk = self._stream.read(1)
            if not chunk:
                break
            self._position += 1
            if chunk == b"\x00":
                break
            buffer += chunk
        return buffer.decode(encoding, errors="replace")
