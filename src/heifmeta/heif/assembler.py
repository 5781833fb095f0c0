"""Build caller-facing byte artifacts from captured payloads."""

from collections.abc import Sequence

from heifmeta.exceptions import ImageProcessingError

# HEIF Exif items start with a 4-byte TIFF header offset and "Exif\0\0"
EXIF_HEADER_LENGTH = 10


def _trim_exif(buffers: Sequence[bytes], header_length: int) -> bytes | None:
    for index, buffer in enumerate(buffers):
        if len(buffer) < header_length:
            raise ValueError(
                f"captured buffer {index} is {len(buffer)} bytes, "
                f"shorter than the {header_length}-byte Exif header"
            )
    total = sum(len(buffer) for buffer in buffers) - header_length * len(buffers)
    if total <= 0:
        return None
    return b"".join(buffer[header_length:] for buffer in buffers)


def assemble_exif(
    buffers: Sequence[bytes], header_length: int = EXIF_HEADER_LENGTH
) -> bytes | None:
    """Concatenate captured EXIF items with their item headers removed.

    Args:
        buffers: Captured EXIF item buffers, in capture order
        header_length: Bytes to strip from the front of each buffer

    Returns:
        The joined bytes, or None when nothing remains after trimming

    Raises:
        ImageProcessingError: If any buffer is shorter than ``header_length``
    """
    try:
        return _trim_exif(buffers, header_length)
    except ValueError as e:
        raise ImageProcessingError(f"Failed to extract EXIF data bytes. {e}") from e


def assemble_exif_and_icc(
    exif_buffers: Sequence[bytes],
    icc_buffers: Sequence[bytes],
    header_length: int = EXIF_HEADER_LENGTH,
) -> bytes | None:
    """Trimmed EXIF bytes followed by the untrimmed ICC profiles.

    Returns:
        The joined bytes, or None when neither part contributes anything

    Raises:
        ImageProcessingError: If any EXIF buffer is shorter than ``header_length``
    """
    exif = assemble_exif(exif_buffers, header_length)
    icc = b"".join(icc_buffers)
    if exif is None and not icc:
        return None
    return (exif or b"") + icc
