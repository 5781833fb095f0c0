"""Public entry points for reading HEIF metadata."""

import os
import warnings
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import BinaryIO

from heifmeta.config import HeifMetaConfig
from heifmeta.exceptions import HeifMetaWarning
from heifmeta.heif.assembler import assemble_exif, assemble_exif_and_icc
from heifmeta.heif.handlers import BoxHandler
from heifmeta.heif.walker import HeifReader
from heifmeta.models import ExtractionResult, FileInfo, Metadata

Source = str | os.PathLike | BinaryIO


def get_file_info(path: str) -> FileInfo:
    """Get basic file information.

    Args:
        path: Path to the file

    Returns:
        FileInfo object with file details
    """
    stat = os.stat(path)
    return FileInfo(
        path=os.path.abspath(path),
        filename=os.path.basename(path),
        extension=os.path.splitext(path)[1].lower(),
        size_bytes=stat.st_size,
        modified=datetime.fromtimestamp(stat.st_mtime),
    )


@contextmanager
def _open_source(source: Source) -> Iterator[tuple[BinaryIO, FileInfo | None]]:
    """Yield a binary stream for ``source``; only paths are closed afterwards."""
    if isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        if not os.path.exists(path):
            raise FileNotFoundError(f"File not found: {path}")
        file_info = get_file_info(path)
        with open(path, "rb") as f:
            yield f, file_info
    else:
        yield source, None


def _walk(source: Source, config: HeifMetaConfig | None) -> tuple[HeifReader, BoxHandler]:
    reader = HeifReader(config)
    with _open_source(source) as (stream, file_info):
        handler = BoxHandler(Metadata(file_info=file_info))
        reader.extract(stream, handler)
    return reader, handler


def read_metadata(source: Source, config: HeifMetaConfig | None = None) -> Metadata:
    """Read a HEIF file and return everything collected from it.

    This is the main entry point. Structural problems in the file do not
    raise; they end the walk early and are listed in ``Metadata.errors``.

    Args:
        source: Path to the file, or a binary stream positioned at its start
        config: Configuration to use instead of the global one

    Returns:
        Metadata with the HEIF directory, ICC directory and raw payloads

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
    """
    _, handler = _walk(source, config)
    return handler.metadata


def read_exif_bytes(source: Source, config: HeifMetaConfig | None = None) -> bytes | None:
    """Return the EXIF bytes with each item's header removed, or None.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
        ImageProcessingError: If a captured EXIF item is too short
    """
    metadata = read_metadata(source, config)
    return assemble_exif(metadata.exif_payloads)


def read_exif_and_icc_bytes(
    source: Source, config: HeifMetaConfig | None = None
) -> bytes | None:
    """Return the trimmed EXIF bytes followed by the raw ICC profiles, or None."""
    metadata = read_metadata(source, config)
    return assemble_exif_and_icc(metadata.exif_payloads, metadata.icc_payloads)


def get_exif_and_display_p3_info(
    source: Source, config: HeifMetaConfig | None = None
) -> dict[bytes | None, bool]:
    """Return a single-entry ``{exif bytes: is Display P3}`` mapping."""
    reader, handler = _walk(source, config)
    return {assemble_exif(handler.metadata.exif_payloads): reader.is_display_p3(handler)}


def extract(source: Source, config: HeifMetaConfig | None = None) -> ExtractionResult:
    """Read a file and return all of its byte artifacts at once.

    Args:
        source: Path to the file, or a binary stream positioned at its start
        config: Configuration to use instead of the global one

    Returns:
        ExtractionResult with EXIF, ICC, combined bytes and the P3 flag

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
        ImageProcessingError: If a captured EXIF item is too short
    """
    reader, handler = _walk(source, config)
    metadata = handler.metadata
    icc = b"".join(metadata.icc_payloads)
    return ExtractionResult(
        exif=assemble_exif(metadata.exif_payloads),
        icc=icc or None,
        combined=assemble_exif_and_icc(metadata.exif_payloads, metadata.icc_payloads),
        is_display_p3=reader.is_display_p3(handler),
        errors=metadata.errors,
    )


def read_files(paths: list[str], config: HeifMetaConfig | None = None) -> list[Metadata]:
    """Read multiple files.

    Args:
        paths: List of file paths
        config: Configuration to use instead of the global one

    Returns:
        List of Metadata objects for the files that could be read
    """
    results = []
    for path in paths:
        try:
            results.append(read_metadata(path, config))
        except OSError as e:
            warnings.warn(f"Failed to read {path}: {e}", HeifMetaWarning, stacklevel=2)
    return results
