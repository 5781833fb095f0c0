"""Utility modules for heifmeta."""

from .stream import IO_BLOCK_SIZE, StreamReader

__all__ = [
    "IO_BLOCK_SIZE",
    "StreamReader",
]
