"""
u8arc — pack a directory into a U8 archive (.arc).

Layout: 32-byte header, node table (16 bytes per file/directory), string
table of NUL-terminated UTF-8 names, then zlib-compressed file data with
every payload aligned to 32 bytes. All integers are big-endian.
"""

from u8arc.builder import ArcBuilder
from u8arc.errors import (
    AccessDenied,
    ArcError,
    EncodingFailure,
    IOFailure,
    LayoutOverflow,
    PathNotFound,
)
from u8arc.nodes import NodeKind, NodeTable, U8Node
from u8arc.writer import ArcLayout, ArcPacker, finalize, plan_archive, write_archive

__all__ = [
    "AccessDenied",
    "ArcBuilder",
    "ArcError",
    "ArcLayout",
    "ArcPacker",
    "EncodingFailure",
    "IOFailure",
    "LayoutOverflow",
    "NodeKind",
    "NodeTable",
    "PathNotFound",
    "U8Node",
    "finalize",
    "plan_archive",
    "write_archive",
]
