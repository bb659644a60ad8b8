"""
nodes.py — In-memory node table and string table for a U8 archive.

Nodes are kept in a flat list and refer to each other by index only:
  - file node:  a = payload offset,     b = compressed size, size = file size
  - dir node:   a = parent node index,  b = 1 + last node index in subtree
The root directory is node 0 and is its own parent.

Each on-disk node entry is 16 bytes, four big-endian uint32s:
    type << 24 | name_offset,  a,  b,  size
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from u8arc.errors import EncodingFailure, LayoutOverflow

log = logging.getLogger(__name__)

NODE_ENTRY = struct.Struct(">IIII")
NODE_SIZE = NODE_ENTRY.size  # 16

_NAME_OFFSET_MAX = 0xFFFFFF
_U32_MAX = 0xFFFFFFFF


class NodeKind(IntEnum):
    FILE = 0x00
    DIRECTORY = 0x01


@dataclass
class U8Node:
    """One file or directory entry."""
    kind: NodeKind
    name_offset: int
    index: int
    a: int = 0
    b: int = 0
    size: int = 0
    source: Path | None = None  # file nodes only; never written

    @property
    def is_dir(self) -> bool:
        return self.kind == NodeKind.DIRECTORY

    @property
    def parent(self) -> int:
        """Parent index of a directory node."""
        if not self.is_dir:
            raise TypeError(f"Node {self.index} is a file; files have no parent field")
        return self.a

    def pack(self) -> bytes:
        """Encode this node as its 16-byte table entry."""
        for field_name in ("a", "b", "size"):
            value = getattr(self, field_name)
            if not 0 <= value <= _U32_MAX:
                raise LayoutOverflow(
                    f"Node {self.index}: {field_name}={value} does not fit in 32 bits",
                    self.source,
                )
        return NODE_ENTRY.pack(
            (int(self.kind) << 24) | self.name_offset, self.a, self.b, self.size
        )


class NodeTable:
    """Append-only node list plus the string table its names live in.

    A fresh table holds nothing; call add_root() first. Each add_* call
    appends one node and extends the range of every ancestor directory.
    """

    def __init__(self) -> None:
        self.nodes: list[U8Node] = []
        self._strings = bytearray()

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    def __getitem__(self, index: int) -> U8Node:
        return self.nodes[index]

    @property
    def string_table(self) -> bytes:
        return bytes(self._strings)

    @property
    def string_table_length(self) -> int:
        return len(self._strings)

    def files(self) -> list[U8Node]:
        return [n for n in self.nodes if not n.is_dir]

    # -- Construction ---------------------------------------------------------

    def add_root(self) -> U8Node:
        """Create node 0: the nameless root directory, parent of itself."""
        if self.nodes:
            raise ValueError("Root node already exists")
        root = self._append(NodeKind.DIRECTORY, "")
        root.a = root.index
        return root

    def add_dir(self, name: str, parent: int, path: Path | None = None) -> U8Node:
        """path is only used to name the entry in errors."""
        node = self._append(NodeKind.DIRECTORY, name, path)
        node.a = parent
        self._extend_ancestors(node.index, parent)
        return node

    def add_file(self, name: str, parent: int, source: Path | None = None) -> U8Node:
        node = self._append(NodeKind.FILE, name, source)
        node.source = source
        self._extend_ancestors(node.index, parent)
        return node

    def _append(self, kind: NodeKind, name: str, path: Path | None = None) -> U8Node:
        name_offset = self._append_name(name, path)
        node = U8Node(kind=kind, name_offset=name_offset, index=len(self.nodes))
        self.nodes.append(node)
        log.debug("node %d: %s %r", node.index, kind.name.lower(), name)
        return node

    def _append_name(self, name: str, path: Path | None = None) -> int:
        """Add a null-terminated UTF-8 name; return its offset."""
        try:
            encoded = name.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EncodingFailure(
                f"Name cannot be encoded as UTF-8: {name!r}", path
            ) from exc
        if b"\x00" in encoded:
            raise EncodingFailure(f"Name contains a NUL byte: {name!r}", path)
        offset = len(self._strings)
        if offset > _NAME_OFFSET_MAX:
            raise LayoutOverflow(
                f"String table offset {offset} for {name!r} exceeds 24 bits"
            )
        self._strings += encoded
        self._strings.append(0)
        return offset

    def _extend_ancestors(self, new_index: int, parent: int) -> None:
        """Set b = new_index + 1 on the parent and every directory above it."""
        extent = new_index + 1
        current = self.nodes[parent]
        while True:
            if not current.is_dir:
                raise ValueError(f"Node {current.index} is not a directory")
            current.b = extent
            if current.a == current.index:
                break
            current = self.nodes[current.a]
