"""
writer.py — Pack a directory into a U8 archive (.arc).

File layout (all integers big-endian):
  0x00  4B  magic 55 AA 38 2D
  0x04  4B  offset of the node table (always 0x20)
  0x08  4B  table length = node count * 16 + string table length
  0x0C  4B  data offset = table end rounded up to 32
  0x10 16B  fixed template bytes
  0x20      node table, then string table, then zero padding
  data      zlib payloads in node order, each padded to 32 bytes

The table length is known once the tree is walked, but the node entries
hold payload offsets and compressed sizes. Payloads are therefore written
first, starting at the data offset, and the header and tables last.
"""

from __future__ import annotations

import logging
import zlib
from pathlib import Path
from typing import BinaryIO, Callable, NamedTuple

from u8arc.app_log import app_log
from u8arc.builder import ArcBuilder
from u8arc.errors import IOFailure, LayoutOverflow, from_os_error
from u8arc.nodes import NODE_SIZE, NodeTable

log = logging.getLogger(__name__)

ProgressFn = Callable[[int, int], None]

U8_MAGIC = b"\x55\xAA\x38\x2D"
HEADER_SIZE = 0x20
ALIGNMENT = 32
COMPRESSION_LEVEL = 1  # fastest
_HEADER_TEMPLATE = bytes(
    [0xE4, 0xF9, 0x12, 0x00, 0x00, 0x00, 0x04, 0x02] + [0x00] * 8
)
_U32_MAX = 0xFFFFFFFF


class ArcLayout(NamedTuple):
    """Sizes and offsets derived from the node and string tables."""
    node_count: int
    string_table_length: int
    table_length: int
    data_offset: int


def align_up(value: int, alignment: int = ALIGNMENT) -> int:
    """Round value up to the next multiple of alignment (a power of two)."""
    return (value + alignment - 1) & ~(alignment - 1)


def compute_layout(table: NodeTable) -> ArcLayout:
    table_length = len(table) * NODE_SIZE + table.string_table_length
    data_offset = align_up(HEADER_SIZE + table_length)
    if data_offset > _U32_MAX:
        raise LayoutOverflow(f"Node and string tables too large ({table_length} bytes)")
    return ArcLayout(len(table), table.string_table_length, table_length, data_offset)


def build_header(layout: ArcLayout) -> bytes:
    return (
        U8_MAGIC
        + HEADER_SIZE.to_bytes(4, "big")
        + layout.table_length.to_bytes(4, "big")
        + layout.data_offset.to_bytes(4, "big")
        + _HEADER_TEMPLATE
    )


def _pad_to_alignment(out: BinaryIO) -> None:
    pos = out.tell()
    pad = align_up(pos) - pos
    if pad:
        out.write(b"\x00" * pad)


def write_payloads(
    table: NodeTable,
    out: BinaryIO,
    progress_fn: ProgressFn | None = None,
) -> None:
    """Compress every file node into out at its current position.

    Back-fills a (offset), b (compressed size) and size (original size) on
    each file node. Directory nodes are skipped.
    """
    files = table.files()
    total = len(files)
    if progress_fn:
        progress_fn(0, total)

    for done, node in enumerate(files, 1):
        try:
            raw = node.source.read_bytes()
        except OSError as exc:
            raise from_os_error(exc, node.source, "read") from exc

        # Empty files get no payload at all, not an empty zlib stream.
        data = zlib.compress(raw, COMPRESSION_LEVEL) if raw else b""
        try:
            node.a = out.tell()
            if data:
                out.write(data)
            _pad_to_alignment(out)
        except OSError as exc:
            raise IOFailure(f"Failed writing payload for {node.source}: {exc}", node.source) from exc
        node.b = len(data)
        node.size = len(raw)
        if node.a + node.b > _U32_MAX or node.size > _U32_MAX:
            raise LayoutOverflow(f"Archive exceeds 4 GiB at {node.source}", node.source)
        log.debug("%s: %d -> %d bytes at 0x%X", node.source, node.size, node.b, node.a)
        if progress_fn:
            progress_fn(done, total)


def write_tables(table: NodeTable, layout: ArcLayout, out: BinaryIO) -> None:
    """Write header, node table, string table and padding up to the data offset."""
    out.seek(0)
    out.write(build_header(layout))
    out.write(b"".join(node.pack() for node in table))
    out.write(table.string_table)
    out.write(b"\x00" * (layout.data_offset - HEADER_SIZE - layout.table_length))


def finalize(
    table: NodeTable,
    output_path: Path | str,
    progress_fn: ProgressFn | None = None,
) -> ArcLayout:
    """Write a fully built NodeTable to output_path. Returns the layout used."""
    output = Path(output_path)
    layout = compute_layout(table)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        out = output.open("wb")
    except OSError as exc:
        raise from_os_error(exc, output, "create") from exc

    with out:
        try:
            out.seek(layout.data_offset)
        except OSError as exc:
            raise IOFailure(f"Cannot seek in {output}: {exc}", output) from exc
        write_payloads(table, out, progress_fn)
        end = out.tell()
        try:
            write_tables(table, layout, out)
            out.flush()
        except OSError as exc:
            raise IOFailure(f"Failed writing tables to {output}: {exc}", output) from exc

    log.info(
        "Wrote %s: %d node(s), table %d bytes, data at 0x%X, %d bytes total",
        output, layout.node_count, layout.table_length, layout.data_offset, end,
    )
    return layout


class ArcPacker:
    """Pack directories into U8 archives, one at a time.

    Each write_arc() call starts from an empty node table, so a packer can be
    reused for several archives in sequence. Use one packer per thread.
    """

    def __init__(self) -> None:
        self._builder = ArcBuilder()

    def write_arc(
        self,
        arc_file: Path | str,
        src_directory: Path | str,
        progress_fn: ProgressFn | None = None,
    ) -> ArcLayout:
        table = self._builder.build(src_directory)
        return finalize(table, arc_file, progress_fn)

    def plan(self, src_directory: Path | str) -> ArcLayout:
        """Walk src_directory and return the layout without writing anything."""
        return compute_layout(self._builder.build(src_directory))


def write_archive(
    output_path: Path | str,
    source_directory: Path | str,
    *,
    progress_fn: ProgressFn | None = None,
) -> ArcLayout:
    """Pack source_directory into the archive at output_path.

    Raises an ArcError subclass on the first failure; a partly written
    output file may be left behind.
    """
    app_log(f"Packing {source_directory} -> {output_path}")
    layout = ArcPacker().write_arc(output_path, source_directory, progress_fn)
    app_log(f"Packed {layout.node_count} node(s) into {output_path}")
    return layout


def plan_archive(source_directory: Path | str) -> ArcLayout:
    return ArcPacker().plan(source_directory)
