"""
builder.py — Walk a source directory into a NodeTable.

Order within each directory: files first, then subdirectories, each group
sorted by the raw bytes of the name. A subdirectory's whole subtree is added
before its next sibling, so a directory's children always follow it
contiguously in the table.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from u8arc.errors import PathNotFound, from_os_error
from u8arc.nodes import NodeTable

log = logging.getLogger(__name__)


def _name_key(entry: os.DirEntry) -> bytes:
    return os.fsencode(entry.name)


def _scan(directory: Path) -> tuple[list[os.DirEntry], list[os.DirEntry]]:
    """Return (files, subdirs) directly inside directory, both sorted."""
    files: list[os.DirEntry] = []
    subdirs: list[os.DirEntry] = []
    try:
        with os.scandir(directory) as it:
            for entry in it:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry)
                elif entry.is_file():
                    files.append(entry)
                else:
                    log.debug("Skipping %s (not a regular file or directory)", entry.path)
    except OSError as exc:
        raise from_os_error(exc, directory, "list directory") from exc
    files.sort(key=_name_key)
    subdirs.sort(key=_name_key)
    return files, subdirs


class ArcBuilder:
    """Builds the node and string tables for one source tree.

    Reusable for sequential builds; every build() starts from an empty table.
    Not safe to share between threads.
    """

    def __init__(self) -> None:
        self.table = NodeTable()

    def reset(self) -> None:
        self.table = NodeTable()

    def build(self, source_dir: Path | str) -> NodeTable:
        source = Path(source_dir)
        try:
            st = source.stat()
        except OSError as exc:
            raise from_os_error(exc, source, "open source directory") from exc
        if not stat.S_ISDIR(st.st_mode):
            raise PathNotFound(f"Source is not a directory: {source}", source)

        self.reset()
        root = self.table.add_root()
        self._add_children(root.index, source)

        file_count = len(self.table.files())
        log.info(
            "Built %d node(s) from %s: %d file(s), %d dir(s), %d byte string table",
            len(self.table),
            source,
            file_count,
            len(self.table) - file_count - 1,
            self.table.string_table_length,
        )
        return self.table

    def _add_children(self, parent: int, directory: Path) -> None:
        files, subdirs = _scan(directory)
        for entry in files:
            self.table.add_file(entry.name, parent, Path(entry.path))
        for entry in subdirs:
            node = self.table.add_dir(entry.name, parent, Path(entry.path))
            self._add_children(node.index, Path(entry.path))
