"""Receivers for emitted blocks and the text record format."""
from __future__ import annotations

import sys
import threading
from typing import Dict, List, Mapping, Optional, Set, TextIO, Tuple, Union

from compress.block import Block
from engine import config
from volume.voxel_grid import as_tag

TagTable = Dict[int, str]


def normalize_tag_table(table: Optional[Mapping[Union[int, str, bytes], str]]) -> TagTable:
    """Key a tag table by byte value; accepts one-character string keys too."""
    if not table:
        return {}
    return {as_tag(tag): str(label) for tag, label in table.items()}


def format_record(block: Block, label: str) -> str:
    return f"{block.x},{block.y},{block.z},{block.width},{block.height},{block.depth},{label}"


class BlockSink:
    """Base receiver. Resolves labels and falls back to the raw tag character."""

    def __init__(
        self,
        tag_table: Optional[Mapping[Union[int, str, bytes], str]] = None,
        *,
        note_missing: Optional[bool] = None,
    ) -> None:
        self.tag_table = normalize_tag_table(tag_table)
        if note_missing is None:
            note_missing = bool(config.get("sink.note_missing_labels", True))
        self.note_missing = note_missing
        self.missing_tags: Set[int] = set()

    def label_for(self, tag: int) -> str:
        label = self.tag_table.get(tag)
        if label is not None:
            return label
        if tag not in self.missing_tags:
            self.missing_tags.add(tag)
            if self.note_missing:
                print(f"[sink] no label for tag {chr(tag)!r}; emitting raw tag", file=sys.stderr)
        return chr(tag)

    def emit(self, block: Block) -> None:
        self.write(block, self.label_for(block.tag))

    def write(self, block: Block, label: str) -> None:
        raise NotImplementedError


class TextBlockSink(BlockSink):
    """Writes ``x,y,z,width,height,depth,label`` lines to a text stream."""

    def __init__(self, stream: TextIO, tag_table=None, **kwargs) -> None:
        super().__init__(tag_table, **kwargs)
        self.stream = stream

    def write(self, block: Block, label: str) -> None:
        self.stream.write(format_record(block, label) + "\n")


class ListSink(BlockSink):
    def __init__(self, tag_table=None, **kwargs) -> None:
        super().__init__(tag_table, **kwargs)
        self.items: List[Tuple[Block, str]] = []

    def write(self, block: Block, label: str) -> None:
        self.items.append((block, label))

    @property
    def blocks(self) -> List[Block]:
        return [block for block, _ in self.items]

    def records(self) -> List[str]:
        return [format_record(block, label) for block, label in self.items]


class SynchronizedSink:
    """Serialises emissions from several workers into one sink.

    The lock covers a single record, never the growth work that produced it.
    """

    def __init__(self, inner: BlockSink) -> None:
        self.inner = inner
        self._lock = threading.Lock()

    def emit(self, block: Block) -> None:
        with self._lock:
            self.inner.emit(block)
