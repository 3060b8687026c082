# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-13 16:02:44
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-17 10:05:12
"""
Parse the Finder's .DS_Store files into per-filename records.

File layout:
    0..3    alignment prefix (0x00000001)
    4..7    magic 'Bud1'
    8..11   offset of the buddy allocator block
    ...     allocator block, master block, B-tree nodes

The allocator directory names the 'DSDB' master block,
whose first word is the ID of the B-tree's root node.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from logging_service import LoggingService

from ds_store import config
from ds_store.allocator import BuddyAllocator
from ds_store.byte_cursor import ByteCursor
from ds_store.tree_walker import RecordSet, TreeWalker


@dataclass(frozen=True)
class MasterBlockHeader:
    """First five words of the DSDB block."""
    root_node_id: int
    tree_levels: int
    record_count: int
    node_count: int
    page_size: int


@dataclass
class ParseResult:
    records: RecordSet
    master: MasterBlockHeader
    warnings: List[str] = field(default_factory=list)
    skipped_entries: int = 0


class DSStoreParser:
    '''
    Decodes one in-memory .DS_Store image. Instances
    are single use: create, call parse(), discard.

    Usage:
        result = DSStoreParser(data).parse()
        for filename, props in result.records.items():
            ...
    '''

    def __init__(self, data: bytes, log: Optional[LoggingService] = None):
        self.cursor = ByteCursor(data)
        self.log = log if log is not None else LoggingService()
        self.warnings: List[str] = []

    def parse(self) -> ParseResult:
        '''
        Decode the whole file.

        :return: records, master block header, and the
            warnings issued along the way
        :raises TruncatedError: if the file ends prematurely
        :raises MasterBlockNotFoundError: if there is no DSDB entry
        :raises CorruptTreeError: if the B-tree contains a cycle
        '''
        allocator_offset = self._read_header()
        allocator = BuddyAllocator(self.cursor, allocator_offset)

        master_id = allocator.find_master_block()
        master = self._read_master_block(allocator, master_id)

        walker = TreeWalker(self.cursor, allocator, log=self.log)
        records = walker.walk(master.root_node_id)

        return ParseResult(records=records,
                           master=master,
                           warnings=self.warnings + walker.warnings,
                           skipped_entries=len(walker.warnings))

    # ---------------------- Private -------------------------

    def _read_header(self) -> int:
        self.cursor.seek(config.ALIGNMENT_PREFIX_LEN)
        magic = self.cursor.read_u32()
        if magic != config.BUD1_MAGIC:
            # Advisory only; the rest of the file may still be fine
            self._warn("File magic number is not 'Bud1'. "
                       "This may not be a valid .DS_Store file.")
        return self.cursor.read_u32()

    def _read_master_block(self, allocator: BuddyAllocator, master_id: int) -> MasterBlockHeader:
        address = allocator.resolve(master_id)
        self.cursor.seek(address.offset)
        root_node_id = self.cursor.read_u32()
        tree_levels = self.cursor.read_u32()
        record_count = self.cursor.read_u32()
        node_count = self.cursor.read_u32()
        page_size = self.cursor.read_u32()
        return MasterBlockHeader(root_node_id, tree_levels, record_count, node_count, page_size)

    def _warn(self, msg: str):
        self.log.warn(msg)
        self.warnings.append(msg)


def parse(data: bytes, log: Optional[LoggingService] = None) -> ParseResult:
    """Decode an in-memory .DS_Store image."""
    return DSStoreParser(data, log=log).parse()


def parse_file(path: str | Path, log: Optional[LoggingService] = None) -> ParseResult:
    """Read a .DS_Store file from disk and decode it."""
    with open(path, 'rb') as f:
        data = f.read()
    return parse(data, log=log)
