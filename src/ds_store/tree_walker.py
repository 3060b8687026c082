# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-13 14:20:03
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-17 09:31:48
"""
Depth-first walk of the B-tree that holds .DS_Store records.

Node layout, all integers big-endian u32:

    rightmost child ID   (0 for a leaf)
    record count
    record count times:
        child ID                  (internal nodes only)
        filename length (chars)
        filename                  (UTF-16BE)
        struct key                (4 ASCII bytes, e.g. 'Iloc')
        type tag                  (4 ASCII bytes, e.g. 'blob')
        value                     (layout depends on type tag)
"""

from typing import Dict, List, Optional, Set

from logging_service import LoggingService

from ds_store.allocator import BuddyAllocator
from ds_store.byte_cursor import ByteCursor
from ds_store.exceptions import CorruptTreeError, UnrecognizedTypeError
from ds_store.value_decoder import TypedValue, decode_utf16be, decode_value

# filename -> struct key -> value
RecordSet = Dict[str, Dict[str, TypedValue]]


class TreeWalker:
    '''
    Collects all records of the tree below a root node
    into a RecordSet. Records whose type tag is unknown
    are skipped with a warning; every other error ends
    the walk.
    '''

    def __init__(self,
                 cursor: ByteCursor,
                 allocator: BuddyAllocator,
                 log: Optional[LoggingService] = None):
        self.cursor = cursor
        self.allocator = allocator
        self.log = log if log is not None else LoggingService()

        self.records: RecordSet = {}
        self.warnings: List[str] = []
        self._visited: Set[int] = set()

    def walk(self, root_id: int) -> RecordSet:
        '''
        Traverse the tree rooted at root_id.

        :param root_id: block ID of the root node
        :return: the records found, keyed by filename
        :raises TruncatedError: if any node runs off the end of the buffer
        :raises CorruptTreeError: if a node is reached twice
        '''
        self._visit(root_id)
        return self.records

    # ---------------------- Private -------------------------

    def _visit(self, node_id: int):
        if node_id in self._visited:
            raise CorruptTreeError(node_id)
        self._visited.add(node_id)

        address = self.allocator.resolve(node_id)
        self.cursor.seek(address.offset)

        rightmost_child_id = self.cursor.read_u32()
        num_records = self.cursor.read_u32()
        is_internal = rightmost_child_id != 0

        children = []
        for _ in range(num_records):
            if is_internal:
                children.append(self.cursor.read_u32())
            self._read_record()

        # Children come after this node's own records, so the
        # cursor is free to wander off into the child blocks:
        for child_id in children:
            self._visit(child_id)
        if is_internal:
            self._visit(rightmost_child_id)

    def _read_record(self):
        name_len = self.cursor.read_u32()
        filename = decode_utf16be(self.cursor.read_bytes(name_len * 2))
        struct_key = self.cursor.read_bytes(4).decode('latin-1')
        type_tag = self.cursor.read_bytes(4).decode('latin-1')

        try:
            value = decode_value(self.cursor, type_tag)
        except UnrecognizedTypeError as e:
            # The value's length is unknown, so reading resumes
            # right after the type tag.
            e.filename = filename
            msg = f"Skipping record for '{filename}' due to parse error: {e}"
            self.log.warn(msg)
            self.warnings.append(msg)
            return

        self.records.setdefault(filename, {})[struct_key] = value
