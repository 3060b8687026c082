# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-12 09:30:51
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-16 11:02:47
"""Errors raised while decoding .DS_Store files."""

from typing import Optional


class DSStoreError(Exception):
    """Base for all .DS_Store decoding errors."""
    def __init__(self, message, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset

    def __str__(self):
        base = super().__str__()
        if self.offset is not None:
            return f"{base} (at offset 0x{self.offset:X})"
        return base


class TruncatedError(DSStoreError):
    """Raised when a read would run past the end of the buffer."""
    def __init__(self, wanted: int, offset: int, buffer_len: int):
        super().__init__(
            f"Need {wanted} byte(s), but buffer holds only {buffer_len}",
            offset=offset)
        self.wanted = wanted
        self.buffer_len = buffer_len


class MasterBlockNotFoundError(DSStoreError):
    """Raised when the allocator directory has no usable DSDB entry."""
    pass


class UnrecognizedTypeError(DSStoreError):
    """Raised for a record whose type tag is none of the known ones.

    Only fatal for the one record; the tree walker catches it.
    """
    def __init__(self, type_tag: str, filename: Optional[str] = None, offset: Optional[int] = None):
        super().__init__(f"Unrecognized data type '{type_tag}'", offset=offset)
        self.type_tag = type_tag
        self.filename = filename


class CorruptTreeError(DSStoreError):
    """Raised when B-tree child pointers loop back to a visited node."""
    def __init__(self, node_id: int):
        super().__init__(f"B-tree node {node_id} is reachable more than once")
        self.node_id = node_id
