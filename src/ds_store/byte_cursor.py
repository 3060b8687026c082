# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-12 10:05:17
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-15 16:21:40
"""Sequential big-endian reader over an in-memory byte buffer."""

from contextlib import contextmanager
import struct

from ds_store.exceptions import TruncatedError


class ByteCursor:
    '''
    Reads big-endian integers and byte runs from an immutable
    buffer, advancing a single position. All reads are bounds
    checked: running off the end raises TruncatedError and
    leaves the position where it was.

    Usage:
        cursor = ByteCursor(data)
        cursor.seek(8)
        allocator_offset = cursor.read_u32()

        with cursor.saved_position():
            cursor.seek(elsewhere)
            word = cursor.read_u32()
        # Position is back to where it was before the 'with'
    '''

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.length = len(self.data)
        self._pos = 0

    def position(self) -> int:
        return self._pos

    def seek(self, offset: int) -> int:
        '''
        Move to an absolute offset. Offsets from 0 up to and
        including the buffer length are legal; anything else
        raises TruncatedError.

        :param offset: absolute position in the buffer
        :return: the new position
        '''
        if offset < 0 or offset > self.length:
            raise TruncatedError(0, offset, self.length)
        self._pos = offset
        return self._pos

    @contextmanager
    def saved_position(self):
        '''
        Context manager that restores the current position on
        exit, including exit through an exception.
        '''
        saved = self._pos
        try:
            yield self
        finally:
            self._pos = saved

    def read_bytes(self, n: int) -> bytes:
        self._require(n)
        chunk = self.data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def read_u8(self) -> int:
        self._require(1)
        val = self.data[self._pos]
        self._pos += 1
        return val

    def read_u32(self) -> int:
        return self._unpack('>I', 4)

    def read_u64(self) -> int:
        return self._unpack('>Q', 8)

    # ---------------------- Private -------------------------

    def _unpack(self, fmt: str, width: int) -> int:
        self._require(width)
        val = struct.unpack_from(fmt, self.data, self._pos)[0]
        self._pos += width
        return val

    def _require(self, n: int):
        if n < 0 or self._pos + n > self.length:
            raise TruncatedError(n, self._pos, self.length)
