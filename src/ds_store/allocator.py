# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-12 11:48:09
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-16 10:12:55
"""
Buddy allocator of a .DS_Store file.

The allocator block holds:
   - u32 block count, u32 unknown
   - the block address table, one u32 word per block ID,
     padded to 256 entries
   - the directory: u32 entry count, then entries of
     {u8 name length, name, u32 block ID}
   - free lists (not needed for reading)

Each address word packs a block's offset and its size:
the low 5 bits are log2(size), the rest is the offset,
which is therefore always a multiple of 32.
"""

from dataclasses import dataclass
from typing import Optional

from ds_store import config
from ds_store.byte_cursor import ByteCursor
from ds_store.exceptions import MasterBlockNotFoundError, TruncatedError


@dataclass(frozen=True)
class BlockAddress:
    """Absolute byte offset and power-of-two size of one block."""
    offset: int
    size: int

    @classmethod
    def from_word(cls, word: int) -> 'BlockAddress':
        offset = config.ALIGNMENT_PREFIX_LEN + \
            ((word >> config.BLOCK_OFFSET_MASK_BITS) << config.BLOCK_OFFSET_MASK_BITS)
        size = 1 << (word & config.BLOCK_SIZE_MASK)
        return cls(offset, size)


@dataclass(frozen=True)
class DirectoryEntry:
    name: bytes
    block_id: int


class BuddyAllocator:
    '''
    Translates block IDs into byte ranges, and finds
    named blocks in the allocator's directory.
    '''

    def __init__(self, cursor: ByteCursor, allocator_offset: int):
        '''
        :param cursor: cursor over the whole file
        :param allocator_offset: the allocator offset word from the file header
        '''
        self.cursor = cursor
        self.allocator_offset = allocator_offset

    def resolve(self, block_id: int) -> BlockAddress:
        '''
        Look up the address word of the given block and
        unpack it. The cursor position is the same after
        the call as before, even if the read fails.

        :param block_id: index into the block address table
        :return: offset and size of the block
        :raises TruncatedError: if the table entry lies outside the buffer
        '''
        word_offset = self.allocator_offset + config.ALLOCATOR_TABLE_BASE + block_id * 4
        with self.cursor.saved_position():
            self.cursor.seek(word_offset)
            word = self.cursor.read_u32()
        return BlockAddress.from_word(word)

    def find_master_block(self) -> int:
        '''
        Scan the directory for the master block entry
        and return its block ID. Stops at the first match.

        :return: block ID of the DSDB master block
        :raises MasterBlockNotFoundError: if no entry is named DSDB,
            or the directory runs off the end of the buffer
        '''
        try:
            entry = self.find_directory_entry(config.MASTER_BLOCK_NAME)
        except TruncatedError as e:
            raise MasterBlockNotFoundError(
                f"Directory is truncated before a '{config.MASTER_BLOCK_NAME.decode()}' entry was found",
                offset=e.offset) from e
        # Block 0 is the allocator itself, so it cannot be the master block:
        if entry is None or entry.block_id == 0:
            raise MasterBlockNotFoundError(
                f"Could not find '{config.MASTER_BLOCK_NAME.decode()}' master block in the allocator",
                offset=self.directory_offset())
        return entry.block_id

    def find_directory_entry(self, name: bytes) -> Optional[DirectoryEntry]:
        for entry in self._iter_directory():
            if entry.name == name:
                return entry
        return None

    def directory_offset(self) -> int:
        return self.allocator_offset + config.ALLOCATOR_DIRECTORY_BASE

    # ---------------------- Private -------------------------

    def _iter_directory(self):
        '''
        Generator over directory entries, read lazily so that
        callers who stop early never touch later entries.
        The cursor is left after the last entry read.
        '''
        self.cursor.seek(self.directory_offset())
        num_entries = self.cursor.read_u32()
        for _ in range(num_entries):
            name_len = self.cursor.read_u8()
            name = self.cursor.read_bytes(name_len)
            block_id = self.cursor.read_u32()
            yield DirectoryEntry(name, block_id)
