# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-12 09:14:22
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-16 17:40:03
"""Layout constants and settings for .DS_Store decoding."""

# File header
ALIGNMENT_PREFIX_LEN = 4
BUD1_MAGIC = 0x42756431  # 'Bud1'

# Buddy allocator. All stored offsets are relative to the
# end of the alignment prefix, hence the extra 4 everywhere:
ALLOCATOR_TABLE_BASE = 4 + 8        # skip block count and unknown word
ALLOCATOR_DIRECTORY_BASE = 4 + 1032  # offset table is padded to 256 words
BLOCK_OFFSET_MASK_BITS = 5
BLOCK_SIZE_MASK = 0x1F

# Name of the directory entry that points to the master block
MASTER_BLOCK_NAME = b'DSDB'

# Struct keys whose values get special treatment when displayed
MODIFICATION_DATE_KEYS = {'moDD', 'modD'}
PLIST_KEYS = {'bwsp', 'lsvp', 'lsvP', 'icvp'}
BPLIST_PREFIX = b'bplist'

# Command line
DEFAULT_DS_STORE_FILE = '.DS_Store'
OUTPUT_FORMATS = ('human', 'jsonl')
