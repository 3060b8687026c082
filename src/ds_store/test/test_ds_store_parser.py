# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-15 13:04:29
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-17 11:22:35

from pathlib import Path
from tempfile import TemporaryDirectory
import unittest
from unittest.mock import MagicMock

from ds_store.ds_store_parser import MasterBlockHeader, parse, parse_file
from ds_store.exceptions import (DSStoreError, MasterBlockNotFoundError,
                                 TruncatedError)
from ds_store.value_decoder import ValueKind

from ds_store_fixtures import (DSStoreBuilder, encode_record, internal_node,
                               leaf_node, master_block)


class DSStoreParserTester(unittest.TestCase):

    def setUp(self):
        self.log = MagicMock()

    def folder_image(self, magic=b'Bud1', directory=None, extra_records=()) -> bytes:
        '''
        A small two-level tree that resembles a real
        folder: two leaves under one internal root,
        plus the master block.
        '''
        builder = DSStoreBuilder()
        left = builder.add_block(leaf_node([
            encode_record('.', 'icvp', 'blob', b'bplist00\x08\x00'),
            encode_record('.', 'vSrn', 'long', 1),
        ]))
        right = builder.add_block(leaf_node([
            encode_record('untitled folder', 'moDD', 'dutc', 248173034995712),
            encode_record('untitled folder', 'ph1S', 'comp', 1024),
        ] + list(extra_records)))
        root = builder.add_block(internal_node(
            children=[left],
            records=[encode_record('IMG_0001.HEIC', 'Iloc', 'blob', b'\x00' * 16)],
            rightmost_child=right))
        master = builder.add_block(master_block(root, levels=1, num_records=5, num_nodes=3))
        if directory is None:
            directory = [('DSDB', master)]
        return builder.build(directory=directory, magic=magic)

# --------------------- Tests ------------------

    def test_parse_folder(self):
        result = parse(self.folder_image(), log=self.log)

        self.assertEqual(set(result.records.keys()), {'.', 'untitled folder', 'IMG_0001.HEIC'})
        self.assertEqual(result.records['.']['vSrn'].value, 1)
        self.assertEqual(result.records['untitled folder']['moDD'].kind, ValueKind.UINT64)
        self.assertEqual(result.records['untitled folder']['ph1S'].value, 1024)
        self.assertEqual(result.records['IMG_0001.HEIC']['Iloc'].value, b'\x00' * 16)
        self.assertEqual(result.warnings, [])
        self.assertEqual(result.skipped_entries, 0)

    def test_master_block_header(self):
        result = parse(self.folder_image(), log=self.log)
        self.assertEqual(result.master,
                         MasterBlockHeader(root_node_id=3,
                                           tree_levels=1,
                                           record_count=5,
                                           node_count=3,
                                           page_size=0x1000))

    def test_directory_with_other_entries(self):
        result = parse(self.folder_image(directory=[('free', 0), ('DSDB', 4)]), log=self.log)
        self.assertEqual(len(result.records), 3)

    def test_magic_mismatch_is_warning(self):
        result = parse(self.folder_image(magic=b'Bud2'), log=self.log)
        self.assertEqual(len(result.records), 3)
        self.assertEqual(len(result.warnings), 1)
        self.assertIn('Bud1', result.warnings[0])
        # Not a skipped record:
        self.assertEqual(result.skipped_entries, 0)
        self.log.warn.assert_called_once()

    def test_skipped_entries_counted(self):
        data = self.folder_image(extra_records=[
            encode_record('odd', 'xxxx', 'zzzz', raw_value=b''),
            encode_record('odd', 'cmmt', 'ustr', 'comment'),
        ])
        result = parse(data, log=self.log)
        self.assertEqual(result.skipped_entries, 1)
        self.assertEqual(list(result.records['odd'].keys()), ['cmmt'])
        self.assertEqual(result.records['odd']['cmmt'].value, 'comment')

    def test_master_block_not_found(self):
        with self.assertRaises(MasterBlockNotFoundError):
            parse(self.folder_image(directory=[('free', 1)]), log=self.log)

    def test_empty_directory(self):
        with self.assertRaises(MasterBlockNotFoundError):
            parse(self.folder_image(directory=[]), log=self.log)

    def test_truncated_header(self):
        with self.assertRaises(TruncatedError):
            parse(b'\x00\x00\x00\x01Bud1', log=self.log)

    def test_truncated_in_ustr(self):
        # Master block first, so the leaf is the last block
        # in the file and ends in a ustr. Cut into that string:
        builder = DSStoreBuilder()
        master = builder.add_block(master_block(2))
        builder.add_block(leaf_node([
            encode_record('untitled folder', 'vSrn', 'long', 1),
            encode_record('untitled folder', 'cmmt', 'ustr', 'untitled folder')]))
        data = builder.build(directory=[('DSDB', master)])

        self.assertEqual(parse(data, log=self.log).records['untitled folder']['cmmt'].value,
                         'untitled folder')
        with self.assertRaises(TruncatedError):
            parse(data[:-7], log=self.log)

    def test_errors_share_base(self):
        with self.assertRaises(DSStoreError):
            parse(b'', log=self.log)

    def test_empty_tree(self):
        builder = DSStoreBuilder()
        root = builder.add_block(leaf_node([]))
        builder.add_block(master_block(root, num_nodes=1))
        result = parse(builder.build(), log=self.log)
        self.assertEqual(result.records, {})
        self.assertEqual(result.warnings, [])

    def test_parse_file(self):
        with TemporaryDirectory(dir='/tmp', prefix='ds_store_') as root:
            ds_store_path = Path(root) / '.DS_Store'
            ds_store_path.write_bytes(self.folder_image())
            result = parse_file(ds_store_path, log=self.log)
            self.assertEqual(len(result.records), 3)


if __name__ == "__main__":
    unittest.main()
