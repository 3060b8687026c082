# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-14 13:37:26
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-17 11:58:30
"""Render parsed .DS_Store records as text or as JSON Lines."""

import base64
import json
import plistlib
import struct
from typing import Iterator, Optional

from common.utils import Utils
from ds_store import config
from ds_store.tree_walker import RecordSet
from ds_store.value_decoder import TypedValue, ValueKind


class RecordFormatter:
    '''
    Turns a RecordSet into output lines. Knows about a
    few struct keys whose raw values mean little to humans:
    modification dates, and binary property lists that
    hold Finder window settings.
    '''

    def __init__(self, records: RecordSet):
        self.records = records

    # ---------------------- Human Readable -------------------

    def human_readable(self) -> Iterator[str]:
        '''
        Yield one line per filename, followed by one
        tab-indented line per property of that file.
        Property list renderings span several lines.
        '''
        for filename, properties in self.records.items():
            yield filename
            for struct_key, typed_val in properties.items():
                yield f"\t{self.format_property(struct_key, typed_val)}"

    def format_property(self, struct_key: str, typed_val: TypedValue) -> str:
        output = None
        if struct_key in config.MODIFICATION_DATE_KEYS:
            output = self._format_mod_date(typed_val)
        elif struct_key in config.PLIST_KEYS:
            output = self._format_plist(struct_key, typed_val)

        if output is None:
            if typed_val.kind == ValueKind.BLOB:
                output = f"{struct_key} (blob): 0x{typed_val.value.hex()}"
            else:
                output = f"{struct_key}: {typed_val.value}"
        return output

    # ---------------------- JSON Lines -------------------

    def jsonl(self) -> Iterator[str]:
        '''
        Yield one JSON object per filename:
            {"filename": "...", "properties": {"Iloc": ..., ...}}
        Blobs are base64 encoded.
        '''
        for filename, properties in self.records.items():
            record = {
                'filename': filename,
                'properties': {key: typed_val.as_plain() for key, typed_val in properties.items()}
            }
            yield json.dumps(record, default=self._json_default)

    # ---------------------- Private -------------------------

    def _format_mod_date(self, typed_val: TypedValue) -> Optional[str]:
        if typed_val.kind == ValueKind.UINT64:
            try:
                when = Utils.dutc_to_datetime(typed_val.value)
            except (OverflowError, ValueError):
                # Beyond year 9999; shown as the raw number instead
                return None
            return f"Modification date: {Utils.finder_date_str(when)}"
        if typed_val.kind == ValueKind.BLOB and len(typed_val.value) >= 8:
            # Blob time stamps are little-endian
            timestamp = struct.unpack('<Q', typed_val.value[:8])[0]
            return f"Modification date (from blob): {timestamp}"
        return None

    def _format_plist(self, struct_key: str, typed_val: TypedValue) -> Optional[str]:
        if typed_val.kind != ValueKind.BLOB or not typed_val.value.startswith(config.BPLIST_PREFIX):
            return None
        try:
            plist_data = plistlib.loads(typed_val.value)
            xml = plistlib.dumps(plist_data, fmt=plistlib.FMT_XML).decode('utf-8')
        except (plistlib.InvalidFileException, ValueError, TypeError, OverflowError):
            # Fall back to the hex rendering
            return None
        xml = xml.rstrip('\n').replace('\n', '\n\t\t')
        return f"{struct_key} (Property List):\n\t\t{xml}"

    @staticmethod
    def _json_default(obj):
        if isinstance(obj, bytes):
            return base64.b64encode(obj).decode('ascii')
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
