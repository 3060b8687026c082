# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2026-10-13 08:52:36
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-16 10:44:19
"""Decoding of the typed values stored in .DS_Store records."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from ds_store.byte_cursor import ByteCursor
from ds_store.exceptions import UnrecognizedTypeError


class ValueKind(Enum):
    BOOL      = 'bool'
    UINT32    = 'uint32'
    UINT64    = 'uint64'
    TYPE_CODE = 'type_code'
    TEXT      = 'text'
    BLOB      = 'blob'


@dataclass(frozen=True)
class TypedValue:
    """One decoded record value, together with the tag it was stored under."""
    type_tag: str
    kind: ValueKind
    value: bool | int | str | bytes

    def as_plain(self) -> bool | int | str | bytes:
        return self.value


def decode_utf16be(raw: bytes) -> str:
    # Unpaired surrogates become U+FFFD rather than failing the record
    return raw.decode('utf-16-be', errors='replace')


def _read_bool(cursor: ByteCursor) -> bool:
    return cursor.read_u8() != 0


def _read_type_code(cursor: ByteCursor) -> str:
    return cursor.read_bytes(4).decode('latin-1')


def _read_ustr(cursor: ByteCursor) -> str:
    num_chars = cursor.read_u32()
    return decode_utf16be(cursor.read_bytes(num_chars * 2))


def _read_blob(cursor: ByteCursor) -> bytes:
    num_bytes = cursor.read_u32()
    return cursor.read_bytes(num_bytes)


# Tag -> (kind, reader). 'shor' is stored in a full
# 4-byte word even though it holds a short.
TYPE_TABLE: Dict[str, tuple[ValueKind, Callable[[ByteCursor], bool | int | str | bytes]]] = {
    'bool': (ValueKind.BOOL,      _read_bool),
    'shor': (ValueKind.UINT32,    ByteCursor.read_u32),
    'long': (ValueKind.UINT32,    ByteCursor.read_u32),
    'comp': (ValueKind.UINT64,    ByteCursor.read_u64),
    'dutc': (ValueKind.UINT64,    ByteCursor.read_u64),
    'type': (ValueKind.TYPE_CODE, _read_type_code),
    'ustr': (ValueKind.TEXT,      _read_ustr),
    'blob': (ValueKind.BLOB,      _read_blob),
}


def decode_value(cursor: ByteCursor, type_tag: str) -> TypedValue:
    '''
    Read one value of the given type from the cursor's
    current position.

    :param cursor: positioned at the first byte of the value
    :param type_tag: 4-character data type, such as 'ustr'
    :return: the decoded value
    :raises UnrecognizedTypeError: if type_tag is not in TYPE_TABLE.
        Nothing is consumed in that case.
    :raises TruncatedError: if the value runs past the buffer end
    '''
    try:
        kind, reader = TYPE_TABLE[type_tag]
    except KeyError:
        raise UnrecognizedTypeError(type_tag, offset=cursor.position()) from None
    return TypedValue(type_tag, kind, reader(cursor))
