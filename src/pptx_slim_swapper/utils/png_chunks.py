"""PNG chunk 讀寫工具。

PNG 檔案結構：8 bytes signature，接著一連串 chunk，
每個 chunk 為 ``[length(4, big-endian)][type(4)][data][crc32(4)]``，
以長度為 0 的 ``IEND`` chunk 結束。CRC 以 type + data 計算。
"""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
IEND = b"IEND"
TEXT = b"tEXt"

_LENGTH = struct.Struct(">I")
_HEADER_SIZE = 8
_CRC_SIZE = 4


@dataclass(frozen=True)
class PngChunk:
    chunk_type: bytes
    data: bytes
    crc: int
    offset: int

    @property
    def type_name(self) -> str:
        return self.chunk_type.decode("latin-1")

    def crc_ok(self) -> bool:
        return self.crc == crc32(self.chunk_type + self.data)


def crc32(data: bytes) -> int:
    # zlib 使用 IEEE 802.3 反射多項式 0xEDB88320，表格於行程內只建立一次
    return zlib.crc32(data) & 0xFFFFFFFF


def has_signature(data: bytes) -> bool:
    return data[: len(PNG_SIGNATURE)] == PNG_SIGNATURE


def build_chunk(chunk_type: bytes, data: bytes) -> bytes:
    if len(chunk_type) != 4:
        raise ValueError(f"chunk type 必須是 4 bytes: {chunk_type!r}")
    return (
        _LENGTH.pack(len(data))
        + chunk_type
        + data
        + _LENGTH.pack(crc32(chunk_type + data))
    )


def iter_chunks(data: bytes) -> Iterator[PngChunk]:
    """依序列出 chunk，遇到 IEND 或截斷的 chunk 即停止。"""
    if not has_signature(data):
        return

    offset = len(PNG_SIGNATURE)
    total = len(data)
    while offset + _HEADER_SIZE <= total:
        (length,) = _LENGTH.unpack_from(data, offset)
        chunk_type = data[offset + 4 : offset + 8]
        data_start = offset + _HEADER_SIZE
        data_end = data_start + length
        if data_end + _CRC_SIZE > total:
            return
        (crc,) = _LENGTH.unpack_from(data, data_end)
        yield PngChunk(
            chunk_type=chunk_type,
            data=data[data_start:data_end],
            crc=crc,
            offset=offset,
        )
        if chunk_type == IEND:
            return
        offset = data_end + _CRC_SIZE


def find_iend_offset(data: bytes) -> Optional[int]:
    for chunk in iter_chunks(data):
        if chunk.chunk_type == IEND:
            return chunk.offset
    return None


def insert_before_iend(data: bytes, chunk: bytes) -> bytes:
    iend_offset = find_iend_offset(data)
    if iend_offset is None:
        raise ValueError("找不到 IEND chunk，不是完整的 PNG")
    return data[:iend_offset] + chunk + data[iend_offset:]


def build_text_chunk(keyword: str, text: str) -> bytes:
    keyword_bytes = keyword.encode("latin-1")
    if not 1 <= len(keyword_bytes) <= 79 or b"\x00" in keyword_bytes:
        raise ValueError(f"無效的 tEXt keyword: {keyword!r}")
    return build_chunk(TEXT, keyword_bytes + b"\x00" + text.encode("utf-8"))


def parse_text_chunk(data: bytes) -> Optional[Tuple[str, str]]:
    keyword, separator, text = data.partition(b"\x00")
    if not separator or not keyword:
        return None
    try:
        return keyword.decode("latin-1"), text.decode("utf-8")
    except UnicodeDecodeError:
        return None
