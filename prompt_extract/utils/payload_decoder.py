"""Decoding of tEXt, zTXt and iTXt chunk payloads."""

import asyncio
import logging
import zlib
from typing import Optional

from ..exceptions import DecompressionError
from ..models.extraction import ChunkKind, TextChunk

logger = logging.getLogger(__name__)

# Inflate attempts in order: zlib-framed stream, then raw deflate for producers that drop the header
INFLATE_ATTEMPTS = [
    ("zlib", zlib.MAX_WBITS),
    ("raw-deflate", -zlib.MAX_WBITS),
]

COMPRESSION_METHOD_DEFLATE = 0


def inflate(data: bytes) -> bytes:
    """Decompress a text chunk payload, returning the first attempt that succeeds."""
    errors = []
    for name, wbits in INFLATE_ATTEMPTS:
        try:
            return zlib.decompress(data, wbits)
        except zlib.error as e:
            errors.append(f"{name}: {e}")
    raise DecompressionError("; ".join(errors))


async def inflate_async(data: bytes) -> bytes:
    """Awaitable inflate, run in a worker thread."""
    return await asyncio.to_thread(inflate, data)


def decode_utf8(data: bytes) -> str:
    return data.decode("utf-8", "replace")


def decode_latin1(data: bytes) -> str:
    return data.decode("latin-1")


def decode_text_chunk(chunk_type: str, data: bytes) -> Optional[TextChunk]:
    """
    Decode the data of a text chunk.

    Returns None when the payload is malformed (missing separator, unknown
    compression method, corrupt stream), so the caller can drop the chunk.
    """
    kind = ChunkKind.from_type_code(chunk_type)
    if kind is None:
        return None

    try:
        if kind is ChunkKind.PLAIN:
            return _decode_text(data)
        elif kind is ChunkKind.COMPRESSED:
            return _decode_ztxt(data)
        return _decode_itxt(data)
    except (ValueError, DecompressionError) as e:
        logger.debug(f"Dropping {chunk_type} chunk: {e}")
        return None


def _split_keyword(data: bytes):
    # keyword\0rest
    if b"\x00" not in data:
        raise ValueError("missing keyword separator")
    keyword, rest = data.split(b"\x00", 1)
    return decode_latin1(keyword), rest


def _decode_text(data: bytes) -> TextChunk:
    keyword, text = _split_keyword(data)
    return TextChunk(kind=ChunkKind.PLAIN, keyword=keyword, text=decode_latin1(text))


def _decode_ztxt(data: bytes) -> TextChunk:
    # keyword\0 compression_method compressed_text
    keyword, rest = _split_keyword(data)
    if not rest:
        raise ValueError("missing compression method")
    if rest[0] != COMPRESSION_METHOD_DEFLATE:
        raise ValueError(f"unsupported compression method {rest[0]}")
    text = decode_utf8(inflate(rest[1:]))
    return TextChunk(kind=ChunkKind.COMPRESSED, keyword=keyword, text=text)


def _decode_itxt(data: bytes) -> TextChunk:
    # keyword\0 compression_flag compression_method language_tag\0 translated_keyword\0 text
    keyword, rest = _split_keyword(data)
    if len(rest) < 2:
        raise ValueError("missing compression flag or method")
    comp_flag, comp_method = rest[0], rest[1]
    rest = rest[2:]

    if b"\x00" not in rest:
        raise ValueError("missing language tag separator")
    _language_tag, rest = rest.split(b"\x00", 1)
    if b"\x00" not in rest:
        raise ValueError("missing translated keyword separator")
    _translated_keyword, payload = rest.split(b"\x00", 1)

    if comp_flag == 1:
        if comp_method != COMPRESSION_METHOD_DEFLATE:
            raise ValueError(f"unsupported compression method {comp_method}")
        payload = inflate(payload)
    return TextChunk(kind=ChunkKind.INTERNATIONAL, keyword=keyword, text=decode_utf8(payload))
