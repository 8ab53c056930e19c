"""Utility functions for reading PNG chunks and their text payloads."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from ..exceptions import FormatError
from ..models.extraction import ChunkKind, RawChunk, TextChunk
from ..settings import Settings, get_settings
from .payload_decoder import decode_text_chunk

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
TEXT_CHUNK_TYPES = {kind.value for kind in ChunkKind}


def read_png_chunks(data: bytes) -> List[RawChunk]:
    """
    Split a PNG byte stream into its chunks, in stream order.

    Raises FormatError if the PNG signature is missing. A chunk whose declared
    length runs past the end of the buffer ends the scan without error, and so
    does IEND. CRC trailers are skipped but not verified.
    """
    if len(data) < len(PNG_SIGNATURE) or data[:8] != PNG_SIGNATURE:
        raise FormatError("Data does not start with a PNG signature")

    chunks = []
    offset = 8
    while offset + 8 <= len(data):
        length = int.from_bytes(data[offset:offset + 4], "big")
        ctype = data[offset + 4:offset + 8].decode("latin-1")
        data_start = offset + 8
        data_end = data_start + length
        crc_end = data_end + 4

        if crc_end > len(data):
            logger.debug(f"Truncated {ctype!r} chunk at offset {offset}, stopping scan")
            break
        if ctype == "IEND":
            break

        chunks.append(RawChunk(chunk_type=ctype, data=bytes(data[data_start:data_end])))
        offset = crc_end

    return chunks


def read_png_text_chunks(data: bytes) -> List[TextChunk]:
    """Read and decode every tEXt/zTXt/iTXt chunk; chunks that fail to decode are dropped."""
    text_chunks = []
    for chunk in read_png_chunks(data):
        if chunk.chunk_type not in TEXT_CHUNK_TYPES:
            continue
        decoded = decode_text_chunk(chunk.chunk_type, chunk.data)
        if decoded is not None:
            text_chunks.append(decoded)
    return text_chunks


async def read_png_text_chunks_async(data: bytes) -> List[TextChunk]:
    """
    Like read_png_text_chunks, but decodes the text chunks concurrently in
    worker threads. Results keep stream order.
    """
    raw = [chunk for chunk in read_png_chunks(data) if chunk.chunk_type in TEXT_CHUNK_TYPES]
    decoded = await asyncio.gather(
        *(asyncio.to_thread(decode_text_chunk, chunk.chunk_type, chunk.data) for chunk in raw)
    )
    return [chunk for chunk in decoded if chunk is not None]


def read_png_bytes(png_path: Path, settings: Optional[Settings] = None) -> bytes:
    """Read a PNG file from disk, refusing files above the configured size cap."""
    settings = settings or get_settings()
    png_path = Path(png_path)
    size = png_path.stat().st_size
    if size > settings.max_file_bytes:
        raise FormatError(f"{png_path.name} is {size} bytes, larger than the {settings.max_file_bytes} byte limit")
    with open(png_path, "rb") as f:
        return f.read()


def read_png_text_chunks_from_path(png_path: Path, settings: Optional[Settings] = None) -> List[TextChunk]:
    """Read and decode the text chunks of a PNG file."""
    return read_png_text_chunks(read_png_bytes(png_path, settings))
