"""PNG byte stream builders for the prompt extractor tests."""

import io
import zlib

from PIL import Image
from PIL.PngImagePlugin import PngInfo

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def png_chunk(ctype: bytes, data: bytes) -> bytes:
    """Frame one chunk: length, type, data, CRC."""
    crc = zlib.crc32(ctype + data) & 0xFFFFFFFF
    return len(data).to_bytes(4, "big") + ctype + data + crc.to_bytes(4, "big")


def ihdr_chunk() -> bytes:
    # 1x1, 8-bit RGB
    return png_chunk(b"IHDR", (1).to_bytes(4, "big") + (1).to_bytes(4, "big") + bytes([8, 2, 0, 0, 0]))


def iend_chunk() -> bytes:
    return png_chunk(b"IEND", b"")


def text_payload(keyword: str, text: str) -> bytes:
    return keyword.encode("latin-1") + b"\x00" + text.encode("latin-1")


def ztxt_payload(keyword: str, text: str, method: int = 0, raw: bool = False) -> bytes:
    body = text.encode("utf-8")
    if raw:
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        compressed = compressor.compress(body) + compressor.flush()
    else:
        compressed = zlib.compress(body)
    return keyword.encode("latin-1") + b"\x00" + bytes([method]) + compressed


def itxt_payload(keyword: str, text: str, compressed: bool = False, method: int = 0,
                 language: str = "", translated: str = "") -> bytes:
    body = text.encode("utf-8")
    if compressed:
        body = zlib.compress(body)
    return (
        keyword.encode("latin-1") + b"\x00"
        + bytes([1 if compressed else 0, method])
        + language.encode("ascii") + b"\x00"
        + translated.encode("utf-8") + b"\x00"
        + body
    )


def build_png(*chunks: bytes, with_iend: bool = True) -> bytes:
    """Assemble a PNG byte stream from already framed chunks."""
    data = PNG_SIGNATURE + ihdr_chunk() + b"".join(chunks)
    if with_iend:
        data += iend_chunk()
    return data


def pillow_png(texts=None, ztexts=None, itexts=None) -> bytes:
    """Encode a real 1x1 image with Pillow carrying the given text chunks."""
    info = PngInfo()
    for key, value in (texts or {}).items():
        info.add_text(key, value)
    for key, value in (ztexts or {}).items():
        info.add_text(key, value, zip=True)
    for key, value in (itexts or {}).items():
        info.add_itxt(key, value, zip=True)
    buf = io.BytesIO()
    Image.new("RGB", (1, 1), (255, 0, 0)).save(buf, "PNG", pnginfo=info)
    return buf.getvalue()
