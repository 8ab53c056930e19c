"""Prompt extraction service for PNG byte buffers and files."""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..exceptions import FormatError
from ..models.extraction import ExtractionResult, FileExtraction, TextChunk
from ..settings import Settings, get_settings
from ..utils.png_chunks import read_png_bytes, read_png_text_chunks, read_png_text_chunks_async
from .selector import PromptHeuristicSelector

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

COPY_ALL_SEPARATOR = "\n\n---\n\n"


def extract_prompt_from_bytes(data: bytes, settings: Optional[Settings] = None) -> ExtractionResult:
    """
    Extract the positive prompt from a PNG byte buffer.

    Raises FormatError if the buffer is not a PNG. Finding no prompt is not an
    error; the result then has source 'none'.
    """
    chunks = read_png_text_chunks(data)
    return PromptHeuristicSelector(settings).select_from_chunks(chunks)


def extract_prompt_from_file(png_path: PathLike, settings: Optional[Settings] = None) -> ExtractionResult:
    """Extract the positive prompt from a PNG file."""
    settings = settings or get_settings()
    return extract_prompt_from_bytes(read_png_bytes(Path(png_path), settings), settings)


def is_png_path(path: PathLike) -> bool:
    return Path(path).suffix.lower() == ".png"


def _failed_extraction(png_path: Path, error: Exception) -> FileExtraction:
    logger.warning(f"EXTRACT failed file={png_path.name} error={error}")
    return FileExtraction(name=png_path.name, error=str(error))


def _completed_extraction(png_path: Path, chunks: List[TextChunk], settings: Settings) -> FileExtraction:
    result = PromptHeuristicSelector(settings).select_from_chunks(chunks)
    logger.info(f"EXTRACT file={png_path.name} chunks={len(chunks)} source={result.source.value}")
    return FileExtraction(name=png_path.name, result=result, chunks=chunks)


def extract_file(png_path: PathLike, settings: Optional[Settings] = None) -> FileExtraction:
    """Extract one file for a batch; read and format errors are captured, not raised."""
    settings = settings or get_settings()
    png_path = Path(png_path)
    try:
        chunks = read_png_text_chunks(read_png_bytes(png_path, settings))
    except (FormatError, OSError) as e:
        return _failed_extraction(png_path, e)
    return _completed_extraction(png_path, chunks, settings)


async def extract_file_async(png_path: PathLike, settings: Optional[Settings] = None) -> FileExtraction:
    """Async variant of extract_file; text chunks are decoded concurrently."""
    settings = settings or get_settings()
    png_path = Path(png_path)
    try:
        data = await asyncio.to_thread(read_png_bytes, png_path, settings)
        chunks = await read_png_text_chunks_async(data)
    except (FormatError, OSError) as e:
        return _failed_extraction(png_path, e)
    return _completed_extraction(png_path, chunks, settings)


async def extract_prompts_from_files(paths: Iterable[PathLike], settings: Optional[Settings] = None) -> List[FileExtraction]:
    """
    Extract prompts from many files concurrently.

    Only paths with a .png suffix are processed. Results follow input order.
    """
    settings = settings or get_settings()
    png_paths = [Path(p) for p in paths if is_png_path(p)]
    return list(await asyncio.gather(*(extract_file_async(p, settings) for p in png_paths)))


def join_prompts(extractions: Sequence[FileExtraction], separator: str = COPY_ALL_SEPARATOR) -> str:
    """Join the non-blank prompts of a batch, in order, into one copyable text."""
    prompts = [e.prompt for e in extractions if e.prompt and e.prompt.strip()]
    return separator.join(prompts)
