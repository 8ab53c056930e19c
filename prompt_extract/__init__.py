"""PNG Prompt Extractor

Recovers the positive prompt that AI image generators embed in PNG text chunks.
"""

from .exceptions import DecompressionError, FormatError, PromptExtractError
from .logging_utils import setup_logging
from .models import ExtractionResult, FileExtraction, PromptSource, TextChunk
from .services.extractor import (
    extract_file,
    extract_prompt_from_bytes,
    extract_prompt_from_file,
    extract_prompts_from_files,
    join_prompts,
)
from .services.selector import select_prompt, select_prompt_from_chunks
from .settings import Settings, get_settings
from .utils.png_chunks import read_png_chunks, read_png_text_chunks

__all__ = [
    "DecompressionError",
    "ExtractionResult",
    "FileExtraction",
    "FormatError",
    "PromptExtractError",
    "PromptSource",
    "Settings",
    "TextChunk",
    "extract_file",
    "extract_prompt_from_bytes",
    "extract_prompt_from_file",
    "extract_prompts_from_files",
    "get_settings",
    "join_prompts",
    "read_png_chunks",
    "read_png_text_chunks",
    "select_prompt",
    "select_prompt_from_chunks",
    "setup_logging",
]
