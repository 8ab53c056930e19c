"""Extraction data models package."""

from .extraction import (
    CandidateString,
    ChunkKind,
    ExtractionResult,
    FileExtraction,
    PromptSource,
    RawChunk,
    TextChunk,
    WorkflowNode,
)

__all__ = [
    'CandidateString',
    'ChunkKind',
    'ExtractionResult',
    'FileExtraction',
    'PromptSource',
    'RawChunk',
    'TextChunk',
    'WorkflowNode',
]
