"""Heuristic selection of the positive prompt among decoded PNG text blobs."""

import logging
from typing import List, Optional, Sequence

from ..models.extraction import ExtractionResult, PromptSource, TextChunk
from ..settings import Settings, get_settings
from ..utils.json_access import load_json_object
from ..utils.workflow_parser import (
    WorkflowGraphParser,
    is_wrapper_prompt,
    looks_like_workflow_graph,
    normalize_prompt,
    pick_best_string,
)

logger = logging.getLogger(__name__)


def order_by_relevance(chunks: Sequence[TextChunk], settings: Optional[Settings] = None) -> List[TextChunk]:
    """Sort chunks by keyword relevance, highest first; equal scores keep stream order."""
    settings = settings or get_settings()
    return sorted(chunks, key=lambda chunk: settings.keyword_relevance(chunk.keyword), reverse=True)


class PromptHeuristicSelector:
    """
    Picks the positive prompt out of a list of text blobs.

    Blobs are expected in relevance order. Three phases run in turn and the
    first one that yields a prompt wins:

    1. metadata-json: blobs that are JSON objects, read as generator metadata
    2. raw-workflow-json: JSON objects with numeric node ids, read as workflow graphs
    3. fallback-long-text: the longest long-enough plain text blob
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.parser = WorkflowGraphParser(self.settings)

    def select(self, blobs: Sequence[str]) -> ExtractionResult:
        objects = [load_json_object(blob) for blob in blobs]

        for obj in objects:
            if obj is None:
                continue
            prompt = self.parser.extract_from_metadata_object(obj)
            if prompt:
                return ExtractionResult(prompt=prompt, source=PromptSource.METADATA_JSON)

        for obj in objects:
            if obj is None or not looks_like_workflow_graph(obj):
                continue
            prompt = self.parser.extract_from_workflow_graph(obj)
            if prompt:
                return ExtractionResult(prompt=prompt, source=PromptSource.RAW_WORKFLOW_JSON)

        prompt = self._longest_text(blobs)
        if prompt:
            return ExtractionResult(prompt=prompt, source=PromptSource.FALLBACK_LONG_TEXT)

        logger.debug(f"No prompt found in {len(blobs)} text blob(s)")
        return ExtractionResult()

    def _longest_text(self, blobs: Sequence[str]) -> Optional[str]:
        long_ones = []
        for blob in blobs:
            text = blob.strip()
            if len(text) > self.settings.fallback_min_length and not is_wrapper_prompt(text):
                long_ones.append(text)
        best = pick_best_string(long_ones)
        return normalize_prompt(best) if best else None

    def select_from_chunks(self, chunks: Sequence[TextChunk]) -> ExtractionResult:
        """Order decoded chunks by keyword relevance and select from their texts."""
        ordered = order_by_relevance(chunks, self.settings)
        return self.select([chunk.text for chunk in ordered])


def select_prompt(blobs: Sequence[str], settings: Optional[Settings] = None) -> ExtractionResult:
    """Convenience function to select a prompt from relevance-ordered text blobs."""
    return PromptHeuristicSelector(settings).select(blobs)


def select_prompt_from_chunks(chunks: Sequence[TextChunk], settings: Optional[Settings] = None) -> ExtractionResult:
    """Convenience function to select a prompt from decoded text chunks."""
    return PromptHeuristicSelector(settings).select_from_chunks(chunks)
