"""Parser for workflow graphs and metadata objects to extract the positive prompt."""

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from ..models.extraction import CandidateString, WorkflowNode
from ..settings import Settings, get_settings
from .json_access import get_dict, get_nonblank_str, get_str, load_json_object, safe_json_loads

logger = logging.getLogger(__name__)

# Applied in order: escaped "\r\n", escaped "\n" (both from double-encoded JSON), then real CRLF
NEWLINE_REPLACEMENTS = [
    re.compile(r'\\r\\n'),
    re.compile(r'\\n'),
    re.compile(r'\r\n'),
]

NODE_ID_PATTERN = re.compile(r'[0-9]+')


def normalize_prompt(text: str) -> str:
    """Collapse escaped and CRLF newlines into '\\n' and strip surrounding whitespace."""
    for pattern in NEWLINE_REPLACEMENTS:
        text = pattern.sub('\n', text)
    return text.strip()


def is_wrapper_prompt(text: str) -> bool:
    """
    Check whether text is a bare {"prompt": "..."} object.

    Such wrappers reference a prompt elsewhere in the graph rather than
    containing it, so they are never returned as a result.
    """
    if not isinstance(text, str):
        return False
    stripped = text.strip()
    if not (stripped.startswith('{') and stripped.endswith('}')):
        return False
    obj = load_json_object(stripped)
    if obj is None or list(obj.keys()) != ['prompt']:
        return False
    return isinstance(obj['prompt'], str)


def pick_best_candidate(candidates: Iterable[CandidateString]) -> Optional[CandidateString]:
    """Return the longest non-empty, non-wrapper candidate; ties go to the earliest."""
    best = None
    for candidate in candidates:
        text = candidate.text.strip() if isinstance(candidate.text, str) else ""
        if not text or is_wrapper_prompt(text):
            continue
        if best is None or len(text) > len(best.text):
            best = CandidateString(text=text, origin=candidate.origin)
    return best


def pick_best_string(candidates: Iterable[str]) -> Optional[str]:
    """Return the longest non-empty, non-wrapper string after trimming, or None."""
    best = pick_best_candidate(
        CandidateString(text=text, origin=f"candidate {index}")
        for index, text in enumerate(candidates)
        if isinstance(text, str)
    )
    return best.text if best else None


def looks_like_workflow_graph(obj: Dict[str, Any]) -> bool:
    """A metadata object with any all-digit key is treated as a node graph."""
    return any(NODE_ID_PATTERN.fullmatch(key) for key in obj.keys())


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def parse_workflow_nodes(graph: Dict[str, Any]) -> List[WorkflowNode]:
    """Build WorkflowNode entries from the object-valued members of a graph."""
    nodes = []
    if not isinstance(graph, dict):
        return nodes

    for node_id, node in graph.items():
        if not isinstance(node, dict):
            continue
        meta = get_dict(node, '_meta')
        nodes.append(WorkflowNode(
            id=str(node_id),
            class_type=_as_text(node.get('class_type')),
            title=_as_text(meta.get('title')) if meta is not None else "",
            inputs=get_dict(node, 'inputs') or {},
        ))
    return nodes


class WorkflowGraphParser:
    """Finds positive prompt text in workflow graphs and generator metadata objects."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def looks_positive(self, node: WorkflowNode) -> bool:
        """Check the node against the positive marker table."""
        for marker in self.settings.positive_markers:
            if marker.matches(getattr(node, marker.field)):
                return True
        return False

    def collect_candidates(self, graph: Dict[str, Any]) -> List[CandidateString]:
        """Collect prompt candidates from every node of a workflow graph."""
        candidates = []
        for node in parse_workflow_nodes(graph):
            positive = get_nonblank_str(node.inputs, 'positive')
            if positive is not None:
                candidates.append(CandidateString(text=positive, origin=f"node {node.id} inputs.positive"))

            if self.looks_positive(node):
                for key in ('text', 'prompt'):
                    value = get_nonblank_str(node.inputs, key)
                    if value is not None:
                        candidates.append(CandidateString(text=value, origin=f"node {node.id} inputs.{key}"))
        return candidates

    def extract_from_workflow_graph(self, graph: Any) -> Optional[str]:
        """Return the best normalized positive prompt of a workflow graph, or None."""
        if not isinstance(graph, dict):
            return None
        best = pick_best_candidate(self.collect_candidates(graph))
        if best is None:
            return None
        logger.debug(f"Workflow prompt taken from {best.origin}")
        return normalize_prompt(best.text) or None

    def extract_from_metadata_object(self, meta: Any) -> Optional[str]:
        """
        Extract a prompt from a generator metadata object.

        Tried in order: an embedded 'raw_workflow' graph string, a long enough
        'prompt' field, then the configured prompt keys.
        """
        if not isinstance(meta, dict):
            return None

        raw_workflow = get_str(meta, 'raw_workflow')
        if raw_workflow is not None:
            prompt = self.extract_from_workflow_graph(safe_json_loads(raw_workflow))
            if prompt:
                return prompt

        prompt = get_str(meta, 'prompt')
        if (prompt is not None
                and len(prompt.strip()) > self.settings.metadata_prompt_min_length
                and not is_wrapper_prompt(prompt)):
            return normalize_prompt(prompt) or None

        for key in self.settings.metadata_prompt_keys:
            value = get_nonblank_str(meta, key)
            if value is not None and not is_wrapper_prompt(value):
                return normalize_prompt(value) or None

        return None


def extract_from_workflow_graph(graph: Any, settings: Optional[Settings] = None) -> Optional[str]:
    """Convenience function for WorkflowGraphParser.extract_from_workflow_graph."""
    return WorkflowGraphParser(settings).extract_from_workflow_graph(graph)


def extract_from_metadata_object(meta: Any, settings: Optional[Settings] = None) -> Optional[str]:
    """Convenience function for WorkflowGraphParser.extract_from_metadata_object."""
    return WorkflowGraphParser(settings).extract_from_metadata_object(meta)
