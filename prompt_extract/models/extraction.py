"""PNG text chunk and prompt extraction result models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ChunkKind(str, Enum):
    """PNG chunk types that carry text."""

    PLAIN = "tEXt"
    COMPRESSED = "zTXt"
    INTERNATIONAL = "iTXt"

    @classmethod
    def from_type_code(cls, chunk_type: str) -> Optional['ChunkKind']:
        """Map a 4-character chunk type code to a kind, or None if it is not a text chunk."""
        for kind in cls:
            if kind.value == chunk_type:
                return kind
        return None


class PromptSource(str, Enum):
    """Which extraction phase produced a prompt."""

    METADATA_JSON = "metadata-json"
    RAW_WORKFLOW_JSON = "raw-workflow-json"
    FALLBACK_LONG_TEXT = "fallback-long-text"
    NONE = "none"


@dataclass(frozen=True)
class RawChunk:
    """A chunk as framed in the PNG stream, before payload decoding."""
    chunk_type: str
    data: bytes


@dataclass(frozen=True)
class TextChunk:
    """A decoded tEXt/zTXt/iTXt chunk."""
    kind: ChunkKind
    keyword: str
    text: str


@dataclass(frozen=True)
class CandidateString:
    """A prompt candidate and where in the metadata it was found."""
    text: str
    origin: str


@dataclass
class WorkflowNode:
    """A single node of a workflow graph."""
    id: str
    class_type: str = ""
    title: str = ""
    inputs: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExtractionResult:
    """The selected positive prompt and the phase that found it."""
    prompt: Optional[str] = None
    source: PromptSource = PromptSource.NONE

    def __post_init__(self):
        if (self.prompt is None) != (self.source is PromptSource.NONE):
            raise ValueError(
                f"prompt and source disagree: prompt={'set' if self.prompt is not None else 'absent'}, "
                f"source={self.source.value}"
            )

    @property
    def found(self) -> bool:
        return self.prompt is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for callers that serialize results."""
        return {"prompt": self.prompt, "source": self.source.value}


@dataclass
class FileExtraction:
    """Outcome of extracting the prompt from one file in a batch."""

    name: str
    result: Optional[ExtractionResult] = None
    error: Optional[str] = None
    chunks: List[TextChunk] = field(default_factory=list)

    @property
    def prompt(self) -> Optional[str]:
        return self.result.prompt if self.result else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out the raw chunk texts."""
        return {
            "name": self.name,
            "prompt": self.prompt,
            "source": self.result.source.value if self.result else None,
            "error": self.error,
            "chunk_keywords": [chunk.keyword for chunk in self.chunks],
        }
