"""Exceptions raised by the prompt extraction pipeline."""


class PromptExtractError(Exception):
    """Base class for extraction errors."""


class FormatError(PromptExtractError, ValueError):
    """The input is not a PNG byte stream."""


class DecompressionError(PromptExtractError):
    """A compressed text payload could not be inflated."""
