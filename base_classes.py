"""
Abstract base classes and error types for promptline components.

These classes define the interfaces that character readers must implement
and the named conditions the answer pipeline knows how to recover from.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional, TextIO


class CharacterReader(ABC):
    """
    Abstract class for platform character input
    """

    #: For debugging purposes only
    mode: str = 'abstract'

    @abstractmethod
    def get_character(self, stream: TextIO) -> str:
        """Read one character without terminal echo; '' at end of input."""
        pass


# --- Recoverable conditions ---------------------------------------------

class QuestionError(Exception):
    """
    A recoverable condition raised while processing an answer.

    ``kind`` names the entry in Question.responses that explains the error
    to the user; ``None`` means retry without a message.
    """

    kind: Optional[str] = None

    def __init__(self, message: str = '', *, value: Any = None):
        super().__init__(message or (self.kind or 'question error'))
        self.value = value


class NotValid(QuestionError):
    kind = 'not_valid'


class NotInRange(QuestionError):
    kind = 'not_in_range'


class InvalidType(QuestionError):
    kind = 'invalid_type'


class NoAutoCompleteMatch(QuestionError):
    kind = 'no_completion'


class AmbiguousCompletion(QuestionError):
    kind = 'ambiguous_completion'

    def __init__(self, message: str = '', *, value: Any = None, candidates: Optional[list] = None):
        super().__init__(message, value=value)
        self.candidates = list(candidates or [])


class Declined(QuestionError):
    kind = None


# --- Fatal conditions ----------------------------------------------------

class ConfigurationError(Exception):
    """A Question or Menu was configured in a way that cannot be asked."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
