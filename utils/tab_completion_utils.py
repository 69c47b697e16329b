from __future__ import annotations

import sys
from typing import Any, Iterable, List, Optional

from base_classes import AmbiguousCompletion, NoAutoCompleteMatch


def candidates(options: Iterable[Any], word: str) -> List[str]:
    """All distinct options starting with word, in their original order."""
    return list(dict.fromkeys(str(o) for o in options if str(o).startswith(word)))


def complete(options: Iterable[Any], word: Optional[str]) -> str:
    """
    Resolve word against options by unique prefix.

    An exact match always wins. Otherwise exactly one option must start
    with word: none raises NoAutoCompleteMatch, several distinct ones raise
    AmbiguousCompletion.
    """
    options = [str(o) for o in options]
    word = word or ''
    if word and word in options:
        return word
    found = candidates(options, word) if word else []
    if not found:
        raise NoAutoCompleteMatch(f"No option matches '{word}'", value=word)
    if len(found) > 1:
        raise AmbiguousCompletion(f"'{word}' is ambiguous", value=word, candidates=found)
    return found[0]


class TabCompletionHandler:
    """
    Handles readline tab completion of menu choices and enumerated answers.
    """

    def __init__(self, config: Any = None, output_handler: Optional[Any] = None) -> None:
        self.config = config
        self.output = output_handler
        self._options: List[str] = []
        self._first_word_only = False

    @staticmethod
    def available() -> bool:
        if sys.platform not in ['linux', 'darwin']:
            return False
        try:
            import readline  # noqa: F401
        except ImportError:
            return False
        return True

    def run(self, options: Iterable[Any], first_word_only: bool = False) -> bool:
        """
        Enables tab completion against options. Returns False when readline
        is not available on this platform.
        """
        if not self.available():
            return False
        import readline
        self._options = [str(o) for o in options]
        self._first_word_only = first_word_only
        # Treat spaces as token boundaries so we complete the current token only
        readline.set_completer_delims(' \t\n')
        readline.set_completer(self.choice_completer)
        readline.parse_and_bind("tab: complete")
        return True

    def deactivate_completion(self) -> None:
        """
        Disables tab completion
        """
        self._options = []
        if self.available():
            import readline
            readline.set_completer(None)
            readline.parse_and_bind('tab: self-insert')

    def choice_completer(self, text: str, state: int) -> Optional[str]:
        """Tab completion for the active choices"""
        if self._first_word_only:
            try:
                import readline
                before = readline.get_line_buffer()[:readline.get_begidx()]
            except Exception:
                before = ''
            if before.strip():
                return None
        try:
            return candidates(self._options, text)[state]
        except IndexError:
            return None
