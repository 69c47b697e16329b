from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from base_classes import ConfigurationError
from utils.tab_completion_utils import complete


class OnError(Enum):
    """Special values for responses['ask_on_error']."""
    QUESTION = 'question'   # repeat the full question


WHITESPACE_MODES = ('strip', 'chomp', 'collapse', 'strip_and_collapse', 'chomp_and_collapse', 'remove')
CASE_MODES = ('up', 'down', 'capitalize')
CHARACTER_MODES = (True, 'getc')

_TYPE_NAMES = {
    int: 'integer',
    float: 'number',
    bool: 'yes or no answer',
    list: 'list of words',
    Path: 'path',
    re.Pattern: 'regular expression',
}


def _convert_to_bool(value: str) -> bool:
    """
    Convert a string to boolean, supporting yes/no, true/false, 1/0.
    Raises ValueError if it doesn't match known patterns.
    """
    val_lower = value.strip().lower()
    if val_lower in ('y', 'yes', 'true', '1'):
        return True
    if val_lower in ('n', 'no', 'false', '0'):
        return False
    raise ValueError("Invalid boolean input")


def _compile_regex(value: str) -> re.Pattern:
    try:
        return re.compile(value)
    except re.error as e:
        raise ValueError(str(e)) from e


class Question:
    """
    Everything needed to ask one question and turn the reply into an answer:
    the prompt, the answer type and the validation, range, whitespace, case,
    echo and confirmation rules, plus the messages shown on each error.

    Configure a Question by passing a callable that receives it:

        session.ask("Age?  ", int, lambda q: setattr(q, 'above', 0))

    The question is frozen once the answer pipeline starts reading input.
    """

    def __init__(
            self,
            prompt: str,
            answer_type: Any = None,
            configure: Optional[Callable[['Question'], Any]] = None,
            response_defaults: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._frozen = False
        self.prompt = prompt
        self.answer_type = answer_type
        self.default: Any = None
        self.validate: Any = None
        self.whitelist: Any = None
        self.above: Any = None
        self.below: Any = None
        self.in_: Any = None
        self.whitespace: Optional[str] = 'strip'
        self.case: Optional[str] = None
        self.character: Any = None
        self.echo: Any = True
        self.confirm: Any = None
        self.readline: bool = False
        self.responses: Dict[str, Any] = {}
        self._response_defaults = dict(response_defaults or {})
        if configure is not None:
            configure(self)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise AttributeError(f"Question is frozen; cannot set '{name}' while it is being asked")
        super().__setattr__(name, value)

    def __str__(self) -> str:
        return self.statement()

    # Lifecycle ----------------------------------------------------------
    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Check the configuration, fill in default responses and lock."""
        if self._frozen:
            return
        self.check()
        self.build_responses()
        self.responses = MappingProxyType(dict(self.responses))
        super().__setattr__('_frozen', True)

    def check(self) -> None:
        if self.validate is not None and self.whitelist is not None:
            raise ConfigurationError("Configure either validate or whitelist, not both", field='validate')
        if self.whitespace is not None and self.whitespace not in WHITESPACE_MODES:
            raise ConfigurationError(f"Unknown whitespace mode '{self.whitespace}'", field='whitespace')
        if self.case is not None and self.case not in CASE_MODES:
            raise ConfigurationError(f"Unknown case mode '{self.case}'", field='case')
        if self.character is not None and self.character not in CHARACTER_MODES:
            raise ConfigurationError(f"Unknown character mode '{self.character}'", field='character')

    def build_responses(self) -> None:
        """Merge user responses over the defaults for this question."""
        options = self.selection()
        defaults = {
            'ambiguous_completion': f"Ambiguous choice.  Please choose one of {options!r}.",
            'ask_on_error': '?  ',
            'invalid_type': f"You must enter a valid {self.type_name()}.",
            'no_completion': f"You must choose one of {options!r}.",
            'not_in_range': f"Your answer isn't within the expected range ({self.expected_range()}).",
            'not_valid': f"Your answer isn't valid ({self.rule_description()}).",
        }
        defaults.update(self._response_defaults)
        defaults.update(self.responses)
        self.responses = defaults

    # Presentation -------------------------------------------------------
    def statement(self) -> str:
        """The text said to the user when asking."""
        return self.prompt

    def template_context(self) -> Dict[str, Any]:
        return {'question': self.prompt}

    @property
    def secret(self) -> bool:
        return self.echo is not True

    def type_name(self) -> str:
        if isinstance(self.answer_type, (list, tuple)):
            return 'choice'
        if self.answer_type in _TYPE_NAMES:
            return _TYPE_NAMES[self.answer_type]
        return getattr(self.answer_type, '__name__', 'answer').strip('<>')

    def rule_description(self) -> str:
        if self.whitelist is not None:
            return f"must be one of {[str(w) for w in self.whitelist]!r}"
        if isinstance(self.validate, re.Pattern):
            return f"must match /{self.validate.pattern}/"
        if isinstance(self.validate, str):
            return f"must match /{self.validate}/"
        return 'rejected by validation'

    def expected_range(self) -> str:
        expected = []
        if self.above is not None:
            expected.append(f"> {self.above}")
        if self.below is not None:
            expected.append(f"< {self.below}")
        if self.in_ is not None:
            expected.append(f"included in {list(self.in_)!r}")
        return ' and '.join(expected) or 'any value'

    def selection(self) -> List[str]:
        """The enumerated choices of this question, if any."""
        if isinstance(self.answer_type, (list, tuple)):
            return [str(c) for c in self.answer_type]
        return []

    # Pipeline steps -----------------------------------------------------
    def remove_whitespace(self, answer_string: str) -> str:
        mode = self.whitespace
        if mode is None:
            return answer_string
        if mode == 'strip':
            return answer_string.strip()
        if mode == 'chomp':
            return self._chomp(answer_string)
        if mode == 'collapse':
            return re.sub(r'\s+', ' ', answer_string)
        if mode == 'strip_and_collapse':
            return re.sub(r'\s+', ' ', answer_string.strip())
        if mode == 'chomp_and_collapse':
            return re.sub(r'\s+', ' ', self._chomp(answer_string))
        return re.sub(r'\s+', '', answer_string)

    @staticmethod
    def _chomp(answer_string: str) -> str:
        for ending in ('\r\n', '\n', '\r'):
            if answer_string.endswith(ending):
                return answer_string[:-len(ending)]
        return answer_string

    def change_case(self, answer_string: str) -> str:
        if self.case == 'up':
            return answer_string.upper()
        if self.case == 'down':
            return answer_string.lower()
        if self.case == 'capitalize':
            return answer_string.capitalize()
        return answer_string

    def answer_or_default(self, answer_string: str) -> str:
        if answer_string == '' and self.default is not None:
            return str(self.default)
        return answer_string

    def valid_answer(self, answer_string: str) -> bool:
        if self.whitelist is not None:
            return answer_string in {str(w) for w in self.whitelist}
        if self.validate is None:
            return True
        if isinstance(self.validate, re.Pattern):
            return self.validate.search(answer_string) is not None
        if isinstance(self.validate, str):
            return re.search(self.validate, answer_string) is not None
        if callable(self.validate):
            return bool(self.validate(answer_string))
        raise ConfigurationError(f"Unsupported validate rule {self.validate!r}", field='validate')

    def convert(self, answer_string: str) -> Any:
        """
        Convert a validated answer string to the answer type.

        Malformed input raises ValueError (or TypeError); enumerated choices
        raise NoAutoCompleteMatch or AmbiguousCompletion.
        """
        answer_type = self.answer_type
        if answer_type is None or answer_type is str:
            return answer_string
        if answer_type is bool:
            return _convert_to_bool(answer_string)
        if answer_type in (int, float):
            return answer_type(answer_string)
        if answer_type is list:
            return answer_string.split()
        if answer_type is Path:
            if not answer_string:
                raise ValueError("Empty path")
            return Path(answer_string)
        if answer_type is re.Pattern:
            return _compile_regex(answer_string)
        if isinstance(answer_type, (list, tuple)):
            return complete(self.selection(), answer_string)
        if callable(answer_type):
            return answer_type(answer_string)
        raise ConfigurationError(f"Unsupported answer type {answer_type!r}", field='answer_type')

    def in_range(self, answer: Any) -> bool:
        return (
            (self.above is None or answer > self.above)
            and (self.below is None or answer < self.below)
            and (self.in_ is None or answer in self.in_)
        )
