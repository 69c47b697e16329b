from __future__ import annotations

import re
import sys
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional, TextIO

from base_classes import CharacterReader, ConfigurationError
from core.menu import Menu
from core.pipeline import AnswerPipeline
from core.question import OnError, Question
from utils.input_utils import select_character_reader
from utils.layout_utils import ListMode, list_items, page_print, wrap
from utils.output_utils import ColorSystem, Style, StyleSpec
from utils.tab_completion_utils import TabCompletionHandler
from utils.template_utils import TemplateRenderer

AGREE_PATTERN = re.compile(r'\A(?:y(?:es)?|no?)\Z', re.IGNORECASE)
PAGE_PROMPT = "-- press enter/return to continue -- "
BACKSPACES = ('\x08', '\x7f')


def _is_yes(answer: str) -> bool:
    return answer.lower()[:1] == 'y'


class Session:
    """
    A line-oriented conversation over one input and one output stream.

    say() prints (after template expansion, wrapping and paging), ask()
    returns a validated and converted answer no matter how many tries it
    takes, and choose() does the same for a menu of items.
    """

    def __init__(
            self,
            input: Optional[TextIO] = None,
            output: Optional[TextIO] = None,
            wrap_at: Optional[int] = None,
            page_at: Optional[int] = None,
            *,
            character_reader: Optional[CharacterReader] = None,
            use_color: bool = True,
            logger: Any = None,
            completion: Optional[TabCompletionHandler] = None,
            response_defaults: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.input: TextIO = input if input is not None else sys.stdin
        self.output: TextIO = output if output is not None else sys.stdout
        self.wrap_at = wrap_at
        self.page_at = page_at
        self.character_reader = character_reader or select_character_reader(self.input)
        self.use_color = use_color
        self.logger = logger
        self.completion_handler = completion
        self.response_defaults: Dict[str, Any] = dict(response_defaults or {})
        self.answer: Any = None
        self._readline_active = False
        self._renderer = TemplateRenderer(self._template_globals())

    def nested(self, **changes: Any) -> 'Session':
        """
        A new Session over the same streams and settings, for asking a
        question while another one is still pending.
        """
        settings: Dict[str, Any] = {
            'wrap_at': self.wrap_at,
            'page_at': self.page_at,
            'character_reader': self.character_reader,
            'use_color': self.use_color,
            'logger': self.logger,
            'completion': self.completion_handler,
            'response_defaults': self.response_defaults,
        }
        settings.update(changes)
        return self.__class__(self.input, self.output, **settings)

    # Public entry points ------------------------------------------------
    def say(self, statement: Any, context: Optional[Mapping[str, Any]] = None) -> None:
        """
        Print a statement. A statement ending in a space or tab stays on the
        current line (the stream is flushed); anything else ends with a newline.
        """
        statement = str(statement)
        if not statement:
            return

        statement = self.render(statement, context)
        if not statement:
            self.output.write("\n")
            return
        if self.wrap_at is not None:
            statement = wrap(statement, self.wrap_at)
        if self.page_at is not None:
            statement = page_print(statement, self.page_at, self.output, self._pause)
            if not statement:
                self.output.flush()
                return

        if statement[-1] in (' ', '\t'):
            self.output.write(statement)
            self.output.flush()
        else:
            self.output.write(statement if statement.endswith('\n') else statement + '\n')

    def ask(
            self,
            question: str,
            answer_type: Any = None,
            configure: Optional[Callable[[Question], Any]] = None,
    ) -> Any:
        """
        Ask a question and return the answer, converted to answer_type.

        The optional configure callable receives the Question before it is
        asked (validation, range, default, echo, confirm, responses ...).
        """
        q = Question(question, answer_type, configure, self.response_defaults)
        self.answer = AnswerPipeline(self, q).run()
        return self.answer

    def agree(self, yes_or_no_question: str, character: Any = None) -> bool:
        """Ask a yes/no question; "y", "yes", "n" and "no" are accepted."""
        def configure(q: Question) -> None:
            q.validate = AGREE_PATTERN
            q.responses['not_valid'] = 'Please enter "yes" or "no".'
            q.responses['ask_on_error'] = OnError.QUESTION
            q.character = character

        return self.ask(yes_or_no_question, _is_yes, configure)

    def choose(self, *items: Any, configure: Optional[Callable[[Menu], Any]] = None) -> Any:
        """
        Show a menu and return the selected item (or the result of its
        action). Shell menus return (item, details) when the item has no action.
        """
        menu = Menu(configure, self.response_defaults)
        if items:
            menu.choices(*items)
        if not menu.items:
            raise ConfigurationError("choose() needs at least one item", field='items')
        menu.prepare()

        selected = AnswerPipeline(self, menu).run()
        if menu.shell:
            name, details = selected
            if self.logger:
                self.logger.menu_select(name, True, details)
            self.answer = menu.select(name, details)
        else:
            if self.logger:
                self.logger.menu_select(menu.find(selected)[0], False)
            self.answer = menu.select(selected)
        return self.answer

    def color(self, text: Any, *styles: StyleSpec) -> str:
        return ColorSystem.color(text, styles, enabled=self.use_color)

    def list(self, items: Iterable[Any], mode: Any = ListMode.ROWS, option: Any = None) -> str:
        return list_items(items, mode, option, wrap_at=self.wrap_at)

    # Templates ----------------------------------------------------------
    def render(self, text: str, context: Optional[Mapping[str, Any]] = None) -> str:
        merged = {'answer': self.answer}
        merged.update(context or {})
        return self._renderer.render(text, merged)

    def _template_globals(self) -> Dict[str, Any]:
        names: Dict[str, Any] = {name: style.value for name, style in Style.__members__.items()}
        names['color'] = self.color
        names['list'] = self.list
        return names

    # Input --------------------------------------------------------------
    def get_response(self, question: Question) -> str:
        """
        Read a line or a single character, as the question asks for.
        Single characters are returned as one-character strings.
        """
        if question.character is None:
            if question.echo is True:
                return self._get_line(question)
            return self._get_masked_line(question)
        if question.character == 'getc':
            character = self.input.read(1)
            if character == '':
                raise EOFError("Input stream closed")
            return question.change_case(character)

        response = self._get_character()
        if question.echo is True:
            echo = response
        elif question.echo is not False:
            echo = str(question.echo)
        else:
            echo = ''
        self.say(f"{echo}\n")
        return question.change_case(response)

    def _get_character(self) -> str:
        character = self.character_reader.get_character(self.input)
        if character == '':
            raise EOFError("Input stream closed")
        return character

    def _get_line(self, question: Question) -> str:
        if self._readline_active:
            line = input()
        else:
            line = self.input.readline()
            if line == '':
                raise EOFError("Input stream closed")
        return question.change_case(question.remove_whitespace(line))

    def _get_masked_line(self, question: Question) -> str:
        line = ''
        while True:
            character = self.character_reader.get_character(self.input)
            if character == '':
                if not line:
                    raise EOFError("Input stream closed")
                break
            # carriage return (13) or newline (10) ends the line
            if ord(character) in (13, 10):
                break
            if character in BACKSPACES:
                if line:
                    line = line[:-1]
                    if question.echo is not False:
                        self.output.write('\b \b')
                        self.output.flush()
                continue
            line += character
            if question.echo is not False:
                self.output.write(str(question.echo))
                self.output.flush()
        self.say("\n")
        return question.change_case(question.remove_whitespace(line))

    @contextmanager
    def completion(self, question: Question) -> Iterator[None]:
        """Tab completion of the question's choices while it is asked."""
        handler = self.completion_handler
        enabled = (
            question.readline
            and handler is not None
            and question.character is None
            and question.echo is True
            and self.input is sys.stdin
            and self.input.isatty()
            and handler.run(question.selection(), first_word_only=bool(getattr(question, 'shell', False)))
        )
        self._readline_active = bool(enabled)
        try:
            yield
        finally:
            if enabled:
                handler.deactivate_completion()
            self._readline_active = False

    def _pause(self) -> None:
        self.nested(page_at=None).ask(PAGE_PROMPT)
