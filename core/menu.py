from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from base_classes import ConfigurationError
from core.question import Question
from utils.layout_utils import ListMode
from utils.tab_completion_utils import complete

# Layout templates; rendered by Session.say() with the menu's template context.
LAYOUTS: Dict[str, str] = {
    'list': "<% if header %><%= header %>:\n<% endif %><%= list(menu, flow, list_option) %><%= prompt %>",
    'one_line': "<% if header %><%= header %>:  <% endif %><% if prompt.strip() %><%= prompt.rstrip() %> <% endif %>(<%= list(menu, flow, list_option) %>)<%= prompt_padding %>",
    'menu_only': "<%= list(menu, flow, list_option) %><%= prompt %>",
}

INDEX_STYLES = ('number', 'letter', 'none')
SELECT_BY = ('index_or_name', 'index', 'name')


def letter_index(position: int) -> str:
    """0 -> 'a', 25 -> 'z', 26 -> 'aa', 27 -> 'ab' ..."""
    letters = ''
    position += 1
    while position > 0:
        position, rem = divmod(position - 1, 26)
        letters = chr(ord('a') + rem) + letters
    return letters


class Menu(Question):
    """
    A Question whose answer is one of a list of items.

    Items are added with choice()/choices(); each may carry an action that is
    run when selected. In shell mode the reply is a command line: the first
    word picks an item by unique prefix and the rest of the line is passed
    along as details.
    """

    def __init__(
            self,
            configure: Optional[Callable[['Menu'], Any]] = None,
            response_defaults: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.items: List[Tuple[str, Optional[Callable]]] = []
        self.index_suffix = '. '
        self._index: Any = 'number'
        self.select_by = 'index_or_name'
        self.flow: Any = ListMode.ROWS
        self.list_option: Any = None
        self.header: Optional[str] = None
        self._layout = 'list'
        self.shell = False
        self.nil_on_handled = False
        super().__init__('?  ', None, configure, response_defaults)

    # Configuration ------------------------------------------------------
    @property
    def index(self) -> Any:
        return self._index

    @index.setter
    def index(self, style: Any) -> None:
        self._index = style
        if style == 'none' or style not in INDEX_STYLES:
            self.index_suffix = ' '

    @property
    def layout(self) -> str:
        return self._layout

    @layout.setter
    def layout(self, new_layout: str) -> None:
        self._layout = new_layout
        if new_layout in ('one_line', 'menu_only'):
            self.index = 'none'
            self.flow = ListMode.INLINE

    def choice(self, name: Any, action: Optional[Callable] = None) -> None:
        self.items.append((str(name), action))

    def choices(self, *names: Any, action: Optional[Callable] = None) -> None:
        for name in names:
            self.choice(name, action)

    def check(self) -> None:
        super().check()
        if not self.items:
            raise ConfigurationError("A menu needs at least one item", field='items')
        if self.select_by not in SELECT_BY:
            raise ConfigurationError(f"Unknown select_by '{self.select_by}'", field='select_by')
        if self._layout not in LAYOUTS and '<%' not in self._layout:
            raise ConfigurationError(f"Unknown layout '{self._layout}'", field='layout')
        if not isinstance(self.index, str):
            raise ConfigurationError(f"Unknown index style {self.index!r}", field='index')
        try:
            ListMode(self.flow)
        except ValueError:
            raise ConfigurationError(f"Unknown flow '{self.flow}'", field='flow') from None

    # Answers ------------------------------------------------------------
    def names(self) -> List[str]:
        return [name for name, _ in self.items]

    def indices(self) -> List[str]:
        if self.index == 'letter':
            return [letter_index(i) for i in range(len(self.items))]
        return [str(i + 1) for i in range(len(self.items))]

    def options(self) -> List[str]:
        """The replies accepted in normal (non-shell) mode."""
        if self.select_by == 'index':
            return self.indices()
        if self.select_by == 'name':
            return self.names()
        return self.indices() + self.names()

    def selection(self) -> List[str]:
        return self.names() if self.shell else self.options()

    def shell_answer(self, command: str) -> Tuple[str, str]:
        """Split a command line into (item name, remainder of the line)."""
        words = command.split()
        first_word = words[0] if words else ''
        name = complete(self.names(), first_word)
        details = re.sub(r'^\s*' + re.escape(first_word) + r'\s*', '', command, count=1)
        return name, details

    def prepare(self) -> None:
        """Set the answer type for the current mode before asking."""
        self.answer_type = self.shell_answer if self.shell else self.options()

    def type_name(self) -> str:
        return 'command' if self.shell else 'choice'

    def select(self, selection: str, details: Optional[str] = None) -> Any:
        """Find the selected item and run its action, or return its name."""
        name, action = self.find(selection)
        if action is None:
            return (name, details) if self.shell else name
        result = action(name, details) if self.shell else action(name)
        return None if self.nil_on_handled else result

    def find(self, selection: str) -> Tuple[str, Optional[Callable]]:
        if self.select_by != 'name':
            if self.index == 'letter':
                letters = self.indices()
                if selection in letters:
                    return self.items[letters.index(selection)]
            elif selection.isdigit() and 0 < int(selection) <= len(self.items):
                return self.items[int(selection) - 1]
        for item in self.items:
            if item[0] == selection:
                return item
        raise LookupError(f"No menu item '{selection}'")

    # Presentation -------------------------------------------------------
    def display_items(self) -> List[str]:
        if self.index == 'number':
            labels = [str(i + 1) for i in range(len(self.items))]
        elif self.index == 'letter':
            labels = self.indices()
        elif self.index == 'none':
            return self.names()
        else:
            labels = [str(self.index)] * len(self.items)
        return [f"{label}{self.index_suffix}{name}" for label, (name, _) in zip(labels, self.items)]

    def statement(self) -> str:
        return LAYOUTS.get(self._layout, self._layout)

    def template_context(self) -> Dict[str, Any]:
        prompt = self.prompt or ''
        return {
            'question': prompt,
            'menu': self.display_items(),
            'header': self.header,
            'prompt': prompt,
            'prompt_padding': prompt[len(prompt.rstrip()):],
            'flow': self.flow,
            'list_option': self.list_option,
        }
