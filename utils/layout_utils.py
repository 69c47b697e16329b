from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TextIO, Union

DEFAULT_WIDTH = 80


class ListMode(str, Enum):
    """
    Layouts understood by list_items().
    """
    ROWS = 'rows'
    INLINE = 'inline'
    COLUMNS_ACROSS = 'columns_across'
    COLUMNS_DOWN = 'columns_down'


def _mode(mode: Union[ListMode, str, None]) -> ListMode:
    if mode is None:
        return ListMode.ROWS
    try:
        return ListMode(mode.value if isinstance(mode, ListMode) else str(mode).lower())
    except ValueError:
        raise ValueError(f"Unknown list mode '{mode}'") from None


def list_items(
        items: Iterable[Any],
        mode: Union[ListMode, str, None] = ListMode.ROWS,
        option: Any = None,
        wrap_at: Optional[int] = None,
) -> str:
    """
    Lay out a list of items as a string.

    Modes:
      rows            one item per line (option is ignored)
      inline          a single line; the last two items are joined by
                      option (default " or "), the others by ", "
      columns_across  padded columns filled left to right; option is the
                      column count, otherwise derived from wrap_at (or 80)
      columns_down    same as columns_across, but filled top to bottom
    """
    items = [str(i) for i in items]
    mode = _mode(mode)

    if mode is ListMode.INLINE:
        separator = ' or ' if option is None else str(option)
        if not items:
            return ''
        if len(items) == 1:
            return items[0]
        return ', '.join(items[:-1]) + separator + items[-1]

    if mode in (ListMode.COLUMNS_ACROSS, ListMode.COLUMNS_DOWN):
        if not items:
            return ''
        max_length = max(len(i) for i in items)
        if option is None:
            limit = wrap_at or DEFAULT_WIDTH
            option = (limit + 2) // (max_length + 2)
        columns_count = max(1, int(option))
        padded = [i.ljust(max_length) for i in items]
        row_count = math.ceil(len(padded) / columns_count)

        if mode is ListMode.COLUMNS_ACROSS:
            rows: list[list[str]] = [[] for _ in range(row_count)]
            for index, item in enumerate(padded):
                rows[index // columns_count].append(item)
            return ''.join('  '.join(row) + '\n' for row in rows)

        columns: list[list[str]] = [[] for _ in range(columns_count)]
        for index, item in enumerate(padded):
            columns[index // row_count].append(item)
        out = []
        for index in range(len(columns[0])):
            out.append('  '.join(c[index] for c in columns if index < len(c)) + '\n')
        return ''.join(out)

    return ''.join(f"{i}\n" for i in items)


def wrap(text: str, limit: int) -> str:
    """
    Wrap every physical line of text at limit characters.

    A too-long run is broken at its last space at or before column limit
    (leading whitespace of the new line is dropped); a run with no such
    space is hard-broken at exactly column limit. Existing newlines are
    kept, only new ones are added.
    """
    if limit < 1:
        raise ValueError("wrap limit must be at least 1")
    long_run = re.compile(r'[^\n]{%d,}' % (limit + 1))
    wrapped = []
    for line in text.splitlines(keepends=True):
        match = long_run.search(line)
        while match is not None:
            run = match.group(0)
            index = run.rfind(' ', 1, limit + 1)
            if index >= 0:
                replacement = run[:index] + '\n' + run[index + 1:].lstrip(' \t')
            else:
                replacement = run[:limit] + '\n' + run[limit:]
            line = line[:match.start()] + replacement + line[match.end():]
            match = long_run.search(line)
        wrapped.append(line)
    return ''.join(wrapped)


def page_print(text: str, page_at: int, output: TextIO, pause: Callable[[], Any]) -> str:
    """
    Print text page_at lines at a time, calling pause() between pages.

    The final partial page is not printed but returned, so the caller can
    still apply its end-of-statement handling to it. A final page that is
    exactly page_at lines long is printed (and '' returned) only when it
    already ends with a newline; otherwise it is returned like a partial page.
    """
    if page_at < 1:
        raise ValueError("page limit must be at least 1")
    lines = text.splitlines(keepends=True)
    while len(lines) >= page_at:
        page, rest = lines[:page_at], lines[page_at:]
        if not rest and not page[-1].endswith('\n'):
            break
        lines = rest
        output.write(''.join(page))
        if not lines:
            break
        output.write('\n')
        pause()
        output.write('\n')
    return ''.join(lines)
