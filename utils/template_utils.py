from __future__ import annotations

from typing import Any, Mapping, Optional

from jinja2 import Environment, StrictUndefined

TAG_START = '<%'


class TemplateRenderer:
    """
    Expands the inline tags embedded in prompt and confirmation text.

    Syntax:
      <%= expression %>     insert the value of an expression
      <% if answer %>...<% endif %>   control blocks
      <%# comment %>        dropped from the output

    Expressions only see the names in the context mapping they are given
    (typically: question, answer, color, list and the style constants).
    Text without any tag is returned unchanged.
    """

    def __init__(self, globals_: Optional[Mapping[str, Any]] = None) -> None:
        self._env = Environment(
            block_start_string='<%',
            block_end_string='%>',
            variable_start_string='<%=',
            variable_end_string='%>',
            comment_start_string='<%#',
            comment_end_string='%>',
            keep_trailing_newline=True,
            autoescape=False,
            undefined=StrictUndefined,
        )
        if globals_:
            self._env.globals.update(globals_)
        self._cache: dict[str, Any] = {}

    @staticmethod
    def has_tags(text: str) -> bool:
        return TAG_START in text

    def render(self, text: str, context: Optional[Mapping[str, Any]] = None) -> str:
        if not self.has_tags(text):
            return text
        template = self._cache.get(text)
        if template is None:
            template = self._env.from_string(text)
            self._cache[text] = template
        return template.render(dict(context or {}))
