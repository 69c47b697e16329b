from __future__ import annotations

from typing import Any, Optional, TextIO

from config_manager import ConfigManager, SessionConfig
from core.question import OnError
from core.session import Session
from utils.input_utils import select_character_reader
from utils_handler import UtilsHandler


class SessionBuilder:
    """
    Builds fully configured sessions from a ConfigManager.
    """

    def __init__(self, config_manager: ConfigManager):
        self.config_manager = config_manager

    def build(self, input: Optional[TextIO] = None, output: Optional[TextIO] = None, **overrides: Any):
        session_config: SessionConfig = self.config_manager.create_session_config(
            {k: v for k, v in overrides.items() if v is not None}
        )
        utils = UtilsHandler(session_config)

        response_defaults = {}
        ask_on_error = session_config.get_option('DEFAULT', 'default_ask_on_error', fallback=None)
        if ask_on_error is not None:
            response_defaults['ask_on_error'] = OnError.QUESTION if ask_on_error == OnError.QUESTION.value else str(ask_on_error)

        reader_mode = session_config.get_option('DEFAULT', 'character_mode', fallback='auto')
        session = Session(
            input,
            output,
            wrap_at=session_config.get_int('DEFAULT', 'wrap_at'),
            page_at=session_config.get_int('DEFAULT', 'page_at'),
            character_reader=select_character_reader(input, reader_mode),
            use_color=bool(session_config.get_option('DEFAULT', 'colors', fallback=True)),
            logger=utils.logging,
            completion=utils.tab_completion,
            response_defaults=response_defaults,
        )
        session.config = session_config
        session.utils = utils

        utils.logging.settings({
            'wrap_at': session.wrap_at,
            'page_at': session.page_at,
            'colors': session.use_color,
            'character_mode': session.character_reader.mode,
        })
        return session
