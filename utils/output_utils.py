from __future__ import annotations

import os
import platform
import ctypes
import sys
from enum import Enum
from typing import Any, Iterable, Optional, TextIO, Union


class OutputLevel(Enum):
    """
    Message output levels, in ascending order of importance.
    """
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4


class Style(Enum):
    """
    The closed set of ANSI sequences known by name.
    Aliases (RESET, UNDERSCORE) resolve to the same member.
    """
    CLEAR = '\033[0m'
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DARK = '\033[2m'
    UNDERLINE = '\033[4m'
    UNDERSCORE = '\033[4m'
    BLINK = '\033[5m'
    REVERSE = '\033[7m'
    CONCEALED = '\033[8m'

    BLACK = '\033[30m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    ON_BLACK = '\033[40m'
    ON_RED = '\033[41m'
    ON_GREEN = '\033[42m'
    ON_YELLOW = '\033[43m'
    ON_BLUE = '\033[44m'
    ON_MAGENTA = '\033[45m'
    ON_CYAN = '\033[46m'
    ON_WHITE = '\033[47m'


StyleSpec = Union[Style, str]


class ColorSystem:
    """
    Handles ANSI color and style sequences, including (attempted) Windows support.
    Symbolic names map to the Style table; raw escape sequences pass through.
    """

    @staticmethod
    def enable_ansi_on_windows() -> bool:
        """
        Enables ANSI escape code support on Windows 10+ if possible.
        Returns True if successful or if not on Windows; False otherwise.
        """
        if platform.system() != 'Windows':
            return True

        try:
            kernel32 = ctypes.windll.kernel32
            # 0x0001 (ENABLE_PROCESSED_OUTPUT) | 0x0002 (ENABLE_WRAP_AT_EOL_OUTPUT)
            # 0x0004 (ENABLE_VIRTUAL_TERMINAL_PROCESSING)
            mode = 0x0001 | 0x0002 | 0x0004
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), mode)
            return True
        except Exception:
            return False

    @staticmethod
    def supports_color(stream: Optional[TextIO] = None) -> bool:
        """
        Checks if the environment is set up for color output.
        Considers NO_COLOR, TTY detection, and terminal type.
        """
        stream = stream or sys.stdout
        if os.environ.get('NO_COLOR'):
            return False
        if not hasattr(stream, 'isatty') or not stream.isatty():
            return False
        term = os.environ.get('TERM', '').lower()
        if term in ('dumb', 'unknown', ''):
            return False
        return True

    @staticmethod
    def resolve(style: StyleSpec) -> str:
        """
        Turn a Style member, a symbolic name ('red', 'on_blue') or a raw
        escape sequence into the escape sequence itself.
        """
        if isinstance(style, Style):
            return style.value
        if not isinstance(style, str):
            raise TypeError(f"Style must be a Style or a string, not {type(style).__name__}")
        if style.startswith('\033'):
            return style
        try:
            return Style[style.strip().upper()].value
        except KeyError:
            raise ValueError(f"Unknown style '{style}'") from None

    @classmethod
    def color(cls, text: Any, styles: Iterable[StyleSpec], enabled: bool = True) -> str:
        """
        Wrap text in the concatenated style sequences and one trailing CLEAR.
        Returns the text unchanged when color is disabled.
        """
        codes = ''.join(cls.resolve(s) for s in styles)
        if not enabled:
            return str(text)
        return f"{codes}{text}{Style.CLEAR.value}"


class OutputHandler:
    """
    Prints status messages to a stream with level-based styling, respecting
    an overall output level. Used by the CLI and the logging mirror; the
    conversation itself goes through Session.say().
    """

    level_styles = {
        OutputLevel.DEBUG: (Style.DARK,),
        OutputLevel.INFO: (),
        OutputLevel.WARNING: (Style.YELLOW,),
        OutputLevel.ERROR: (Style.RED, Style.BOLD),
    }

    def __init__(self, config: Any, stream: Optional[TextIO] = None) -> None:
        """
        Expected config usage:
          - config.get_option('DEFAULT', 'colors', fallback=True) => bool
          - config.get_option('DEFAULT', 'output_level', fallback='INFO') => str
        """
        self.config = config
        self._stream: TextIO = stream or sys.stderr

        self._color_enabled = bool(
            config.get_option('DEFAULT', 'colors', fallback=True)
            and ColorSystem.supports_color(self._stream)
        )
        if self._color_enabled:
            ColorSystem.enable_ansi_on_windows()

        self.level = OutputLevel.INFO
        level_str = config.get_option('DEFAULT', 'output_level', fallback='INFO')
        try:
            self.level = OutputLevel[str(level_str).upper()]
        except KeyError:
            self.warning(f"Invalid output level '{level_str}', using INFO")

    def write(self, message: Any = '', level: OutputLevel = OutputLevel.INFO, end: str = '\n') -> None:
        if level.value < self.level.value:
            return
        msg_str = str(message)
        styles = self.level_styles.get(level, ())
        if styles:
            msg_str = ColorSystem.color(msg_str, styles, enabled=self._color_enabled)
        print(msg_str, end=end, file=self._stream, flush=True)

    def debug(self, message: Any, **kwargs) -> None:
        self.write(message, level=OutputLevel.DEBUG, **kwargs)

    def info(self, message: Any, **kwargs) -> None:
        self.write(message, level=OutputLevel.INFO, **kwargs)

    def warning(self, message: Any, **kwargs) -> None:
        self.write(message, level=OutputLevel.WARNING, **kwargs)

    def error(self, message: Any, **kwargs) -> None:
        self.write(message, level=OutputLevel.ERROR, **kwargs)
