# input_utils.py
from __future__ import annotations

import subprocess
import sys
from enum import Enum
from typing import Optional, TextIO, Union

from base_classes import CharacterReader


class CharacterMode(Enum):
    """
    How single characters are obtained from the input stream.
    """
    AUTO = 'auto'        # detect once from the platform and stream
    STREAM = 'stream'    # read straight from the stream (scripted input)


class StreamCharacterReader(CharacterReader):
    """
    Reads the next character straight from the stream. Used whenever the
    input is not an interactive terminal, which includes scripted tests.
    """

    mode = 'stream'

    def get_character(self, stream: TextIO) -> str:
        return stream.read(1)


class TermiosCharacterReader(CharacterReader):
    """
    Unix savvy getc(). (First choice.)
    Clears ECHO and ICANON for exactly one read of the stream.
    """

    mode = 'termios'

    def get_character(self, stream: TextIO) -> str:
        import termios

        fd = stream.fileno()
        old_settings = termios.tcgetattr(fd)
        new_settings = list(old_settings)
        new_settings[3] = new_settings[3] & ~(termios.ECHO | termios.ICANON)
        new_settings[6] = list(new_settings[6])
        new_settings[6][termios.VMIN] = 1
        new_settings[6][termios.VTIME] = 0
        try:
            termios.tcsetattr(fd, termios.TCSANOW, new_settings)
            return stream.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSANOW, old_settings)


class SttyCharacterReader(CharacterReader):
    """
    Unix savvy getc(). (Second choice.)
    Requires the external "stty" program.
    """

    mode = 'stty'

    def get_character(self, stream: TextIO) -> str:
        state = subprocess.run(['stty', '-g'], stdin=stream, capture_output=True, text=True, check=True).stdout.strip()
        try:
            subprocess.run(['stty', 'raw', '-echo', 'cbreak'], stdin=stream, check=True)
            return stream.read(1)
        finally:
            subprocess.run(['stty', state], stdin=stream, check=False)


class MsvcrtCharacterReader(CharacterReader):
    """
    Windows savvy getc().
    Reads from the console, not from the given stream.
    """

    mode = 'msvcrt'

    def get_character(self, stream: TextIO) -> str:
        import msvcrt

        return msvcrt.getwch()


def _is_terminal(stream: TextIO) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


def select_character_reader(
        stream: Optional[TextIO] = None,
        mode: Union[CharacterMode, str, None] = CharacterMode.AUTO,
) -> CharacterReader:
    """
    Pick the character reader for this platform and stream. Done once per
    Session; tests inject a reader or use CharacterMode.STREAM instead.
    """
    stream = stream if stream is not None else sys.stdin
    mode = CharacterMode(mode.value if isinstance(mode, CharacterMode) else (mode or 'auto').lower())

    if mode is CharacterMode.STREAM or not _is_terminal(stream):
        return StreamCharacterReader()
    if sys.platform.startswith('win'):
        return MsvcrtCharacterReader()
    try:
        import termios  # noqa: F401
        return TermiosCharacterReader()
    except ImportError:
        return SttyCharacterReader()
