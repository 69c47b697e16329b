from __future__ import annotations

import os
import sys
from io import StringIO

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from config_manager import ConfigManager
from utils.output_utils import ColorSystem, OutputHandler, OutputLevel, Style


def test_color_wraps_text_in_sequences_and_one_clear():
    assert ColorSystem.color('hi', [Style.RED, Style.BOLD]) == "\033[31m\033[1mhi\033[0m"


def test_color_accepts_names_and_raw_sequences():
    assert ColorSystem.color('x', ['on_blue']) == "\033[44mx\033[0m"
    assert ColorSystem.color('x', [' Bold ']) == "\033[1mx\033[0m"
    assert ColorSystem.color('x', ['\033[38;5;208m']) == "\033[38;5;208mx\033[0m"


def test_color_disabled_returns_plain_text():
    assert ColorSystem.color(42, [Style.GREEN], enabled=False) == "42"


def test_aliases_share_sequences():
    assert Style.RESET is Style.CLEAR
    assert Style.UNDERSCORE is Style.UNDERLINE
    assert ColorSystem.resolve('underscore') == "\033[4m"


def test_unknown_style_is_rejected_even_when_disabled():
    with pytest.raises(ValueError):
        ColorSystem.color('x', ['sparkly'], enabled=False)
    with pytest.raises(TypeError):
        ColorSystem.resolve(31)


def test_supports_color_needs_a_terminal(monkeypatch):
    monkeypatch.delenv('NO_COLOR', raising=False)
    assert ColorSystem.supports_color(StringIO()) is False


def test_output_handler_respects_level():
    cfg = ConfigManager().create_session_config({'colors': False, 'output_level': 'WARNING'})
    buf = StringIO()
    out = OutputHandler(cfg, stream=buf)
    out.info('quiet')
    out.warning('loud')
    out.error('louder')
    assert buf.getvalue() == "loud\nlouder\n"
    assert out.level is OutputLevel.WARNING


def test_output_handler_invalid_level_falls_back_to_info():
    cfg = ConfigManager().create_session_config({'colors': False, 'output_level': 'chatty'})
    buf = StringIO()
    out = OutputHandler(cfg, stream=buf)
    assert out.level is OutputLevel.INFO
    assert "Invalid output level 'chatty'" in buf.getvalue()
