from __future__ import annotations

import os
import sys
from io import StringIO
from pathlib import Path

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from config_manager import ConfigManager
from core.question import OnError
from core.session_builder import SessionBuilder


@pytest.mark.parametrize("raw,expected", [
    ('none', None),
    ('', None),
    ('12', 12),
    ('yes', True),
    ('off', False),
    ('"?  "', '?  '),
    ('[a, b]', ['a', 'b']),
    ('text', 'text'),
])
def test_fix_values(raw, expected):
    assert ConfigManager.fix_values(raw) == expected


def test_missing_custom_config_is_an_error(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        ConfigManager(str(tmp_path / "nope.ini"))


def test_session_config_overrides_and_integers(tmp_path: Path):
    cfg_path = tmp_path / "cfg.ini"
    cfg_path.write_text("[DEFAULT]\nwrap_at = 60\npage_at = lots\n", encoding="utf-8")
    cfg = ConfigManager(str(cfg_path)).create_session_config()
    assert cfg.get_int('DEFAULT', 'wrap_at') == 60
    with pytest.raises(ValueError):
        cfg.get_int('DEFAULT', 'page_at')
    cfg.set_option('wrap_at', 30)
    assert cfg.get_int('DEFAULT', 'wrap_at') == 30
    assert cfg.effective()['wrap_at'] == 30


def test_builder_applies_config_file(tmp_path: Path):
    cfg_path = tmp_path / "cfg.ini"
    cfg_path.write_text(
        "[DEFAULT]\nwrap_at = 40\npage_at = 20\ncolors = false\ndefault_ask_on_error = question\n",
        encoding="utf-8",
    )
    session = SessionBuilder(ConfigManager(str(cfg_path))).build(StringIO(), StringIO())
    assert session.wrap_at == 40
    assert session.page_at == 20
    assert session.use_color is False
    assert session.response_defaults['ask_on_error'] is OnError.QUESTION
    assert session.character_reader.mode == 'stream'


def test_builder_overrides_win_and_none_is_ignored():
    session = SessionBuilder(ConfigManager()).build(StringIO(), StringIO(), wrap_at=25, page_at=None)
    assert session.wrap_at == 25
    assert session.utils.config.get_option('DEFAULT', 'wrap_at') == 25


def test_built_session_asks_with_default_error_suffix():
    out = StringIO()
    session = SessionBuilder(ConfigManager()).build(StringIO("x\n3\n"), out, wrap_at=None)
    assert session.ask("N?  ", int) == 3
    assert out.getvalue() == "N?  You must enter a valid integer.\n?  "
