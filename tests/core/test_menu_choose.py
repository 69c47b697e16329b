from __future__ import annotations

import os
import sys
from io import StringIO

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from base_classes import ConfigurationError
from core.menu import Menu, letter_index
from core.session import Session
from utils.input_utils import StreamCharacterReader


def make_session(script: str = ''):
    out = StringIO()
    session = Session(StringIO(script), out, character_reader=StreamCharacterReader())
    return session, out


def test_choose_by_number():
    session, out = make_session("2\n")
    assert session.choose("apple", "banana") == "banana"
    assert out.getvalue() == "1. apple\n2. banana\n?  "


def test_choose_by_name_prefix():
    session, _ = make_session("ban\n")
    assert session.choose("apple", "banana") == "banana"


def test_ambiguous_prefix_is_retried():
    session, out = make_session("b\n1\n")
    assert session.choose("banana", "blueberry") == "banana"
    assert "Ambiguous choice." in out.getvalue()


def test_unknown_reply_lists_options():
    session, out = make_session("9\n1\n")
    assert session.choose("apple", "banana") == "apple"
    assert "You must choose one of ['1', '2', 'apple', 'banana']." in out.getvalue()


def test_header_and_prompt():
    def configure(menu):
        menu.header = "Fruit"
        menu.prompt = "Pick one:  "

    session, out = make_session("1\n")
    session.choose("apple", "banana", configure=configure)
    assert out.getvalue() == "Fruit:\n1. apple\n2. banana\nPick one:  "


def test_one_line_layout():
    session, out = make_session("apple\n")
    assert session.choose("apple", "banana", configure=lambda m: setattr(m, 'layout', 'one_line')) == "apple"
    assert out.getvalue() == "? (apple or banana)  "


def test_letter_index():
    def configure(menu):
        menu.index = 'letter'

    session, out = make_session("b\n")
    assert session.choose("apple", "banana", configure=configure) == "banana"
    assert out.getvalue().startswith("a. apple\nb. banana\n")


def test_literal_index_marker():
    session, out = make_session("apple\n")
    session.choose("apple", "banana", configure=lambda m: setattr(m, 'index', '*'))
    assert out.getvalue().startswith("* apple\n* banana\n")


def test_select_by_name_only():
    def configure(menu):
        menu.select_by = 'name'

    session, out = make_session("1\nbanana\n")
    assert session.choose("apple", "banana", configure=configure) == "banana"
    assert "You must choose one of ['apple', 'banana']." in out.getvalue()


def test_item_action_result():
    def configure(menu):
        menu.choice("add", lambda name: f"ran {name}")
        menu.choice("quit")

    session, _ = make_session("add\n")
    assert session.choose(configure=configure) == "ran add"


def test_nil_on_handled():
    def configure(menu):
        menu.choice("add", lambda name: "ignored")
        menu.nil_on_handled = True

    session, _ = make_session("1\n")
    assert session.choose(configure=configure) is None


def test_shell_mode_returns_details():
    session, _ = make_session("lo  file.txt now\n")
    result = session.choose("load", "save", configure=lambda m: setattr(m, 'shell', True))
    assert result == ("load", "file.txt now")


def test_shell_mode_action_receives_details():
    def configure(menu):
        menu.shell = True
        menu.choice("save", lambda name, details: f"{name}:{details}")

    session, out = make_session("zz\nsave a.txt\n")
    assert session.choose("load", configure=configure) == "save:a.txt"
    assert "You must choose one of ['save', 'load']." in out.getvalue()


def test_empty_menu_is_fatal():
    session, _ = make_session()
    with pytest.raises(ConfigurationError):
        session.choose()


def test_unknown_selection_raises_lookup_error():
    menu = Menu()
    menu.choices("a", "b")
    with pytest.raises(LookupError):
        menu.select("c")


def test_shell_answer_splits_first_word():
    menu = Menu(lambda m: m.choices("list", "load"))
    assert menu.shell_answer("lis -a -l") == ("list", "-a -l")


@pytest.mark.parametrize("position,expected", [(0, 'a'), (25, 'z'), (26, 'aa'), (27, 'ab')])
def test_letter_index_sequence(position, expected):
    assert letter_index(position) == expected


@pytest.mark.parametrize("line,expected", [
    ("e\n", ("exit", "")),
    ("h foo bar\n", ("help", "foo bar")),
    ("s\n", ("set", "")),
])
def test_shell_prefix_resolution(line, expected):
    session, _ = make_session(line)
    assert session.choose("exit", "help", "set", configure=lambda m: setattr(m, 'shell', True)) == expected


def test_shell_unknown_command_is_retried():
    session, out = make_session("z\nexit\n")
    assert session.choose("exit", "help", "set", configure=lambda m: setattr(m, 'shell', True)) == ("exit", "")
    assert out.getvalue().count("You must choose one of") == 1


def test_unknown_flow_is_fatal():
    session, _ = make_session("1\n")
    with pytest.raises(ConfigurationError):
        session.choose("a", configure=lambda m: setattr(m, 'flow', 'spiral'))
