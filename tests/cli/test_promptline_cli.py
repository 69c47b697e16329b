from __future__ import annotations

import os
import sys
from pathlib import Path

from click.testing import CliRunner

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from main import cli


def test_say_joins_words():
    result = CliRunner().invoke(cli, ['say', 'hello', 'world'])
    assert result.exit_code == 0, result.output
    assert result.output == "hello world\n"


def test_say_wraps():
    result = CliRunner().invoke(cli, ['--wrap-at', '5', 'say', 'aaa bbb'])
    assert result.exit_code == 0, result.output
    assert result.output == "aaa\nbbb\n"


def test_ask_integer_retries_until_valid():
    result = CliRunner().invoke(cli, ['ask', 'Age?', '--type', 'int'], input="x\n7\n")
    assert result.exit_code == 0, result.output
    assert "You must enter a valid integer." in result.output
    assert result.output.endswith("7\n")


def test_ask_with_default_and_range():
    result = CliRunner().invoke(
        cli, ['ask', 'N?', '-t', 'float', '--default', '2.5', '--above', '0', '--below', '10'], input="99\n\n"
    )
    assert result.exit_code == 0, result.output
    assert "expected range (> 0.0 and < 10.0)" in result.output
    assert result.output.endswith("2.5\n")


def test_ask_end_of_input_exits_with_error():
    result = CliRunner().invoke(cli, ['ask', 'Name?'], input="")
    assert result.exit_code == 1


def test_agree_exit_status():
    runner = CliRunner()
    assert runner.invoke(cli, ['agree', 'Go?'], input="yes\n").exit_code == 0
    assert runner.invoke(cli, ['agree', 'Go?'], input="maybe\nno\n").exit_code == 1


def test_choose_prints_selection():
    result = CliRunner().invoke(cli, ['choose', 'apple', 'banana'], input="2\n")
    assert result.exit_code == 0, result.output
    assert result.output == "1. apple\n2. banana\n?  banana\n"


def test_choose_shell_prints_details():
    result = CliRunner().invoke(cli, ['choose', '--shell', 'load', 'save'], input="sa notes.txt\n")
    assert result.exit_code == 0, result.output
    assert result.output.endswith("save\tnotes.txt\n")


def test_list_modes():
    runner = CliRunner()
    assert runner.invoke(cli, ['list', 'a', 'b', 'c', '--mode', 'inline']).output == "a, b or c"
    assert runner.invoke(cli, ['list', 'a', 'bb', 'c', 'd', '-m', 'columns_down', '-o', '2']).output == "a   c \nbb  d \n"


def test_list_rejects_bad_column_count():
    result = CliRunner().invoke(cli, ['list', 'a', '-m', 'columns_across', '-o', 'two'])
    assert result.exit_code == 2


def test_custom_config_file(tmp_path: Path):
    cfg_path = tmp_path / "cfg.ini"
    cfg_path.write_text("[DEFAULT]\nwrap_at = 5\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ['--conf', str(cfg_path), 'say', 'aaa bbb'])
    assert result.output == "aaa\nbbb\n"


def test_missing_config_file():
    result = CliRunner().invoke(cli, ['--conf', 'does-not-exist.ini', 'say', 'x'])
    assert result.exit_code == 1
    assert "Could not find the custom config file" in result.output
