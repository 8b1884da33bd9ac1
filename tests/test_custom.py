import sys
from itertools import islice
from unittest import mock

import pytest

from barblocks.blocks import State
from barblocks.custom import (
    CustomInput,
    choose_shell,
    command_cycle,
    parse_input,
    run_command,
    stream_lines,
)

PY = sys.executable


def test_parse_input_documented_example():
    parsed = parse_input(
        '{"icon":"weather_thunder","state":"Critical", "text": "Danger!"}'
    )
    assert parsed == CustomInput(
        icon="weather_thunder", state=State.Critical, text="Danger!", short_text=None
    )


def test_parse_input_defaults():
    assert parse_input("{}") == CustomInput()


def test_parse_input_short_text():
    parsed = parse_input('{"text": "long", "short_text": "s"}')
    assert (parsed.text, parsed.short_text) == ("long", "s")


@pytest.mark.parametrize(
    "text",
    ["not json", "[1, 2]", '{"state": "Bogus"}', '{"text": 5}', '{"icon": null}'],
)
def test_parse_input_invalid(text):
    parsed = parse_input(text)
    assert parsed.text == "Invalid JSON"
    assert parsed.state is State.Critical


def test_choose_shell_prefers_config():
    with mock.patch.dict("os.environ", {"SHELL": "/bin/zsh"}):
        assert choose_shell("/bin/bash") == "/bin/bash"
        assert choose_shell(None) == "/bin/zsh"


def test_choose_shell_falls_back_to_sh():
    with mock.patch.dict("os.environ", {}, clear=True):
        assert choose_shell() == "sh"


def test_command_cycle_single_command():
    assert list(islice(command_cycle("uname -r", None), 3)) == ["uname -r"] * 3


def test_command_cycle_prefers_cycle():
    cmds = ["echo ON", "echo OFF"]
    assert list(islice(command_cycle("ignored", cmds), 4)) == cmds + cmds


def test_command_cycle_requires_something():
    with pytest.raises(ValueError):
        command_cycle(None, None)
    with pytest.raises(ValueError):
        command_cycle(None, [])


def test_run_command_trims_output():
    assert run_command(PY, "print('  hello  ')") == "hello"


def test_run_command_invalid_utf8():
    with pytest.raises(RuntimeError, match="UTF-8"):
        run_command(PY, "import sys; sys.stdout.buffer.write(b'\\xff')")


def test_run_command_missing_shell():
    with pytest.raises(RuntimeError, match="failed to run command"):
        run_command("/nonexistent/shell/binary", "true")


def test_stream_lines_yields_then_fails():
    lines = stream_lines(PY, "print('a'); print('b')")
    assert next(lines) == "a"
    assert next(lines) == "b"
    with pytest.raises(RuntimeError, match="exited"):
        next(lines)


def test_stream_lines_requires_command():
    with pytest.raises(ValueError):
        stream_lines(PY, None)