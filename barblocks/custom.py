"""Output of custom shell commands, plain or as JSON."""

from __future__ import annotations

import itertools
import json
import os
import subprocess
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from barblocks.blocks import State

DEFAULT_INTERVAL = 10
INVALID_JSON_TEXT = "Invalid JSON"


@dataclass
class CustomInput:
    """What a JSON-producing command asks the block to show."""

    icon: str = ""
    state: State = State.Idle
    text: str = ""
    short_text: str | None = None


def _invalid() -> CustomInput:
    return CustomInput(text=INVALID_JSON_TEXT, state=State.Critical)


def parse_input(text: str) -> CustomInput:
    """Parse a command's JSON output.

    Output that is not a valid object of the expected shape yields a critical
    ``Invalid JSON`` input.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return _invalid()
    if not isinstance(data, dict):
        return _invalid()

    icon = data.get("icon", "")
    body = data.get("text", "")
    short = data.get("short_text")
    raw_state = data.get("state", State.Idle.value)
    if not isinstance(icon, str) or not isinstance(body, str):
        return _invalid()
    if short is not None and not isinstance(short, str):
        return _invalid()
    if not isinstance(raw_state, str):
        return _invalid()
    try:
        state = State(raw_state)
    except ValueError:
        return _invalid()
    return CustomInput(icon=icon, state=state, text=body, short_text=short)


def choose_shell(shell: str | None = None) -> str:
    """The configured shell, else ``$SHELL``, else ``sh``."""
    if shell is not None:
        return shell
    return os.environ.get("SHELL") or "sh"


def command_cycle(command: str | None, cycle: Sequence[str] | None) -> Iterator[str]:
    """Endless iterator over the commands to run, advanced on each click."""
    if cycle is not None:
        commands = list(cycle)
    elif command is not None:
        commands = [command]
    else:
        raise ValueError("either 'command' or 'cycle' must be specified")
    if not commands:
        raise ValueError("'cycle' must not be empty")
    return itertools.cycle(commands)


def run_command(shell: str, cmd: str) -> str:
    """Run ``cmd`` with ``shell -c`` and return its trimmed standard output."""
    try:
        result = subprocess.run([shell, "-c", cmd], stdout=subprocess.PIPE, check=False)
    except OSError as exc:
        raise RuntimeError("failed to run command") from exc
    try:
        return result.stdout.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise RuntimeError("the output of command is invalid UTF-8") from exc


def _read_lines(process: subprocess.Popen[bytes]) -> Iterator[str]:
    assert process.stdout is not None
    try:
        for raw in process.stdout:
            if raw.endswith(b"\n"):
                raw = raw[:-1]
                if raw.endswith(b"\r"):
                    raw = raw[:-1]
            try:
                yield raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise RuntimeError("error reading line from child process") from exc
        process.wait()
        raise RuntimeError("child process exited unexpectedly")
    finally:
        process.stdout.close()


def stream_lines(shell: str, command: str | None) -> Iterator[str]:
    """Start a persistent command and yield each line it prints.

    The iterator raises ``RuntimeError`` once the command's output ends.
    """
    if command is None:
        raise ValueError("'command' must be specified when 'persistent' is set")
    try:
        process = subprocess.Popen([shell, "-c", command], stdout=subprocess.PIPE)
    except OSError as exc:
        raise RuntimeError("failed to run command") from exc
    return _read_lines(process)