"""Block registry, shared block states and the common per-block configuration."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class BlockType(enum.Enum):
    """Every block the bar knows by name."""

    apt = "apt"
    backlight = "backlight"
    battery = "battery"
    bluetooth = "bluetooth"
    cpu = "cpu"
    custom = "custom"
    custom_dbus = "custom_dbus"
    disk_space = "disk_space"
    dnf = "dnf"
    docker = "docker"
    external_ip = "external_ip"
    focused_window = "focused_window"
    github = "github"
    hueshift = "hueshift"
    kdeconnect = "kdeconnect"
    load = "load"
    maildir = "maildir"
    menu = "menu"
    memory = "memory"
    music = "music"
    net = "net"
    notify = "notify"
    notmuch = "notmuch"
    nvidia_gpu = "nvidia_gpu"
    pacman = "pacman"
    pomodoro = "pomodoro"
    rofication = "rofication"
    sound = "sound"
    speedtest = "speedtest"
    keyboard_layout = "keyboard_layout"
    taskwarrior = "taskwarrior"
    temperature = "temperature"
    time = "time"
    toggle = "toggle"
    uptime = "uptime"
    watson = "watson"
    weather = "weather"
    xrandr = "xrandr"


class State(enum.Enum):
    """The visual state of a block's widget."""

    Idle = "Idle"
    Info = "Info"
    Good = "Good"
    Warning = "Warning"
    Critical = "Critical"


def parse_block_type(name: str) -> BlockType:
    """Look up a block by the name used in the configuration file."""
    if not isinstance(name, str):
        raise ValueError("expected a block name")
    try:
        return BlockType(name)
    except ValueError:
        raise ValueError(f"Unknown block '{name}'") from None


_COMMON_FIELDS = (
    "block",
    "click",
    "signal",
    "theme_overrides",
    "icons_format",
    "error_interval",
    "error_format",
)

DEFAULT_ERROR_INTERVAL = 5


@dataclass
class CommonConfig:
    """Settings shared by every block, independent of its type."""

    block: BlockType
    click: list[dict[str, Any]] = field(default_factory=list)
    signal: int | None = None
    icons_format: str | None = None
    theme_overrides: dict[str, str] | None = None
    error_interval: int = DEFAULT_ERROR_INTERVAL
    error_format: str | None = None


def _optional_str(table: Mapping[str, Any], key: str) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Configuration error: '{key}' must be a string")
    return value


def _build_common(table: Mapping[str, Any]) -> CommonConfig:
    if "block" not in table:
        raise ValueError("Configuration error: missing field 'block'")
    block = parse_block_type(table["block"])

    click = table.get("click", [])
    if not isinstance(click, list) or not all(isinstance(c, Mapping) for c in click):
        raise ValueError("Configuration error: 'click' must be a list of tables")

    signal = table.get("signal")
    if signal is not None and (isinstance(signal, bool) or not isinstance(signal, int)):
        raise ValueError("Configuration error: 'signal' must be an integer")

    overrides = table.get("theme_overrides")
    if overrides is not None:
        if not isinstance(overrides, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in overrides.items()
        ):
            raise ValueError(
                "Configuration error: 'theme_overrides' must map strings to strings"
            )
        overrides = dict(overrides)

    interval = table.get("error_interval", DEFAULT_ERROR_INTERVAL)
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 0:
        raise ValueError(
            "Configuration error: 'error_interval' must be a non-negative integer"
        )

    return CommonConfig(
        block=block,
        click=[dict(c) for c in click],
        signal=signal,
        icons_format=_optional_str(table, "icons_format"),
        theme_overrides=overrides,
        error_interval=interval,
        error_format=_optional_str(table, "error_format"),
    )


def split_common_config(table: Any) -> tuple[CommonConfig, dict[str, Any]]:
    """Separate the common settings from a block's table.

    Returns the parsed common settings and the remaining block-specific keys.
    """
    if isinstance(table, Mapping):
        common = {k: table[k] for k in _COMMON_FIELDS if k in table}
        rest = {k: v for k, v in table.items() if k not in _COMMON_FIELDS}
    else:
        common, rest = {}, {}
    return _build_common(common), rest