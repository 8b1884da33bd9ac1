"""Display colour temperature control through an external hue shifter."""

from __future__ import annotations

import enum
import shutil
import subprocess
from dataclasses import dataclass

DEFAULT_TEMP = 6_500
HARD_MAX_TEMP = 10_000
HARD_MIN_TEMP = 1_000
MIN_STEP = 500

_GAMMARELAY_SERVICE = "rs.wl-gammarelay"
_GAMMARELAY_PATH = "/"
_GAMMARELAY_INTERFACE = "rs.wl.gammarelay"


class HueShifter(enum.Enum):
    """Programs able to change the screen colour temperature."""

    Redshift = "redshift"
    Sct = "sct"
    Gammastep = "gammastep"
    Wlsunset = "wlsunset"
    WlGammarelay = "wl_gammarelay"
    WlGammarelayRs = "wl_gammarelay_rs"


def parse_hue_shifter(name: str) -> HueShifter:
    """Look up a hue shifter by its configuration name."""
    try:
        return HueShifter(name)
    except ValueError:
        raise ValueError(f"unknown hue shifter '{name}'") from None


_DETECTION_ORDER = (
    ("wl-gammarelay-rs", HueShifter.WlGammarelayRs),
    ("wl-gammarelay", HueShifter.WlGammarelay),
    ("redshift", HueShifter.Redshift),
    ("sct", HueShifter.Sct),
    ("gammastep", HueShifter.Gammastep),
    ("wlsunset", HueShifter.Wlsunset),
)


def detect_hue_shifter() -> HueShifter:
    """The first hue shifter program found on ``PATH``."""
    for command, shifter in _DETECTION_ORDER:
        if shutil.which(command) is not None:
            return shifter
    raise RuntimeError("Could not detect driver program")


def _shell(script: str) -> list[str]:
    return ["sh", "-c", script]


def update_command(shifter: HueShifter, temp: int) -> list[str]:
    """The command that sets the colour temperature to ``temp`` Kelvin."""
    if shifter is HueShifter.Redshift:
        return ["redshift", "-O", str(temp), "-P"]
    if shifter is HueShifter.Sct:
        return ["sct", f"sct {temp} >/dev/null 2>&1"]
    if shifter is HueShifter.Gammastep:
        return _shell(f"killall gammastep; gammastep -O {temp} -P &")
    if shifter is HueShifter.Wlsunset:
        # wlsunset has no one-shot mode and rejects equal day and night temperatures.
        return _shell(f"killall wlsunset; wlsunset -T {temp + 1} -t {temp} &")
    return [
        "busctl",
        "--user",
        "set-property",
        _GAMMARELAY_SERVICE,
        _GAMMARELAY_PATH,
        _GAMMARELAY_INTERFACE,
        "Temperature",
        "q",
        str(temp),
    ]


def reset_command(shifter: HueShifter) -> list[str]:
    """The command that restores the default colour temperature."""
    if shifter is HueShifter.Redshift:
        return ["redshift", "-x"]
    if shifter is HueShifter.Sct:
        return ["sct"]
    if shifter is HueShifter.Gammastep:
        return ["gammastep", "-x"]
    if shifter is HueShifter.Wlsunset:
        # wlsunset has no reset option; stopping it is the closest equivalent.
        return ["killall", "wlsunset"]
    return update_command(shifter, DEFAULT_TEMP)


def _failure_message(shifter: HueShifter) -> str:
    if shifter in (HueShifter.WlGammarelay, HueShifter.WlGammarelayRs):
        return "Failed to set temperature"
    return f"Failed to set new color temperature using {shifter.value}."


def _spawn(command: list[str], shifter: HueShifter) -> subprocess.Popen[bytes]:
    try:
        return subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        raise RuntimeError(_failure_message(shifter)) from exc


def apply(shifter: HueShifter, temp: int) -> subprocess.Popen[bytes]:
    """Start the program that sets the colour temperature."""
    return _spawn(update_command(shifter, temp), shifter)


def reset(shifter: HueShifter) -> subprocess.Popen[bytes]:
    """Start the program that resets the colour temperature."""
    return _spawn(reset_command(shifter), shifter)


@dataclass
class TemperatureControl:
    """Tracks the current temperature and reacts to clicks and scrolling.

    Each action updates ``current_temp`` and returns the command to run.
    """

    shifter: HueShifter
    current_temp: int = DEFAULT_TEMP
    click_temp: int = DEFAULT_TEMP
    step: int = 100
    max_temp: int = HARD_MAX_TEMP
    min_temp: int = HARD_MIN_TEMP

    def __post_init__(self) -> None:
        self.step = max(self.step, MIN_STEP)
        self.max_temp = min(self.max_temp, HARD_MAX_TEMP)
        if HARD_MIN_TEMP > self.max_temp:
            raise ValueError("max_temp is below the minimal temperature")
        self.min_temp = min(max(self.min_temp, HARD_MIN_TEMP), self.max_temp)

    def click(self) -> list[str]:
        """Left click: jump to the click temperature."""
        self.current_temp = self.click_temp
        return update_command(self.shifter, self.current_temp)

    def right_click(self) -> list[str]:
        """Right click: reset to the default, or to the maximum if that is lower."""
        if self.max_temp > DEFAULT_TEMP:
            self.current_temp = DEFAULT_TEMP
            return reset_command(self.shifter)
        self.current_temp = self.max_temp
        return update_command(self.shifter, self.current_temp)

    def wheel_up(self) -> list[str]:
        """Scroll up: raise the temperature by one step."""
        self.current_temp = min(self.current_temp + self.step, self.max_temp)
        return update_command(self.shifter, self.current_temp)

    def wheel_down(self) -> list[str]:
        """Scroll down: lower the temperature by one step."""
        self.current_temp = max(max(self.current_temp - self.step, 0), self.min_temp)
        return update_command(self.shifter, self.current_temp)