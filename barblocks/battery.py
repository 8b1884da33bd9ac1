"""Battery state shared by the battery drivers: status, readings and block state."""

from __future__ import annotations

import dataclasses
import enum
import math
import re
from dataclasses import dataclass

from barblocks.blocks import State

DEFAULT_INFO = 60.0
DEFAULT_GOOD = 60.0
DEFAULT_WARNING = 30.0
DEFAULT_CRITICAL = 15.0
DEFAULT_FULL_THRESHOLD = 100.0

UPOWER_DISPLAY_DEVICE = "DisplayDevice"

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class BatteryStatus(enum.Enum):
    """Charging status, named as the kernel reports it."""

    Charging = "Charging"
    Discharging = "Discharging"
    Empty = "Empty"
    Full = "Full"
    NotCharging = "Not charging"
    Unknown = "Unknown"


def parse_battery_status(text: str) -> BatteryStatus:
    """Map a status string to a status; anything unrecognised is ``Unknown``."""
    try:
        return BatteryStatus(text)
    except ValueError:
        return BatteryStatus.Unknown


_UPOWER_STATES = {
    1: BatteryStatus.Charging,
    2: BatteryStatus.Discharging,
    3: BatteryStatus.Empty,
    4: BatteryStatus.Full,
    5: BatteryStatus.NotCharging,
    6: BatteryStatus.Discharging,
}


def status_from_upower_state(state: int) -> BatteryStatus:
    """Translate the numeric ``State`` property of a UPower device."""
    return _UPOWER_STATES.get(state, BatteryStatus.Unknown)


@dataclass(frozen=True)
class BatteryInfo:
    """One reading of a battery."""

    status: BatteryStatus
    capacity: float
    power: float | None = None
    time_remaining: float | None = None


class DeviceName:
    """Which device to use: any device, or those whose name matches a regex."""

    def __init__(self, pattern: str | None = None) -> None:
        if pattern is None:
            self._regex: re.Pattern[str] | None = None
        else:
            try:
                self._regex = re.compile(pattern)
            except re.error as exc:
                raise ValueError("failed to parse regex") from exc

    def matches(self, name: str) -> bool:
        """Whether a device called ``name`` is acceptable."""
        return self._regex is None or self._regex.search(name) is not None

    def exact(self) -> str | None:
        """The configured pattern text, or ``None`` when any device will do."""
        return None if self._regex is None else self._regex.pattern

    def __repr__(self) -> str:
        pattern = self.exact()
        return "DeviceName(Any)" if pattern is None else f"DeviceName({pattern!r})"


def _as_i32(value: float) -> int:
    """Truncate toward zero, saturating at the 32-bit bounds; NaN becomes 0."""
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return _I32_MAX if value > 0 else _I32_MIN
    return max(_I32_MIN, min(_I32_MAX, int(value)))


def format_time_remaining(seconds: float) -> str:
    """Render seconds as ``H:MM``."""
    hours = _as_i32(seconds / 3600.0)
    minutes = _as_i32(math.fmod(seconds, 3600.0) / 60.0) if math.isfinite(seconds) else 0
    return f"{hours}:{minutes:02}"


def apply_full_threshold(
    info: BatteryInfo, full_threshold: float = DEFAULT_FULL_THRESHOLD
) -> BatteryInfo:
    """Treat the battery as full once its capacity reaches ``full_threshold``."""
    if info.capacity >= full_threshold:
        return dataclasses.replace(info, status=BatteryStatus.Full)
    return info


def battery_state(
    status: BatteryStatus,
    capacity: float,
    critical: float = DEFAULT_CRITICAL,
    warning: float = DEFAULT_WARNING,
    info: float = DEFAULT_INFO,
    good: float = DEFAULT_GOOD,
) -> State:
    """Block state for a battery with the given status and capacity."""
    if status is BatteryStatus.Empty:
        return State.Critical
    if status is BatteryStatus.Full:
        return State.Idle
    if status is BatteryStatus.Charging:
        return State.Good
    if capacity <= critical:
        return State.Critical
    if capacity <= warning:
        return State.Warning
    if capacity <= info:
        return State.Info
    if capacity > good:
        return State.Good
    return State.Idle