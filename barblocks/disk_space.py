"""Disk usage statistics."""

from __future__ import annotations

import enum
import math
import os
from dataclasses import dataclass

from barblocks.blocks import State

_UNITS = {
    "TB": 1e12,
    "GB": 1e9,
    "MB": 1e6,
    "KB": 1e3,
    "B": 1.0,
}


class InfoType(enum.Enum):
    """Which figure drives the block's state."""

    Available = "available"
    Free = "free"
    Used = "used"


@dataclass(frozen=True)
class DiskUsage:
    """Sizes of a filesystem, in bytes."""

    total: int
    used: int
    available: int
    free: int

    def value(self, info_type: InfoType) -> int:
        """The size selected by ``info_type``."""
        if info_type is InfoType.Available:
            return self.available
        if info_type is InfoType.Free:
            return self.free
        return self.used

    def percentage(self, info_type: InfoType) -> float:
        """The selected size as a percentage of the total."""
        value = float(self.value(info_type))
        if self.total == 0:
            return math.nan if value == 0 else math.inf
        return value / self.total * 100.0


def disk_usage(path: str | os.PathLike[str]) -> DiskUsage:
    """Query the filesystem holding ``path``; ``~`` and variables are expanded."""
    expanded = os.path.expandvars(os.path.expanduser(os.fspath(path)))
    try:
        st = os.statvfs(expanded)
    except OSError as exc:
        raise RuntimeError("failed to retrieve statvfs") from exc
    return DiskUsage(
        total=st.f_blocks * st.f_frsize,
        used=(st.f_blocks - st.f_bfree) * st.f_frsize,
        available=st.f_bavail * st.f_bsize,
        free=st.f_bfree * st.f_bsize,
    )


def parse_alert_unit(unit: str | None) -> float | None:
    """Byte multiplier for an ``alert_unit`` setting; ``None`` means percents."""
    if unit is None:
        return None
    try:
        return _UNITS[unit]
    except KeyError:
        raise ValueError(f"Unknown unit: '{unit}'") from None


def alert_value(result: float, percentage: float, multiplier: float | None) -> float:
    """The figure compared against the alert and warning thresholds."""
    if multiplier is None:
        return percentage
    return result * multiplier


def disk_state(info_type: InfoType, alert_val: float, alert: float, warning: float) -> State:
    """Block state for ``alert_val`` given the configured thresholds."""
    if info_type is InfoType.Used:
        if alert_val > alert:
            return State.Critical
        if warning < alert_val <= alert:
            return State.Warning
        return State.Idle
    if 0.0 <= alert_val < alert:
        return State.Critical
    if alert <= alert_val < warning:
        return State.Warning
    return State.Idle