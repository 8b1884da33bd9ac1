"""System load average."""

from __future__ import annotations

import math

from barblocks.blocks import State

DEFAULT_INFO = 0.3
DEFAULT_WARNING = 0.6
DEFAULT_CRITICAL = 0.9


def count_logical_cores(cpuinfo: str) -> int:
    """Number of ``processor`` entries in ``/proc/cpuinfo``."""
    return sum(1 for line in cpuinfo.splitlines() if line.startswith("processor"))


def parse_loadavg(text: str) -> tuple[float, float, float]:
    """The 1, 5 and 15 minute load averages from ``/proc/loadavg``."""
    fields = text.split(" ")
    if len(fields) < 3:
        raise ValueError("bad /proc/loadavg file")
    try:
        m1, m5, m15 = (float(f) for f in fields[:3])
    except ValueError as exc:
        raise ValueError("bad /proc/loadavg file") from exc
    return m1, m5, m15


def load_state(
    m1: float,
    cores: int,
    info: float = DEFAULT_INFO,
    warning: float = DEFAULT_WARNING,
    critical: float = DEFAULT_CRITICAL,
) -> State:
    """Block state for the one-minute load spread over ``cores`` cores."""
    if cores == 0:
        per_core = math.nan if m1 == 0 or math.isnan(m1) else math.copysign(math.inf, m1)
    else:
        per_core = m1 / cores
    if per_core > critical:
        return State.Critical
    if per_core > warning:
        return State.Warning
    if per_core > info:
        return State.Info
    return State.Idle