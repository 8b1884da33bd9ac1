"""CPU utilisation, frequency and turbo boost readings."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from barblocks.blocks import State

CPU_BOOST_PATH = "/sys/devices/system/cpu/cpufreq/boost"
CPU_NO_TURBO_PATH = "/sys/devices/system/cpu/intel_pstate/no_turbo"

BOXCHARS = ("▁", "▂", "▃", "▄", "▅", "▆", "▇", "█")

_LEADING_WORD = re.compile(r"^\S*")
_LEADING_NON_DIGITS = re.compile(r"^[^0-9]*")


def _divide(numerator: float, denominator: float) -> float:
    """Floating point division that yields inf/nan instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _clamp(value: float, low: float, high: float) -> float:
    if math.isnan(value):
        return value
    return min(max(value, low), high)


@dataclass(frozen=True)
class CpuTime:
    """Accumulated idle and busy jiffies of one CPU (or of all of them)."""

    idle: int
    non_idle: int

    def utilization(self, old: CpuTime) -> float:
        """Fraction of time spent busy since ``old`` was sampled, in [0, 1]."""
        elapsed = (self.idle + self.non_idle) - (old.idle + old.non_idle)
        return _clamp(_divide(self.non_idle - old.non_idle, elapsed), 0.0, 1.0)


def parse_cpu_time(text: str) -> CpuTime | None:
    """Parse the numeric columns of a ``cpu`` line of ``/proc/stat``.

    Returns ``None`` when fewer than seven valid counters are present.
    """
    fields = text.split()
    if len(fields) < 7:
        return None
    counters = []
    for field in fields[:7]:
        if not field.isascii() or not field.isdigit():
            return None
        counters.append(int(field))
    user, nice, system, idle, iowait, irq, softirq = counters
    return CpuTime(idle=idle + iowait, non_idle=user + nice + system + irq + softirq)


def parse_proc_stat(text: str) -> tuple[CpuTime, list[CpuTime]]:
    """Return the total CPU time and the per-core times from ``/proc/stat``."""
    total: CpuTime | None = None
    cores: list[CpuTime] = []
    for line in text.splitlines():
        if not line.startswith("cpu"):
            continue
        parsed = parse_cpu_time(_LEADING_WORD.sub("", line, count=1))
        if parsed is None:
            raise ValueError("failed to parse /proc/stat")
        if line.startswith("cpu "):
            total = parsed
        else:
            cores.append(parsed)
    if total is None:
        raise ValueError("failed to parse /proc/stat")
    return total, cores


def parse_cpu_frequencies(text: str) -> list[float]:
    """Per-core frequencies in Hz from ``/proc/cpuinfo`` (which reports MHz)."""
    freqs = []
    for line in text.splitlines():
        if not line.startswith("cpu MHz"):
            continue
        value = _LEADING_NON_DIGITS.sub("", line.rstrip(), count=1)
        try:
            freqs.append(float(value) * 1e6)
        except ValueError as exc:
            raise ValueError("failed to parse /proc/cpuinfo") from exc
    return freqs


def barchart(utilizations: Iterable[float]) -> str:
    """One box character per core, taller for busier cores."""

    def index(u: float) -> int:
        scaled = 7.5 * u
        if math.isnan(scaled) or scaled <= 0:
            return 0
        return int(scaled)

    return "".join(BOXCHARS[index(u)] for u in utilizations)


def utilization_state(utilization: float) -> State:
    """Block state for an average utilisation in [0, 1]."""
    if utilization > 0.9:
        return State.Critical
    if utilization > 0.6:
        return State.Warning
    if utilization > 0.3:
        return State.Info
    return State.Idle


def _read(path: str | Path) -> str | None:
    try:
        return Path(path).read_text()
    except (OSError, UnicodeDecodeError):
        return None


def boost_status(
    boost_path: str | Path = CPU_BOOST_PATH,
    no_turbo_path: str | Path = CPU_NO_TURBO_PATH,
) -> bool | None:
    """Turbo boost state from the cpufreq or intel_pstate interface, if available."""
    boost = _read(boost_path)
    if boost is not None:
        return boost.startswith("1")
    no_turbo = _read(no_turbo_path)
    if no_turbo is not None:
        return no_turbo.startswith("0")
    return None


def core_utilizations(new: Sequence[CpuTime], old: Sequence[CpuTime]) -> list[float]:
    """Per-core utilisation between two samples with the same number of cores."""
    if len(new) != len(old):
        raise ValueError("new cputime length is incorrect")
    return [n.utilization(o) for n, o in zip(new, old)]