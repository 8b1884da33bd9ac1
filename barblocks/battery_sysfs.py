"""Battery readings from the kernel's power supply class in sysfs."""

from __future__ import annotations

import enum
import logging
import math
import os
import re
from collections.abc import Mapping
from pathlib import Path

from barblocks.battery import BatteryInfo, BatteryStatus, DeviceName, parse_battery_status

log = logging.getLogger("barblocks.battery")

POWER_SUPPLY_DEVICES_PATH = "/sys/class/power_supply"

PROPERTIES = (
    "status",
    "capacity_level",
    "capacity",
    "charge_now",  # uAh
    "charge_full",  # uAh
    "energy_now",  # uWh
    "energy_full",  # uWh
    "power_now",  # uW
    "current_now",  # uA
    "voltage_now",  # uV
    "time_to_empty",  # seconds
    "time_to_full",  # seconds
)

_U8 = re.compile(r"\+?[0-9]+")


class CapacityLevel(enum.Enum):
    """Coarse capacity reported by devices without an exact percentage."""

    Full = "Full"
    High = "High"
    Normal = "Normal"
    Low = "Low"
    Critical = "Critical"
    Unknown = "Unknown"

    def percentage(self) -> float | None:
        """An approximate capacity in percent, if the level is known."""
        return _LEVEL_PERCENTAGE.get(self)


_LEVEL_PERCENTAGE = {
    CapacityLevel.Full: 100.0,
    CapacityLevel.High: 75.0,
    CapacityLevel.Normal: 50.0,
    CapacityLevel.Low: 25.0,
    CapacityLevel.Critical: 5.0,
}


def parse_capacity_level(text: str) -> CapacityLevel:
    """Map a capacity level string; anything unrecognised is ``Unknown``."""
    try:
        return CapacityLevel(text)
    except ValueError:
        return CapacityLevel.Unknown


def _parse_float(text: str | None) -> float | None:
    if text is None or "_" in text or text != text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _parse_u8(text: str | None) -> int | None:
    if text is None or not _U8.fullmatch(text):
        return None
    value = int(text)
    return value if value <= 255 else None


def _div(numerator: float, denominator: float) -> float:
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _read_prop(path: Path, prop: str) -> str | None:
    try:
        return (path / prop).read_text().strip()
    except (OSError, UnicodeDecodeError):
        return None


def device_available(path: str | os.PathLike[str]) -> bool:
    """Whether the power supply at ``path`` is present.

    HID devices (``scope`` of ``Device``) are present whenever their directory exists.
    """
    p = Path(path)
    return _read_prop(p, "scope") == "Device" or _parse_u8(_read_prop(p, "present")) == 1


def _scaled(props: Mapping[str, str | None], key: str) -> float | None:
    value = _parse_float(props.get(key))
    return None if value is None else value * 1e-6


def compute_battery_info(props: Mapping[str, str | None]) -> BatteryInfo:
    """Derive a battery reading from raw sysfs property strings.

    Missing or unparsable properties are ignored; a ``ValueError`` is raised when
    no capacity can be worked out.
    """
    raw_status = props.get("status")
    status = parse_battery_status(raw_status) if raw_status is not None else BatteryStatus.Unknown
    raw_level = props.get("capacity_level")
    level = parse_capacity_level(raw_level) if raw_level is not None else None

    charge_now = _scaled(props, "charge_now")  # Ah
    charge_full = _scaled(props, "charge_full")  # Ah
    energy_now = _scaled(props, "energy_now")  # Wh
    energy_full = _scaled(props, "energy_full")  # Wh
    power_now = _scaled(props, "power_now")  # W
    current_now = _scaled(props, "current_now")  # A
    voltage_now = _scaled(props, "voltage_now")  # V
    time_to_empty = _parse_float(props.get("time_to_empty"))
    time_to_full = _parse_float(props.get("time_to_full"))

    capacity = _parse_float(props.get("capacity"))
    if capacity is None and charge_now is not None and charge_full is not None:
        capacity = _div(charge_now, charge_full) * 100.0
    if capacity is None and energy_now is not None and energy_full is not None:
        capacity = _div(energy_now, energy_full) * 100.0
    if capacity is None and level is not None:
        capacity = level.percentage()
    if capacity is None:
        raise ValueError("Failed to get capacity")

    power = power_now
    if power is None and current_now is not None and voltage_now is not None:
        power = current_now * voltage_now

    time_remaining: float | None = None
    if status is BatteryStatus.Charging:
        time_remaining = time_to_full
        if time_remaining is None and power is not None:
            if energy_now is not None and energy_full is not None:
                time_remaining = _div(energy_full - energy_now, power) * 3600.0
            elif charge_now is not None and charge_full is not None and voltage_now is not None:
                time_remaining = _div((charge_full - charge_now) * voltage_now, power) * 3600.0
    elif status is BatteryStatus.Discharging:
        time_remaining = time_to_empty
        if time_remaining is None and power is not None:
            if energy_now is not None:
                time_remaining = _div(energy_now, power) * 3600.0
            elif charge_now is not None and voltage_now is not None:
                time_remaining = _div(charge_now * voltage_now, power) * 3600.0

    return BatteryInfo(
        status=status, capacity=capacity, power=power, time_remaining=time_remaining
    )


class SysfsBattery:
    """A battery found among the power supply devices in sysfs."""

    def __init__(
        self,
        dev_name: DeviceName | None = None,
        root: str | os.PathLike[str] = POWER_SUPPLY_DEVICES_PATH,
    ) -> None:
        self.dev_name = dev_name if dev_name is not None else DeviceName()
        self.root = Path(root)
        self._path: Path | None = None

    def device_path(self) -> Path | None:
        """The remembered device if still present, else the first matching battery."""
        if self._path is not None and device_available(self._path):
            log.debug("battery '%s' is still available", self._path)
            return self._path

        try:
            entries = sorted(self.root.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise RuntimeError(f"failed to read {self.root} directory") from exc

        for path in entries:
            if not self.dev_name.matches(path.name):
                continue
            if _read_prop(path, "type") == "Battery" and device_available(path):
                log.debug("Found matching battery: '%s' matches %r", path, self.dev_name)
                self._path = path
                return path

        log.debug("No batteries found")
        return None

    def get_info(self) -> BatteryInfo | None:
        """Read the battery, or ``None`` when no matching battery is present."""
        path = self.device_path()
        if path is None:
            return None
        props = {prop: _read_prop(path, prop) for prop in PROPERTIES}
        if not device_available(path):
            log.debug("battery suddenly unavailable")
            return None
        return compute_battery_info(props)