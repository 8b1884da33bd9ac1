"""Brightness of a backlight device, read from sysfs."""

from __future__ import annotations

import math
import os
import re
from pathlib import Path

DEVICES_PATH = "/sys/class/backlight"

FILE_MAX_BRIGHTNESS = "max_brightness"
FILE_BRIGHTNESS = "actual_brightness"
# amdgpu reports actual_brightness on a different scale than max_brightness.
FILE_BRIGHTNESS_AMD = "brightness"
AMD_DEVICE = "amdgpu_bl0"

ROOT_SCALING_RANGE = (0.1, 10.0)

BACKLIGHT_ICONS = (
    "backlight_empty",
    "backlight_1",
    "backlight_2",
    "backlight_3",
    "backlight_4",
    "backlight_5",
    "backlight_6",
    "backlight_7",
    "backlight_8",
    "backlight_9",
    "backlight_10",
    "backlight_11",
    "backlight_12",
    "backlight_13",
    "backlight_full",
)

_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_UNSIGNED = re.compile(r"\+?[0-9]+")


def _pow(base: float, exponent: float) -> float:
    try:
        return base**exponent
    except OverflowError:
        return math.inf
    except ZeroDivisionError:
        return math.inf


def _round_half_away(value: float) -> int:
    if value >= 0:
        return math.floor(value + 0.5)
    return math.ceil(value - 0.5)


def brightness_from_raw(raw: int, max_brightness: int, root_scaling: float) -> int:
    """Convert a raw device value to a percentage in [0, 100]."""
    if max_brightness == 0:
        ratio = math.nan if raw == 0 else math.inf
    else:
        ratio = _pow(raw / max_brightness, _pow(root_scaling, -1.0))
    percent = ratio * 100.0
    if math.isnan(percent):
        return 0
    if math.isinf(percent):
        raise ValueError("Brightness is not in [0, 100]")
    result = _round_half_away(percent)
    if not 0 <= result <= 100:
        raise ValueError("Brightness is not in [0, 100]")
    return result


def raw_from_brightness(value: int, max_brightness: int, root_scaling: float) -> int:
    """Convert a percentage to the raw device value; never less than 1."""
    value = min(max(value, 0), 100)
    raw = _pow(value / 100.0, root_scaling) * max_brightness
    if math.isnan(raw):
        scaled = 0
    elif math.isinf(raw):
        scaled = _U32_MAX if raw > 0 else 0
    else:
        scaled = min(max(_round_half_away(raw), 0), _U32_MAX)
    return max(1, scaled)


def icon_for_brightness(brightness: int, invert: bool = False) -> str:
    """The icon name showing ``brightness`` percent."""
    index = brightness * len(BACKLIGHT_ICONS) // 101
    if invert:
        index = len(BACKLIGHT_ICONS) - index
    if not 0 <= index < len(BACKLIGHT_ICONS):
        raise IndexError(f"no backlight icon for brightness {brightness}")
    return BACKLIGHT_ICONS[index]


def scroll_brightness(
    brightness: int, step: int, minimum: int, maximum: int, up: bool
) -> int:
    """Brightness after one scroll step, kept within ``[minimum, maximum]``."""
    if minimum > maximum:
        raise ValueError("minimum brightness is greater than maximum")
    new = brightness + step if up else max(brightness - step, 0)
    return min(max(new, minimum), maximum)


def _read_brightness_raw(path: Path) -> int:
    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError) as exc:
        raise RuntimeError("Failed to read brightness file") from exc
    text = text.strip()
    if not _UNSIGNED.fullmatch(text) or int(text) > _U64_MAX:
        raise ValueError("Failed to read value from brightness file")
    return int(text)


class BacklightDevice:
    """A backlight device whose brightness can be read and scaled."""

    def __init__(
        self, device_path: str | os.PathLike[str], root_scaling: float = 1.0
    ) -> None:
        path = Path(device_path)
        if not path.name:
            raise ValueError("Malformed device path")
        self.device_name = path.name
        self.brightness_file = path / (
            FILE_BRIGHTNESS_AMD if path.name == AMD_DEVICE else FILE_BRIGHTNESS
        )
        self.max_brightness = _read_brightness_raw(path / FILE_MAX_BRIGHTNESS)
        low, high = ROOT_SCALING_RANGE
        self.root_scaling = min(max(root_scaling, low), high)

    @classmethod
    def default(
        cls,
        root_scaling: float = 1.0,
        devices_path: str | os.PathLike[str] = DEVICES_PATH,
    ) -> BacklightDevice:
        """The first device found in ``devices_path``."""
        try:
            entries = sorted(Path(devices_path).iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise RuntimeError("Failed to read backlight device directory") from exc
        if not entries:
            raise RuntimeError("No backlit devices found")
        return cls(entries[0], root_scaling)

    @classmethod
    def from_device(
        cls,
        device: str,
        root_scaling: float = 1.0,
        devices_path: str | os.PathLike[str] = DEVICES_PATH,
    ) -> BacklightDevice:
        """The named device inside ``devices_path``."""
        return cls(Path(devices_path) / device, root_scaling)

    def brightness(self) -> int:
        """Current brightness in percent."""
        raw = _read_brightness_raw(self.brightness_file)
        return brightness_from_raw(raw, self.max_brightness, self.root_scaling)

    def raw_for_percent(self, value: int) -> int:
        """The raw value to set for ``value`` percent on this device."""
        return raw_from_brightness(value, self.max_brightness, self.root_scaling)