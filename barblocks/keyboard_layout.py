"""Keyboard layout detection and display mappings."""

from __future__ import annotations

import enum
import subprocess
from collections.abc import Iterator, Mapping

DEFAULT_INTERVAL = 60
NO_VARIANT = "N/A"


class KeyboardLayoutDriver(enum.Enum):
    """Ways of finding out the current keyboard layout."""

    SetXkbMap = "setxkbmap"
    LocaleBus = "localebus"
    KbddBus = "kbddbus"
    Sway = "sway"


def _lines(text: str) -> Iterator[str]:
    if not text:
        return
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    for part in parts:
        yield part[:-1] if part.endswith("\r") else part


def parse_sway_layout(layout: str) -> tuple[str, str | None]:
    """Split a sway layout name such as ``"English (Workman)"`` into layout and variant."""
    name, paren, rest = layout.partition("(")
    if not paren:
        return layout, None
    return name.rstrip(), rest.rstrip(")")


def parse_setxkbmap(output: str) -> str:
    """The layout named in ``setxkbmap -query`` output."""
    line = next((l for l in _lines(output) if l.startswith("layout")), None)
    if line is None:
        raise ValueError("Could not find the layout entry from setxkbmap")
    fields = line.split()
    if not fields:
        raise ValueError("Could not read the layout entry from setxkbmap.")
    return fields[-1]


def apply_mapping(
    layout: str, variant: str | None, mappings: Mapping[str, str] | None
) -> tuple[str, str]:
    """Replace the layout by its configured short name, if any.

    A missing variant is shown as ``N/A``; the mapping key is ``"<layout> (<variant>)"``.
    """
    shown_variant = NO_VARIANT if variant is None else variant
    if mappings is not None:
        layout = mappings.get(f"{layout} ({shown_variant})", layout)
    return layout, shown_variant


def query_setxkbmap() -> str:
    """Run ``setxkbmap -query`` and return the current layout."""
    try:
        result = subprocess.run(
            ["setxkbmap", "-query"], stdout=subprocess.PIPE, check=False
        )
    except OSError as exc:
        raise RuntimeError("Failed to execute setxkbmap") from exc
    try:
        output = result.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError("setxkbmap produced a non-UTF8 output") from exc
    return parse_setxkbmap(output)