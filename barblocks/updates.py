"""Pending package updates as reported by apt and dnf."""

from __future__ import annotations

import os
import re
import subprocess
from collections.abc import Iterator
from pathlib import Path
from typing import TypeVar, Union

from barblocks.blocks import State

Pattern = Union[str, "re.Pattern[str]"]
_F = TypeVar("_F")


def _lines(text: str) -> Iterator[str]:
    """Split on newlines, dropping a trailing carriage return from each line."""
    if not text:
        return
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    for part in parts:
        yield part[:-1] if part.endswith("\r") else part


def apt_config_text(cache_dir: str | os.PathLike[str]) -> str:
    """The apt configuration that keeps the package database in ``cache_dir``."""
    d = os.fspath(cache_dir)
    sep = "\n\n             "
    return (
        f'Dir::State "{d}";{sep}'
        f'Dir::State::lists "lists";{sep}'
        f'Dir::Cache "{d}";{sep}'
        f'Dir::Cache::srcpkgcache "srcpkgcache.bin";{sep}'
        'Dir::Cache::pkgcache "pkgcache.bin";'
    )


def count_apt_updates(updates: str) -> int:
    """Number of upgradable packages in ``apt list --upgradable`` output."""
    return sum(1 for line in _lines(updates) if "[upgradable" in line)


def count_dnf_updates(updates: str) -> int:
    """Number of updates in ``dnf check-update`` output."""
    return sum(1 for line in _lines(updates) if len(line.encode("utf-8")) > 1)


def _compile(pattern: Pattern) -> re.Pattern[str]:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


def has_matching_update(updates: str, pattern: Pattern) -> bool:
    """Whether any line of the update list matches ``pattern``."""
    regex = _compile(pattern)
    return any(regex.search(line) for line in _lines(updates))


def update_state(
    count: int,
    updates: str,
    warning_regex: Pattern | None,
    critical_regex: Pattern | None,
) -> State:
    """The block state for ``count`` updates listed in ``updates``."""
    try:
        warning_re = _compile(warning_regex) if warning_regex is not None else None
    except re.error as exc:
        raise ValueError("invalid warning updates regex") from exc
    try:
        critical_re = _compile(critical_regex) if critical_regex is not None else None
    except re.error as exc:
        raise ValueError("invalid critical updates regex") from exc

    if count == 0:
        return State.Idle
    if critical_re is not None and has_matching_update(updates, critical_re):
        return State.Critical
    if warning_re is not None and has_matching_update(updates, warning_re):
        return State.Warning
    return State.Info


def select_format(count: int, format: _F, format_singular: _F, format_up_to_date: _F) -> _F:
    """Pick the format matching the number of updates."""
    if count == 0:
        return format_up_to_date
    if count == 1:
        return format_singular
    return format


def _decode(stdout: bytes, tool: str) -> str:
    try:
        return stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RuntimeError(f"{tool} produced non-UTF8 output") from exc


def fetch_apt_updates(config_path: str | os.PathLike[str]) -> str:
    """Refresh the private apt database and list upgradable packages."""
    env = {**os.environ, "APT_CONFIG": os.fspath(Path(config_path))}
    try:
        subprocess.run(["sh", "-c", "apt update"], env=env, check=False)
    except OSError as exc:
        raise RuntimeError("Failed to run `apt update` command") from exc
    try:
        result = subprocess.run(
            ["sh", "-c", "apt list --upgradable"],
            env=env,
            stdout=subprocess.PIPE,
            check=False,
        )
    except OSError as exc:
        raise RuntimeError("Problem running apt command") from exc
    return _decode(result.stdout, "apt")


def fetch_dnf_updates() -> str:
    """List the updates dnf reports as available."""
    env = {**os.environ, "LC_LANG": "C"}
    try:
        result = subprocess.run(
            ["sh", "-c", "dnf check-update -q --skip-broken"],
            env=env,
            stdout=subprocess.PIPE,
            check=False,
        )
    except OSError as exc:
        raise RuntimeError("Failed to run dnf check-update") from exc
    return _decode(result.stdout, "dnf")