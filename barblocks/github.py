"""Unread GitHub notification counts, grouped by reason."""

from __future__ import annotations

import os
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import requests

from barblocks.blocks import State

DEFAULT_INTERVAL = 60
TOKEN_ENV_VAR = "BARBLOCKS_GITHUB_TOKEN"
NOTIFICATIONS_URL = "https://api.github.com/notifications"
PER_PAGE = 100
MAX_PAGES = 99
REQUEST_TIMEOUT = 30

REASONS = (
    "assign",
    "author",
    "comment",
    "ci_activity",
    "invitation",
    "manual",
    "mention",
    "review_requested",
    "security_alert",
    "state_change",
    "subscribed",
    "team_mention",
)


def aggregate_stats(notifications: Iterable[Mapping[str, Any]]) -> dict[str, int]:
    """Count notifications per reason, plus ``total``; known reasons default to 0."""
    counts = Counter(n["reason"] for n in notifications)
    stats = dict(counts)
    stats["total"] = sum(counts.values())
    for reason in REASONS:
        stats.setdefault(reason, 0)
    return stats


def notification_state(
    stats: Mapping[str, int],
    critical: Sequence[str] | None = None,
    warning: Sequence[str] | None = None,
    info: Sequence[str] | None = None,
    good: Sequence[str] | None = None,
) -> State:
    """The state of the most severe list naming a reason with notifications."""
    for names, state in (
        (critical, State.Critical),
        (warning, State.Warning),
        (info, State.Info),
        (good, State.Good),
    ):
        if names is None:
            continue
        if any(stats.get(name, 0) > 0 for name in names):
            return state
    return State.Idle


def resolve_token(token: str | None, environ: Mapping[str, str] | None = None) -> str:
    """The configured token, else the one from the environment."""
    if token is not None:
        return token
    env = os.environ if environ is None else environ
    try:
        return env[TOKEN_ENV_VAR]
    except KeyError:
        raise RuntimeError("Github token not found") from None


def _fetch_page(token: str, page: int) -> list[dict[str, Any]]:
    try:
        response = requests.get(
            NOTIFICATIONS_URL,
            params={"per_page": PER_PAGE, "page": page},
            headers={"Authorization": f"token {token}"},
            timeout=REQUEST_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise RuntimeError("Failed to send request") from exc
    try:
        data = response.json()
    except ValueError as exc:
        raise RuntimeError("Failed to get JSON") from exc
    if not isinstance(data, list) or not all(
        isinstance(n, Mapping) and isinstance(n.get("reason"), str) for n in data
    ):
        raise RuntimeError("Failed to get JSON")
    return data


def fetch_stats(token: str) -> dict[str, int]:
    """Download all unread notifications and count them by reason."""
    notifications: list[dict[str, Any]] = []
    for page in range(1, MAX_PAGES + 1):
        on_page = _fetch_page(token, page)
        if not on_page:
            break
        notifications.extend(on_page)
    return aggregate_stats(notifications)