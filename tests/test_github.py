from unittest.mock import MagicMock, patch

import pytest
import requests

from barblocks.blocks import State
from barblocks.github import (
    REASONS,
    TOKEN_ENV_VAR,
    aggregate_stats,
    fetch_stats,
    notification_state,
    resolve_token,
)


def _response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


def test_aggregate_counts_reasons_and_total():
    notes = [{"reason": "mention"}, {"reason": "mention"}, {"reason": "assign"}]
    stats = aggregate_stats(notes)
    assert stats["total"] == len(notes)
    assert stats["mention"] == sum(1 for n in notes if n["reason"] == "mention")
    assert stats["assign"] == sum(1 for n in notes if n["reason"] == "assign")


def test_aggregate_fills_known_reasons_with_zero():
    stats = aggregate_stats([])
    assert stats["total"] == 0
    assert all(stats[reason] == 0 for reason in REASONS)


def test_aggregate_keeps_unknown_reasons():
    stats = aggregate_stats([{"reason": "other_reason"}])
    assert stats["other_reason"] == 1
    assert stats["total"] == 1


def test_state_priority_critical_first():
    stats = {"mention": 1, "assign": 2}
    assert notification_state(stats, critical=["assign"], warning=["mention"]) == State.Critical


def test_state_warning_when_critical_has_no_count():
    stats = {"mention": 1, "assign": 0}
    assert notification_state(stats, critical=["assign"], warning=["mention"]) == State.Warning


def test_state_idle_without_lists_or_matches():
    stats = {"mention": 3}
    assert notification_state(stats) == State.Idle
    assert notification_state(stats, good=["missing"]) == State.Idle
    assert notification_state(stats, good=["mention"]) == State.Good
    assert notification_state(stats, info=["mention"], good=["mention"]) == State.Info


def test_resolve_token_prefers_configured():
    assert resolve_token("token", {TOKEN_ENV_VAR: "secret"}) == "token"


def test_resolve_token_from_environment():
    assert resolve_token(None, {TOKEN_ENV_VAR: "token"}) == "token"


def test_resolve_token_missing():
    with pytest.raises(RuntimeError, match="Github token not found"):
        resolve_token(None, {})


def test_fetch_stats_pages_until_empty():
    pages = [
        _response([{"reason": "mention"}, {"reason": "comment"}]),
        _response([{"reason": "mention"}]),
        _response([]),
    ]
    with patch("barblocks.github.requests.get", side_effect=pages) as get:
        stats = fetch_stats("token")
    assert stats["total"] == 3
    assert stats["mention"] == 2
    assert get.call_count == len(pages)
    kwargs = get.call_args_list[0].kwargs
    assert kwargs["headers"]["Authorization"] == "token token"
    assert kwargs["params"]["page"] == 1
    assert get.call_args_list[1].kwargs["params"]["page"] == 2


def test_fetch_stats_bad_json():
    resp = MagicMock()
    resp.json.side_effect = ValueError("nope")
    with patch("barblocks.github.requests.get", return_value=resp):
        with pytest.raises(RuntimeError, match="Failed to get JSON"):
            fetch_stats("token")


def test_fetch_stats_error_object_is_rejected():
    with patch("barblocks.github.requests.get", return_value=_response({"message": "Bad"})):
        with pytest.raises(RuntimeError, match="Failed to get JSON"):
            fetch_stats("token")


def test_fetch_stats_network_error():
    with patch(
        "barblocks.github.requests.get",
        side_effect=requests.ConnectionError("down"),
    ):
        with pytest.raises(RuntimeError, match="Failed to send request"):
            fetch_stats("token")