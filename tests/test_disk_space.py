import pytest

from barblocks.blocks import State
from barblocks.disk_space import (
    DiskUsage,
    InfoType,
    alert_value,
    disk_state,
    disk_usage,
    parse_alert_unit,
)


def test_info_type_names():
    assert InfoType("used") is InfoType.Used
    assert InfoType("available") is InfoType.Available
    with pytest.raises(ValueError):
        InfoType("total")


def test_disk_usage_invariants(tmp_path):
    usage = disk_usage(tmp_path)
    assert usage.total > 0
    assert 0 <= usage.used <= usage.total
    for kind in InfoType:
        assert 0.0 <= usage.percentage(kind) <= 100.0


def test_disk_usage_missing_path(tmp_path):
    with pytest.raises(RuntimeError, match="statvfs"):
        disk_usage(tmp_path / "does" / "not" / "exist")


def test_disk_usage_value_and_percentage():
    usage = DiskUsage(total=100, used=40, available=50, free=60)
    assert usage.value(InfoType.Used) == 40
    assert usage.value(InfoType.Free) == 60
    assert usage.percentage(InfoType.Available) == pytest.approx(50.0)


def test_parse_alert_unit():
    assert parse_alert_unit(None) is None
    assert parse_alert_unit("B") == 1.0
    assert parse_alert_unit("GB") == 1e9
    assert parse_alert_unit("TB") == 1e12


def test_parse_alert_unit_unknown():
    with pytest.raises(ValueError, match="Unknown unit: 'PB'"):
        parse_alert_unit("PB")


def test_alert_value():
    assert alert_value(5.0, 50.0, None) == 50.0
    assert alert_value(5.0, 50.0, 1.0) == 5.0


@pytest.mark.parametrize(
    "val, state",
    [(95.0, State.Critical), (85.0, State.Warning), (90.0, State.Warning), (50.0, State.Idle)],
)
def test_disk_state_used(val, state):
    assert disk_state(InfoType.Used, val, alert=90.0, warning=80.0) is state


@pytest.mark.parametrize(
    "val, state",
    [
        (5.0, State.Critical),
        (10.0, State.Warning),
        (15.0, State.Warning),
        (20.0, State.Idle),
        (50.0, State.Idle),
        (-1.0, State.Idle),
    ],
)
def test_disk_state_available(val, state):
    assert disk_state(InfoType.Available, val, alert=10.0, warning=20.0) is state
    assert disk_state(InfoType.Free, val, alert=10.0, warning=20.0) is state