import pytest

from barblocks.blocks import (
    BlockType,
    CommonConfig,
    parse_block_type,
    split_common_config,
)


@pytest.mark.parametrize("block", list(BlockType))
def test_every_block_name_round_trips(block):
    assert parse_block_type(block.value) is block


def test_parse_known_block():
    assert parse_block_type("apt") is BlockType.apt
    assert parse_block_type("keyboard_layout") is BlockType.keyboard_layout


def test_parse_unknown_block():
    with pytest.raises(ValueError, match="Unknown block 'nonsense'"):
        parse_block_type("nonsense")


def test_parse_non_string_block():
    with pytest.raises(ValueError):
        parse_block_type(42)


def test_split_defaults():
    common, rest = split_common_config({"block": "cpu", "interval": 1})
    assert common == CommonConfig(block=BlockType.cpu)
    assert common.error_interval == 5
    assert common.click == []
    assert common.signal is None
    assert rest == {"interval": 1}


def test_split_all_fields():
    table = {
        "block": "custom",
        "command": "uname -r",
        "signal": 4,
        "icons_format": "{icon}",
        "theme_overrides": {"idle_bg": "#000000"},
        "error_interval": 10,
        "error_format": "$short_error_message",
        "click": [{"button": "left", "cmd": "true"}],
    }
    common, rest = split_common_config(table)
    assert common.block is BlockType.custom
    assert common.signal == 4
    assert common.icons_format == "{icon}"
    assert common.theme_overrides == {"idle_bg": "#000000"}
    assert common.error_interval == 10
    assert common.error_format == "$short_error_message"
    assert common.click == [{"button": "left", "cmd": "true"}]
    assert rest == {"command": "uname -r"}


def test_split_does_not_mutate_input():
    table = {"block": "load", "format": "$1m"}
    split_common_config(table)
    assert table == {"block": "load", "format": "$1m"}


def test_split_missing_block():
    with pytest.raises(ValueError, match="block"):
        split_common_config({"interval": 3})


def test_split_non_table():
    with pytest.raises(ValueError):
        split_common_config(["block"])


@pytest.mark.parametrize(
    "extra",
    [
        {"signal": "four"},
        {"error_interval": -1},
        {"error_interval": True},
        {"theme_overrides": {"idle_bg": 1}},
        {"click": "left"},
        {"icons_format": 3},
    ],
)
def test_split_invalid_fields(extra):
    with pytest.raises(ValueError):
        split_common_config({"block": "apt", **extra})