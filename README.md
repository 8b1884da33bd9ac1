# barblocks

barblocks holds the logic behind a set of status bar blocks. Each module reads or parses what the system reports. It then works out the values a block shows and its state: `Idle`, `Info`, `Good`, `Warning` or `Critical` (see `barblocks.blocks.State`).

It covers:

- CPU and load readings
- disk space
- pending package updates (apt and dnf)
- battery readings from sysfs
- backlight brightness
- screen colour temperature
- keyboard layout
- custom shell commands
- GitHub notification counts
- docker daemon status
- external IP information

## Installation

```sh
pip install .
```

To run the tests as well:

```sh
pip install ".[test]"
pytest
```

## Modules

| Module | What it does |
|--------|--------------|
| `barblocks.blocks` | Block names (`BlockType`, `parse_block_type`), widget states (`State`) and the options every block shares (`CommonConfig`, `split_common_config`). |
| `barblocks.updates` | Counts pending apt and dnf updates (`count_apt_updates`, `count_dnf_updates`). Picks a state from warning and critical regular expressions (`update_state`) and a format by count (`select_format`). Runs `apt` and `dnf` through `sh` (`fetch_apt_updates`, `fetch_dnf_updates`). `apt_config_text` writes the apt configuration that keeps the package database in a private directory. |
| `barblocks.cpu` | Parses `/proc/stat` and `/proc/cpuinfo` (`parse_proc_stat`, `parse_cpu_frequencies`). Gives per-core utilisation (`CpuTime.utilization`, `core_utilizations`), a box-character bar chart (`barchart`), a state (`utilization_state`) and the turbo boost status (`boost_status`). |
| `barblocks.load` | Parses `/proc/loadavg` and counts logical cores in `/proc/cpuinfo`. Rates the one-minute load per core (`load_state`). |
| `barblocks.disk_space` | Total, used, free and available space of a filesystem (`disk_usage`, `DiskUsage`). Alert thresholds can be in percent or in bytes (`parse_alert_unit`, `alert_value`, `disk_state`). |
| `barblocks.battery` | Battery status (`BatteryStatus`, `parse_battery_status`, `status_from_upower_state`), readings (`BatteryInfo`), device selection by regular expression (`DeviceName`), `H:MM` remaining time (`format_time_remaining`) and state thresholds (`battery_state`, `apply_full_threshold`). |
| `barblocks.battery_sysfs` | Finds a battery under `/sys/class/power_supply` (`SysfsBattery`). Works out capacity, power and remaining time from its charge, energy, current and voltage files (`compute_battery_info`). |
| `barblocks.backlight` | Reads backlight devices under `/sys/class/backlight` (`BacklightDevice`). Converts between raw values and percent with root scaling. Picks the matching icon (`icon_for_brightness`) and computes scroll steps (`scroll_brightness`). |
| `barblocks.hueshift` | Detects a colour temperature program on `PATH` (`detect_hue_shifter`). Builds and starts the commands for redshift, sct, gammastep and wlsunset, or `busctl` for wl-gammarelay (`update_command`, `reset_command`, `apply`, `reset`). `TemperatureControl` reacts to clicks and scrolling. |
| `barblocks.keyboard_layout` | Reads the layout from `setxkbmap -query` (`query_setxkbmap`, `parse_setxkbmap`). Splits a sway layout name (`parse_sway_layout`) and maps `"<layout> (<variant>)"` to a short name (`apply_mapping`). |
| `barblocks.custom` | Chooses a shell (`choose_shell`). Runs a command or cycles between commands (`run_command`, `command_cycle`). Streams the lines of a persistent command (`stream_lines`) and reads JSON output (`parse_input`, `CustomInput`). |
| `barblocks.github` | Downloads unread GitHub notifications (`fetch_stats`), counts them by reason (`aggregate_stats`) and picks a state from lists of reasons (`notification_state`). The token comes from the caller or from the `BARBLOCKS_GITHUB_TOKEN` environment variable (`resolve_token`). |
| `barblocks.docker` | Queries the docker daemon's `/info` endpoint over its Unix socket (`fetch_status`, `parse_status`, `DockerStatus`). |
| `barblocks.external_ip` | Looks up the external IP address and its location at ipapi.co (`fetch_info`, `parse_info`, `IPAddressInfo`). Turns the answer into placeholder values, including a country flag (`info_values`). |

## Examples

Check a block name:

```python
from barblocks.blocks import parse_block_type

block = parse_block_type("cpu")
```

Count pending updates from the output of `apt list --upgradable`:

```python
from barblocks.updates import count_apt_updates, update_state

count = count_apt_updates(output)
state = update_state(count, output, None, r"linux")
```

Split a keyboard layout as sway reports it:

```python
from barblocks.keyboard_layout import parse_sway_layout

layout, variant = parse_sway_layout("English (Workman)")
# ("English", "Workman")
```

Read disk usage:

```python
from barblocks.disk_space import InfoType, disk_usage

usage = disk_usage("/")
print(usage.percentage(InfoType.Available))
```

Read the first battery found in sysfs:

```python
from barblocks.battery_sysfs import SysfsBattery

info = SysfsBattery().get_info()  # None when no battery is present
```

## Generating block documentation

A block source file may open with `//!` documentation lines. The `barblocks-manpage` command collects these lines from every file in `<src dir>/blocks`. It writes them to one Markdown file, under a `## <block>` heading per file, sorted by block name:

```sh
barblocks-manpage ../src ../man/blocks.md
```

If an argument is missing, the command prints its usage and exits with status 1.

## What this package does not do

barblocks is a library of block logic, not a running status bar. It has:

- no main loop, timers or event handling
- no bar protocol output
- no widget formatting and no icon themes
- no click-handler configuration beyond keeping the `click` tables in `CommonConfig`

It does not use D-Bus, so there is:

- no UPower battery driver; only `status_from_upower_state` maps UPower's state numbers
- no brightness setting through logind; `BacklightDevice.raw_for_percent` gives the value to set
- no locale1 or kbdd layout watching
- no live sway events

It does not watch files for changes. Many names in `BlockType` have no module here, for example `bluetooth`, `music` and `weather`. They are only recognised as block names.