"""Status bar block logic: system readings, update counters, battery, backlight and more."""

__version__ = "0.1.0"