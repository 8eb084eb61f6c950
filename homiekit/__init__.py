"""Building blocks for Homie convention devices: configuration, validation, settings, nodes, publishing and timers."""

__version__ = "0.1.0"