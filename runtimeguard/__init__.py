"""Building blocks for a runtime security monitor: rulesets, alert outputs, a response queue, a watchdog and capture statistics."""

__version__ = "0.1.0"