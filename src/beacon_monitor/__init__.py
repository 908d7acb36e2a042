"""Beacon page monitor: content extraction, classification and enforcement."""

__version__ = "0.5.0"
