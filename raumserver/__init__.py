"""Raumserver — JSON over HTTP control for a multiroom audio household."""

__version__ = "0.1.0"
