"""Sustain-ify product identification API."""

__version__ = "1.0.0"
