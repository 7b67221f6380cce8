"""Hiworks Commute - attendance automation for the Hiworks portal."""

__version__ = "0.1.0"
