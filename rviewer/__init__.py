"""Viewer and exporter for text-described frame-by-frame vector drawings."""

__version__ = "0.1.0"