"""Helm Update Manager - keep helmsman chart pins and values overlays current."""

__version__ = "0.1.0"
