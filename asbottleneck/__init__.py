# asbottleneck/__init__.py
"""Bottleneck-AS resolution over MRT RIB snapshots."""

__version__ = "0.1.0"
