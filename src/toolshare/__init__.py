"""Peer-to-peer tool lending registry."""

__version__ = "0.1.0"
