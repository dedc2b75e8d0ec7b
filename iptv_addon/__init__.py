"""IPTV live-TV catalog addon."""

__version__ = "0.0.3"
