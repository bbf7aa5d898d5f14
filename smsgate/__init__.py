"""smsgate: send SMS text messages through a pluggable gateway backend."""

__version__ = "0.1.0"
