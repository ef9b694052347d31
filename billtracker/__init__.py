"""Bill Tracker: personal bill tracking backend with offline fallback."""

__version__ = "0.1.0"
