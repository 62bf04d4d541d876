"""profile-stats: GitHub profile statistics snapshot collector."""

__version__ = "0.1.0"
