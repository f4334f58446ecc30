"""duochess: two-player chess rules engine and turn controller."""

__version__ = "0.1.0"
