"""Campus Hub: reactive document cache for the campus community service."""

__version__ = "0.1.0"
