"""WeTwo - mood tracking for couples."""

__version__ = "0.1.0"
