"""NacoClip: a local, reorderable shelf of clipboard entries."""

__version__ = "0.1.0"
