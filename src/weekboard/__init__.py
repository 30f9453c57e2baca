"""weekboard - weekly task board with copy-between-weeks history."""

__version__ = "0.1.0"
