"""Command modules mounted by weekboard.main."""
