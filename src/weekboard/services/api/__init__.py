"""HTTP client for the remote document store."""
