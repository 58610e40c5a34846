"""HTTP API for the poolfinder service."""
