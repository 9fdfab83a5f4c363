"""Endpoint modules. Internal; may change at any time."""
