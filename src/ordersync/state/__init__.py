"""State/store layer.

This package is the single source of truth for the cached order snapshot
that polling refreshes replace and confirmed mutations patch.
"""
