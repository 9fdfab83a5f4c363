"""Ordering policy for concurrent refreshes.

This module contains *no* I/O. The store numbers every refresh request and
asks this policy whether a finished refresh may replace the snapshot.
"""

from __future__ import annotations


def should_apply_refresh(*, sequence: int, applied_sequence: int, strict: bool) -> bool:
    """Decide whether a completed refresh may replace the current snapshot.

    Policy:
    - strict: only a response to a request issued after the last applied
      change wins ("most-recent-request-wins").
    - lenient: every completed response wins in completion order
      ("last-settled-wins").
    """
    if not strict:
        return True
    return sequence > applied_sequence

