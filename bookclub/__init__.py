"""Book club storage & sync package root.

Bridges the reading-list UI to a spreadsheet-backed remote store, keeping a
per-session local mirror for offline and optimistic reads.
"""

__all__ = [
]
