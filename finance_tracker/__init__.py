"""Personal finance tracker backend.

Authenticated users record income and expense entries and read them back
scoped to their own account, optionally filtered by date range.
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "auth",
    "cli",
    "config",
    "crud",
    "database",
    "dates",
    "entries",
    "models",
    "schemas",
    "server",
]

__version__ = "1.0.0"
