"""
.. include:: ../README.md
"""

__all__ = [
    "calendar",
    "cli",
    "entry",
    "exceptions",
    "extract",
    "formatter",
    "model",
    "normalize",
    "recurrence",
    "selector",
    "settings",
    "types",
]
