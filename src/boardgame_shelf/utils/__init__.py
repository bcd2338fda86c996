"""
Utility modules.
"""

from boardgame_shelf.utils.files import atomic_write_text

__all__ = [
    "atomic_write_text",
]
