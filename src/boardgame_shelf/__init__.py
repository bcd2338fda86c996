"""
Board Game Shelf.

Keeps a personal board game catalog in sync with BoardGameGeek
and publishes it as a static JSON document.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
