"""
Merge and publish.

Combines fetched records with manifest overrides and writes the
JSON document the site renders.
"""

from boardgame_shelf.publish.merge import build_document, merge_game, sort_games
from boardgame_shelf.publish.schemas import OutputDocument
from boardgame_shelf.publish.writer import DocumentWriter

__all__ = [
    "DocumentWriter",
    "OutputDocument",
    "build_document",
    "merge_game",
    "sort_games",
]
