"""
Data contracts for BoardGameGeek API responses.

Pydantic models that define the structure of parsed game
data, ensuring type safety throughout the ingestion pipeline.
"""

from boardgame_shelf.ingestion.contracts.game import (
    BGGId,
    GameRecord,
    Range,
    Ratings,
)

__all__ = [
    "BGGId",
    "GameRecord",
    "Range",
    "Ratings",
]
