"""
Data extractors for the BoardGameGeek XML API 2.

Both extractors are built on a common base with linear-backoff
retries and structured logging.
"""

from boardgame_shelf.ingestion.extractors.base import (
    AuthorizationError,
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
    TransientResponseError,
)
from boardgame_shelf.ingestion.extractors.collection import CollectionExtractor
from boardgame_shelf.ingestion.extractors.thing import SOURCE_LABEL, ThingExtractor, chunked

__all__ = [
    # Base classes and errors
    "AuthorizationError",
    "BaseExtractor",
    "ExtractionError",
    "ExtractionResult",
    "TransientResponseError",
    # Extractors
    "CollectionExtractor",
    "SOURCE_LABEL",
    "ThingExtractor",
    "chunked",
]
