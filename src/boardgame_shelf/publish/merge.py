"""
Merge fetched game records with manifest entries.

Local data wins: every manifest field other than the id and the
note replaces the remote field of the same name.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from boardgame_shelf.ingestion.contracts import GameRecord
from boardgame_shelf.ingestion.extractors.thing import SOURCE_LABEL
from boardgame_shelf.manifest.models import ID_FIELD, NOTE_FIELD, ManifestEntry
from boardgame_shelf.publish.schemas import OutputDocument


def merge_game(entry: ManifestEntry, record: GameRecord | None) -> dict[str, Any]:
    """
    Build the published object for one manifest entry.

    Args:
        entry: The manifest entry
        record: Its fetched record, or None if BGG did not return it

    Returns:
        dict[str, Any]: Remote fields (all null when record is None,
        except bgg_id), then note, then local overrides on top
    """
    base = record if record is not None else GameRecord(bgg_id=entry.bgg_id)
    merged = base.model_dump(mode="json")
    merged[NOTE_FIELD] = entry.note if entry.note is not None else ""
    merged.update(
        {k: v for k, v in entry.overrides.items() if k not in (ID_FIELD, NOTE_FIELD)}
    )
    return merged


def _name_key(game: Mapping[str, Any]) -> tuple[str, str]:
    name = game.get("name")
    text = "" if name is None else str(name)
    return text.casefold(), text


def sort_games(games: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Sort by name, case-insensitively; games without a name come first."""
    return sorted(games, key=_name_key)


def build_document(
    entries: Iterable[ManifestEntry],
    records: Mapping[int, GameRecord],
    *,
    source: str = SOURCE_LABEL,
    generated_at: datetime | None = None,
) -> OutputDocument:
    """
    Merge every manifest entry with its record and wrap the result.

    Args:
        entries: Manifest entries, in file order
        records: Fetched records keyed by id
        source: Provenance label
        generated_at: Generation timestamp (defaults to now)

    Returns:
        OutputDocument: Document with games sorted by name
    """
    games = sort_games(merge_game(entry, records.get(entry.bgg_id)) for entry in entries)
    if generated_at is None:
        return OutputDocument(source=source, games=games)
    return OutputDocument(source=source, games=games, generated_at=generated_at)
