"""
Writer for the local games manifest.

Produces the same YAML subset the reader understands, so a synced
collection can be edited by hand and read back.
"""

from collections.abc import Iterable
from pathlib import Path

from boardgame_shelf.logger import get_logger
from boardgame_shelf.manifest.models import ID_FIELD, LIST_KEY, ManifestEntry
from boardgame_shelf.utils import atomic_write_text

logger = get_logger(__name__, component="manifest")


def quote_value(value: str) -> str:
    """Quote a string so the reader gets it back verbatim."""
    if '"' in value:
        return f"'{value}'"
    return f'"{value}"'


def render_manifest(ids: Iterable[int], existing: Iterable[ManifestEntry] = ()) -> str:
    """
    Render manifest text for a set of ids.

    Args:
        ids: Ids to list, in output order
        existing: Previously tracked entries whose note and overrides
            are carried over when their id is still listed

    Returns:
        str: Manifest text ending with a newline
    """
    previous = {entry.bgg_id: entry for entry in existing}
    lines = [f"{LIST_KEY}:"]

    for bgg_id in ids:
        lines.append(f"  - {ID_FIELD}: {int(bgg_id)}")
        entry = previous.get(bgg_id)
        if entry is None:
            continue
        for key, value in entry.to_dict().items():
            if key != ID_FIELD:
                lines.append(f"    {key}: {quote_value(str(value))}")

    lines.append("")
    return "\n".join(lines)


def write_manifest(
    path: Path,
    ids: Iterable[int],
    existing: Iterable[ManifestEntry] = (),
) -> Path:
    """Render and atomically write a manifest file."""
    ids = list(ids)
    atomic_write_text(path, render_manifest(ids, existing))
    logger.info("Wrote manifest", path=str(path), games=len(ids))
    return path
