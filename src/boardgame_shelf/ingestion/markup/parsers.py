"""
Parsers turning BGG XML into game records and collection ids.

Field-level gaps degrade to None; a fragment without a usable
object id is dropped.
"""

import math
import re

from boardgame_shelf.ingestion.contracts import GameRecord, Range, Ratings
from boardgame_shelf.ingestion.markup.reader import (
    FragmentReader,
    RegexFragmentReader,
    split_items,
)
from boardgame_shelf.logger import get_logger

logger = get_logger(__name__, component="markup")

CATEGORY_LINK = "boardgamecategory"
MECHANIC_LINK = "boardgamemechanic"

_COLLECTION_ITEM_RE = re.compile(r'<item\b[^>]*\sobjectid="(\d+)"[^>]*>')
_COLLECTION_TOTAL_RE = re.compile(r'<items\b[^>]*\stotal(?:items)?="(\d+)"')


def to_float(value: str | None) -> float | None:
    """Parse a finite number, or None."""
    if value is None:
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def to_int(value: str | None) -> int | None:
    """Parse an integral number ("7" or "7.0"), or None."""
    number = to_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _name(reader: FragmentReader) -> str | None:
    candidates = reader.tags("name")
    primary = next((c for c in candidates if c.get("type") == "primary"), None)
    chosen = primary or (candidates[0] if candidates else None)
    if chosen is None:
        return None
    return chosen.get("value", "")


def _links(reader: FragmentReader, link_type: str) -> list[str]:
    return [
        link.get("value", "") for link in reader.tags("link") if link.get("type") == link_type
    ]


def parse_item(
    fragment: str,
    reader_cls: type[FragmentReader] = RegexFragmentReader,
) -> GameRecord | None:
    """
    Parse one /thing <item> fragment.

    Args:
        fragment: Raw "<item ...>...</item>" text
        reader_cls: FragmentReader implementation to read it with

    Returns:
        GameRecord, or None when the fragment has no usable id
    """
    reader = reader_cls(fragment)

    bgg_id = to_int(reader.root_attr("id"))
    if bgg_id is None or bgg_id <= 0:
        logger.debug("Dropping fragment without usable id", snippet=fragment[:80])
        return None

    return GameRecord(
        bgg_id=bgg_id,
        name=_name(reader),
        yearpublished=to_int(reader.attr("yearpublished", "value")),
        players=Range(
            min=to_int(reader.attr("minplayers", "value")),
            max=to_int(reader.attr("maxplayers", "value")),
        ),
        playtime=Range(
            min=to_int(reader.attr("minplaytime", "value")),
            max=to_int(reader.attr("maxplaytime", "value")),
        ),
        thumbnail=reader.text("thumbnail"),
        image=reader.text("image"),
        categories=_links(reader, CATEGORY_LINK),
        mechanics=_links(reader, MECHANIC_LINK),
        ratings=Ratings(
            average=to_float(reader.attr("average", "value")),
            bayesaverage=to_float(reader.attr("bayesaverage", "value")),
            usersrated=to_int(reader.attr("usersrated", "value")),
        ),
        bgg_url=GameRecord.url_for(bgg_id),
    )


def parse_items(xml: str) -> dict[int, GameRecord]:
    """Parse every <item> of a /thing response, keyed by id."""
    records: dict[int, GameRecord] = {}
    for fragment in split_items(xml):
        record = parse_item(fragment)
        if record is not None:
            records[record.bgg_id] = record
    return records


def extract_collection_ids(xml: str) -> list[int]:
    """Object ids of a /collection response, deduplicated and ascending."""
    return sorted({int(m) for m in _COLLECTION_ITEM_RE.findall(xml)})


def collection_total(xml: str) -> int | None:
    """The totalitems="N" (or total="N") attribute of <items>, if present."""
    match = _COLLECTION_TOTAL_RE.search(xml)
    return int(match.group(1)) if match else None
