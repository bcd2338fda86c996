"""
Markup extraction for BGG XML responses.

Pattern-based readers and parsers that pull game fields and
collection ids out of XML without a full parser.
"""

from boardgame_shelf.ingestion.markup.parsers import (
    collection_total,
    extract_collection_ids,
    parse_item,
    parse_items,
)
from boardgame_shelf.ingestion.markup.reader import (
    FragmentReader,
    RegexFragmentReader,
    decode_entities,
    split_items,
)

__all__ = [
    "FragmentReader",
    "RegexFragmentReader",
    "collection_total",
    "decode_entities",
    "extract_collection_ids",
    "parse_item",
    "parse_items",
    "split_items",
]
