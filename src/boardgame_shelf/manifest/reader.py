"""
Reader for the local games manifest.

The manifest is a tiny YAML subset, so it is parsed line by line
instead of pulling in a YAML library:

    games:
      - bgg_id: 13
        note: "First game we bought"  # comments may follow values
      # comments and blank lines are ignored
      - bgg_id: 822

Parsing is best-effort: lines that are not key/value pairs are
skipped rather than rejected.
"""

import re
from pathlib import Path

from boardgame_shelf.logger import get_logger
from boardgame_shelf.manifest.models import (
    ID_FIELD,
    LIST_KEY,
    NOTE_FIELD,
    ManifestEntry,
    ManifestError,
)

logger = get_logger(__name__, component="manifest")

_QUOTED_RE = re.compile(r"""(["'])(.*?)\1\s*(?:#.*)?""")
_ID_RE = re.compile(r"([0-9]+)(?:\.0*)?")


def clean_value(raw: str, *, strip_comment: bool = False) -> str:
    """
    Trim a value and strip matching quotes.

    A comment after a closing quote is always dropped. On unquoted
    values a trailing " # comment" is only dropped when strip_comment
    is set, so free text such as "Best game #1 ever" survives.
    """
    value = raw.strip()
    quoted = _QUOTED_RE.fullmatch(value)
    if quoted:
        return quoted.group(2)
    if strip_comment:
        if value.startswith("#"):
            return ""
        comment = value.find(" #")
        if comment != -1:
            value = value[:comment].rstrip()
    return value


def split_pair(text: str, *, strip_comment: bool = False) -> tuple[str, str] | None:
    """Split "key: value"; None for lines without a colon or key."""
    key, sep, value = text.partition(":")
    key = key.strip()
    if not sep or not key:
        return None
    return key, clean_value(value, strip_comment=strip_comment)


def parse_id(raw: str | None) -> int | None:
    """Positive id from "13" or "13.0" (comment allowed); None otherwise."""
    if raw is None:
        return None
    match = _ID_RE.fullmatch(clean_value(raw, strip_comment=True))
    if not match:
        return None
    bgg_id = int(match.group(1))
    return bgg_id if bgg_id > 0 else None


def _parse_items(text: str) -> list[dict[str, str]]:
    items: list[dict[str, str]] = []
    current: dict[str, str] | None = None
    in_list = False

    def flush() -> None:
        nonlocal current
        if current is not None:
            items.append(current)
        current = None

    for raw in text.splitlines():
        line = raw.replace("\t", "  ").rstrip()
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        # Top-level key: opens or closes the games list
        if not line[0].isspace() and not stripped.startswith("-"):
            flush()
            pair = split_pair(stripped)
            in_list = pair is not None and pair[0] == LIST_KEY
            continue

        if not in_list:
            continue

        if stripped == "-" or stripped.startswith("- "):
            flush()
            current = {}
            pair = split_pair(stripped[1:], strip_comment=True)
            if pair:
                current[pair[0]] = pair[1]
            continue

        if current is not None and line[0].isspace():
            pair = split_pair(stripped)
            if pair:
                current[pair[0]] = pair[1]

    flush()
    return items


def _to_entry(item: dict[str, str], position: int) -> ManifestEntry | None:
    raw_id = item.get(ID_FIELD)
    bgg_id = parse_id(raw_id)
    if bgg_id is None:
        logger.warning("Skipping manifest item without a valid id", position=position, value=raw_id)
        return None

    overrides = {k: v for k, v in item.items() if k not in (ID_FIELD, NOTE_FIELD)}
    return ManifestEntry(bgg_id=bgg_id, note=item.get(NOTE_FIELD), overrides=overrides)


def parse_manifest(text: str) -> list[ManifestEntry]:
    """
    Parse manifest text into entries, preserving file order.

    Args:
        text: Manifest contents

    Returns:
        list[ManifestEntry]: Entries with integer ids. May be empty;
        callers that need at least one entry must check.
    """
    entries: list[ManifestEntry] = []
    seen: set[int] = set()

    for position, item in enumerate(_parse_items(text), 1):
        entry = _to_entry(item, position)
        if entry is None:
            continue
        if entry.bgg_id in seen:
            logger.warning("Duplicate manifest entry ignored", bgg_id=entry.bgg_id)
            continue
        seen.add(entry.bgg_id)
        entries.append(entry)

    logger.debug("Parsed manifest", entries=len(entries))
    return entries


def load_manifest(path: Path) -> list[ManifestEntry]:
    """
    Read and parse a manifest file.

    Raises:
        ManifestError: If the file cannot be read
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    return parse_manifest(text)
