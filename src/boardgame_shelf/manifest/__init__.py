"""
Local games manifest.

Reads and writes the hand-editable list of tracked BGG ids
and their personal overrides.
"""

from boardgame_shelf.manifest.models import ManifestEntry, ManifestError
from boardgame_shelf.manifest.reader import load_manifest, parse_manifest
from boardgame_shelf.manifest.writer import render_manifest, write_manifest

__all__ = [
    "ManifestEntry",
    "ManifestError",
    "load_manifest",
    "parse_manifest",
    "render_manifest",
    "write_manifest",
]
