"""Tests for merging and publishing the games document."""

import json
from datetime import datetime, timezone
from pathlib import Path

from boardgame_shelf.ingestion.contracts import GameRecord, Range
from boardgame_shelf.ingestion.extractors.thing import SOURCE_LABEL
from boardgame_shelf.manifest import ManifestEntry
from boardgame_shelf.publish import (
    DocumentWriter,
    OutputDocument,
    build_document,
    merge_game,
    sort_games,
)

FIXED_TIME = datetime(2026, 10, 19, 8, 30, 15, 123456, tzinfo=timezone.utc)


def _record(bgg_id: int, name: str | None) -> GameRecord:
    return GameRecord(bgg_id=bgg_id, name=name, bgg_url=GameRecord.url_for(bgg_id))


class TestMergeGame:
    """Tests for merging one entry with its record."""

    def test_remote_fields_and_note(self) -> None:
        """Test remote fields are copied and the note is added."""
        record = GameRecord(bgg_id=13, name="CATAN", players=Range(min=3, max=4))

        merged = merge_game(ManifestEntry(bgg_id=13, note="Ours"), record)

        assert merged["bgg_id"] == 13
        assert merged["name"] == "CATAN"
        assert merged["players"] == {"min": 3, "max": 4}
        assert merged["note"] == "Ours"

    def test_note_defaults_to_empty(self) -> None:
        """Test a missing note is published as an empty string."""
        merged = merge_game(ManifestEntry(bgg_id=13), _record(13, "CATAN"))

        assert merged["note"] == ""

    def test_override_wins(self) -> None:
        """Test local fields replace remote ones and extras are added."""
        entry = ManifestEntry(bgg_id=7, overrides={"name": "Override", "shelf": "B"})

        merged = merge_game(entry, _record(7, "Remote"))

        assert merged["name"] == "Override"
        assert merged["shelf"] == "B"

    def test_override_cannot_replace_id(self) -> None:
        """Test the id always comes from the entry."""
        entry = ManifestEntry(bgg_id=7, overrides={"bgg_id": "8"})

        assert merge_game(entry, _record(7, "Seven"))["bgg_id"] == 7

    def test_missing_record(self) -> None:
        """Test a game BGG did not return is still published."""
        merged = merge_game(ManifestEntry(bgg_id=404, note="lost"), None)

        assert merged["bgg_id"] == 404
        assert merged["name"] is None
        assert merged["yearpublished"] is None
        assert merged["players"] == {"min": None, "max": None}
        assert merged["ratings"] == {"average": None, "bayesaverage": None, "usersrated": None}
        assert merged["thumbnail"] is None
        assert merged["note"] == "lost"


class TestSortGames:
    """Tests for name ordering."""

    def test_case_insensitive_with_unnamed_first(self) -> None:
        """Test unnamed games lead and names compare case-insensitively."""
        games = [{"name": "Zeta"}, {"name": "alpha"}, {"name": None}, {"name": "Beta"}]

        assert [g["name"] for g in sort_games(games)] == [None, "alpha", "Beta", "Zeta"]

    def test_stable_for_equal_names(self) -> None:
        """Test games with equal names keep their input order."""
        games = [{"name": "Same", "bgg_id": 2}, {"name": "Same", "bgg_id": 1}]

        assert [g["bgg_id"] for g in sort_games(games)] == [2, 1]


class TestBuildDocument:
    """Tests for document assembly."""

    def test_build(self) -> None:
        """Test every entry is merged and sorted."""
        entries = [ManifestEntry(bgg_id=2), ManifestEntry(bgg_id=1, note="n")]
        records = {1: _record(1, "Zeta"), 2: _record(2, "alpha")}

        document = build_document(entries, records, generated_at=FIXED_TIME)

        assert document.source == SOURCE_LABEL
        assert [g["bgg_id"] for g in document.games] == [2, 1]
        assert document.games[1]["note"] == "n"

    def test_idempotent(self) -> None:
        """Test identical inputs give identical output."""
        entries = [ManifestEntry(bgg_id=1), ManifestEntry(bgg_id=2, overrides={"x": "y"})]
        records = {1: _record(1, "One")}
        writer = DocumentWriter(output_path=Path("unused.json"))

        first = writer.render(build_document(entries, records, generated_at=FIXED_TIME))
        second = writer.render(build_document(entries, records, generated_at=FIXED_TIME))

        assert first == second

    def test_timestamp_format(self) -> None:
        """Test generated_at is UTC with milliseconds and a Z suffix."""
        document = OutputDocument(source="s", generated_at=FIXED_TIME)

        assert document.model_dump(mode="json")["generated_at"] == "2026-10-19T08:30:15.123Z"

    def test_default_timestamp(self) -> None:
        """Test generated_at defaults to now."""
        document = build_document([], {})

        assert document.generated_at.tzinfo is not None
        assert document.model_dump(mode="json")["generated_at"].endswith("Z")


class TestDocumentWriter:
    """Tests for writing the games document."""

    def test_write(self, tmp_path: Path) -> None:
        """Test the file is valid JSON and no temp files remain."""
        output = tmp_path / "site" / "games.json"
        document = build_document(
            [ManifestEntry(bgg_id=1406, note='With "rules"')],
            {1406: _record(1406, "Monopoly & Friends")},
            generated_at=FIXED_TIME,
        )

        path = DocumentWriter(output_path=output).write(document)

        assert path == output
        text = output.read_text(encoding="utf-8")
        assert text.endswith("\n")
        data = json.loads(text)
        assert data["generated_at"] == "2026-10-19T08:30:15.123Z"
        assert data["source"] == SOURCE_LABEL
        assert data["games"][0]["name"] == "Monopoly & Friends"
        assert data["games"][0]["note"] == 'With "rules"'
        assert [p.name for p in output.parent.iterdir()] == ["games.json"]

    def test_non_ascii_kept(self, tmp_path: Path) -> None:
        """Test non-ASCII names are written unescaped."""
        output = tmp_path / "games.json"
        document = build_document(
            [ManifestEntry(bgg_id=5)], {5: _record(5, "Café International")}
        )

        DocumentWriter(output_path=output).write(document)

        assert "Café International" in output.read_text(encoding="utf-8")

    def test_default_path_from_settings(self) -> None:
        """Test the configured output path is used by default."""
        assert DocumentWriter().output_path == Path("site/games.json")
