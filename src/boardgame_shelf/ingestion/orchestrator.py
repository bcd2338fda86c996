"""
Pipeline orchestrators.

BuildOrchestrator turns the manifest into the published games
document. CollectionSyncOrchestrator regenerates the manifest from
a user's owned collection. Both run sequentially under a
wall-clock limit, and write their output only once every step
has succeeded.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TypeVar
from uuid import UUID, uuid4

from boardgame_shelf.config import get_settings
from boardgame_shelf.ingestion.extractors import CollectionExtractor, ThingExtractor
from boardgame_shelf.logger import get_logger
from boardgame_shelf.manifest import (
    ManifestEntry,
    ManifestError,
    load_manifest,
    write_manifest,
)
from boardgame_shelf.publish import DocumentWriter, build_document

R = TypeVar("R")


class PipelineTimeoutError(Exception):
    """Raised when a run exceeds its wall-clock limit."""

    pass


@dataclass
class BuildResult:
    """Result of a complete build run."""

    run_id: UUID
    started_at: datetime
    completed_at: datetime
    total_entries: int
    games_written: int
    requests_made: int
    output_path: Path
    missing_ids: list[int] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Get total duration in seconds."""
        return (self.completed_at - self.started_at).total_seconds()


@dataclass
class SyncResult:
    """Result of a collection sync run."""

    run_id: UUID
    started_at: datetime
    completed_at: datetime
    username: str
    ids: list[int]
    manifest_path: Path
    preserved_entries: int = 0

    @property
    def duration_seconds(self) -> float:
        """Get total duration in seconds."""
        return (self.completed_at - self.started_at).total_seconds()


async def _with_deadline(coro: Awaitable[R], timeout: float, what: str) -> R:
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise PipelineTimeoutError(f"{what} did not finish within {timeout:.0f}s") from e


class BuildOrchestrator:
    """
    Runs manifest -> /thing fetch -> merge -> JSON document.

    Example:
        >>> result = await BuildOrchestrator().run()
        >>> result.games_written
        42
    """

    def __init__(
        self,
        *,
        manifest_path: Path | None = None,
        output_path: Path | None = None,
        extractor: ThingExtractor | None = None,
        run_timeout: float | None = None,
    ) -> None:
        self._settings = get_settings()
        self._manifest_path = manifest_path or self._settings.paths.manifest_path
        self._writer = DocumentWriter(output_path=output_path)
        self._extractor = extractor
        self._run_timeout = run_timeout or self._settings.fetch.run_timeout_seconds
        self._logger = get_logger(__name__, component="build")

    async def run(self) -> BuildResult:
        """
        Build and write the games document.

        Raises:
            ManifestError: If the manifest is unreadable or has no entries
            ExtractionError: If a /thing chunk never returns items
            PipelineTimeoutError: If the run exceeds its time limit
        """
        return await _with_deadline(self._run(), self._run_timeout, "Build")

    async def _run(self) -> BuildResult:
        run_id = uuid4()
        started_at = datetime.now(timezone.utc)

        entries = load_manifest(self._manifest_path)
        if not entries:
            raise ManifestError(f"No bgg_id entries found in {self._manifest_path}")

        ids = [entry.bgg_id for entry in entries]

        self._logger.info(
            "Starting build",
            run_id=str(run_id),
            manifest=str(self._manifest_path),
            total_games=len(ids),
        )

        extractor = self._extractor or ThingExtractor()
        async with extractor:
            fetched = await extractor.extract(ids)

        document = build_document(entries, fetched.data, source=fetched.source)
        output_path = self._writer.write(document)

        result = BuildResult(
            run_id=run_id,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            total_entries=len(entries),
            games_written=len(document.games),
            requests_made=fetched.requests_made,
            output_path=output_path,
            missing_ids=[i for i in ids if i not in fetched.data],
        )

        self._logger.info(
            "Build complete",
            run_id=str(run_id),
            duration_seconds=result.duration_seconds,
            games_written=result.games_written,
            missing=len(result.missing_ids),
        )

        return result


class CollectionSyncOrchestrator:
    """
    Runs /collection fetch -> manifest file.

    Notes and overrides of games still owned are kept unless
    keep_overrides is False.
    """

    def __init__(
        self,
        *,
        manifest_path: Path | None = None,
        extractor: CollectionExtractor | None = None,
        run_timeout: float | None = None,
    ) -> None:
        self._settings = get_settings()
        self._manifest_path = manifest_path or self._settings.paths.manifest_path
        self._extractor = extractor
        self._run_timeout = run_timeout or self._settings.fetch.run_timeout_seconds
        self._logger = get_logger(__name__, component="collection_sync")

    async def run(
        self,
        username: str,
        *,
        token: str | None = None,
        keep_overrides: bool = True,
    ) -> SyncResult:
        """
        Regenerate the manifest from a user's owned games.

        Raises:
            AuthorizationError: If BGG rejects the token
            ExtractionError: If the collection never becomes available
            PipelineTimeoutError: If the run exceeds its time limit
        """
        return await _with_deadline(
            self._run(username, token=token, keep_overrides=keep_overrides),
            self._run_timeout,
            "Collection sync",
        )

    def _existing_entries(self) -> list[ManifestEntry]:
        if not self._manifest_path.exists():
            return []
        return load_manifest(self._manifest_path)

    async def _run(self, username: str, *, token: str | None, keep_overrides: bool) -> SyncResult:
        run_id = uuid4()
        started_at = datetime.now(timezone.utc)

        self._logger.info("Starting collection sync", run_id=str(run_id), username=username)

        extractor = self._extractor or CollectionExtractor()
        async with extractor:
            fetched = await extractor.extract(username, token=token)

        ids = fetched.data
        existing = self._existing_entries() if keep_overrides else []
        owned = set(ids)
        preserved = sum(
            1 for e in existing if e.bgg_id in owned and (e.note is not None or e.overrides)
        )

        write_manifest(self._manifest_path, ids, existing)

        result = SyncResult(
            run_id=run_id,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            username=username,
            ids=ids,
            manifest_path=self._manifest_path,
            preserved_entries=preserved,
        )

        self._logger.info(
            "Collection sync complete",
            run_id=str(run_id),
            games=len(ids),
            preserved_entries=preserved,
            duration_seconds=result.duration_seconds,
        )

        return result
