"""
BGG thing extractor.

Fetches full game metadata (with statistics) for many ids by
chunking them into /thing requests. Chunks go out strictly one
after another with a fixed pause in between.
"""

import time
from collections.abc import Iterator, Sequence
from datetime import datetime, timezone
from typing import Any

import httpx

from boardgame_shelf.ingestion.contracts import BGGId, GameRecord
from boardgame_shelf.ingestion.extractors.base import (
    BaseExtractor,
    ExtractionResult,
    TransientResponseError,
    body_snippet,
)
from boardgame_shelf.ingestion.markup import parse_items

SOURCE_LABEL = "BoardGameGeek XMLAPI2 /thing?stats=1"


def chunked(ids: Sequence[int], size: int) -> Iterator[list[int]]:
    """Yield consecutive slices of at most size ids, in order."""
    for start in range(0, len(ids), size):
        yield list(ids[start : start + size])


class ThingExtractor(BaseExtractor[dict[int, GameRecord]]):
    """
    Extractor for the /thing endpoint.

    BGG sometimes answers hot-cache requests with a body that has
    no <item> at all; such responses are retried. A chunk that never
    yields items fails the whole extraction.

    Example:
        >>> async with ThingExtractor() as extractor:
        ...     result = await extractor.extract([13, 822])
        ...     print(result.data[13].name)
        CATAN
    """

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "bgg_thing_api"

    def _build_url(self) -> str:
        return f"{self._base_url}/thing"

    def _build_params(self, ids: Sequence[int]) -> dict[str, Any]:
        return {"id": ",".join(str(i) for i in ids), "stats": 1}

    def _validate_response(self, response: httpx.Response, url: str) -> None:
        if "<item" in response.text:
            return
        raise TransientResponseError(
            f"Response without items (status {response.status_code}): "
            f'"{body_snippet(response.text)}"',
            source=self.source_name,
            endpoint=url,
            status_code=response.status_code,
        )

    def _parse_response(self, body: str) -> dict[int, GameRecord]:
        return parse_items(body)

    async def fetch_chunk(self, ids: Sequence[BGGId]) -> dict[int, GameRecord]:
        """
        Fetch and parse one chunk of ids.

        Raises:
            ExtractionError: If the chunk never returns items
        """
        response = await self._get_with_retry(
            self._build_url(),
            params=self._build_params(ids),
            max_attempts=self._fetch_config.thing_max_attempts,
            base_delay=self._fetch_config.thing_base_delay_seconds,
        )
        return self._parse_response(response.text)

    async def extract(self, ids: Sequence[BGGId]) -> ExtractionResult[dict[int, GameRecord]]:
        """
        Extract game records for a list of ids.

        Args:
            ids: Non-empty sequence of BGG ids

        Returns:
            ExtractionResult[dict[int, GameRecord]]: Records keyed by id.
            Ids BGG did not return are simply absent.

        Raises:
            ValueError: If ids is empty
            ExtractionError: If any chunk exhausts its retries
        """
        if not ids:
            raise ValueError("At least one id is required")

        chunk_size = self._fetch_config.chunk_size
        pause = self._fetch_config.chunk_pause_seconds
        records: dict[int, GameRecord] = {}
        start_time = time.perf_counter()
        total_chunks = (len(ids) + chunk_size - 1) // chunk_size

        self._logger.info(
            "Starting thing extraction",
            total_ids=len(ids),
            chunks=total_chunks,
        )

        for number, chunk in enumerate(chunked(ids, chunk_size), 1):
            chunk_records = await self.fetch_chunk(chunk)
            records.update(chunk_records)

            self._logger.debug(
                "Chunk processed",
                progress=f"{number}/{total_chunks}",
                requested=len(chunk),
                parsed=len(chunk_records),
            )

            await self._sleep(pause)

        duration_ms = (time.perf_counter() - start_time) * 1000
        missing = sorted(set(ids) - records.keys())
        if missing:
            self._logger.warning("Ids not returned by BGG", missing=missing)

        self._logger.info(
            "Thing extraction complete",
            total_ids=len(ids),
            parsed=len(records),
            requests=self._requests_made,
            duration_ms=round(duration_ms, 2),
        )

        return ExtractionResult(
            data=records,
            source=SOURCE_LABEL,
            endpoint=self._build_url(),
            duration_ms=duration_ms,
            requests_made=self._requests_made,
            extracted_at=datetime.now(timezone.utc),
        )
