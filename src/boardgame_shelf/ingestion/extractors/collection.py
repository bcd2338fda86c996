"""
BGG collection extractor.

Fetches the ids of the board games a user owns. BGG builds
collection exports asynchronously: the first requests usually get
202 Accepted while the export is queued, so the extractor keeps
polling with a linearly growing delay.
"""

import time
from datetime import datetime, timezone
from typing import Any

import httpx

from boardgame_shelf.ingestion.extractors.base import (
    AuthorizationError,
    BaseExtractor,
    ExtractionResult,
    TransientResponseError,
    body_snippet,
)
from boardgame_shelf.ingestion.markup import collection_total, extract_collection_ids


class CollectionExtractor(BaseExtractor[list[int]]):
    """
    Extractor for the /collection endpoint.

    Always asks for owned base games only: expansions can slip
    into subtype=boardgame results, so they are excluded explicitly.

    Example:
        >>> async with CollectionExtractor(token="...") as extractor:
        ...     result = await extractor.extract("alice")
        ...     print(result.data)
        [13, 822, 9209]
    """

    SUBTYPE = "boardgame"
    EXCLUDED_SUBTYPE = "boardgameexpansion"

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "bgg_collection_api"

    def _build_url(self) -> str:
        return f"{self._base_url}/collection"

    def _build_params(self, username: str) -> dict[str, Any]:
        return {
            "username": username,
            "own": 1,
            "subtype": self.SUBTYPE,
            "excludesubtype": self.EXCLUDED_SUBTYPE,
        }

    def _validate_response(self, response: httpx.Response, url: str) -> None:
        text = response.text

        if response.status_code == 202:
            self._logger.info("Collection is being generated, waiting")
            raise TransientResponseError(
                "Collection export still being generated",
                source=self.source_name,
                endpoint=url,
                status_code=202,
            )

        if response.status_code == 401:
            snippet = body_snippet(text)
            raise AuthorizationError(
                "BGG returned 401 Unauthorized; check the API token. "
                f'First bytes: "{snippet}"',
                source=self.source_name,
                endpoint=url,
                status_code=401,
            )

        if "<items" in text:
            return

        self._logger.warning(
            "Unexpected collection response",
            status_code=response.status_code,
            snippet=body_snippet(text),
        )
        raise TransientResponseError(
            f"Unexpected collection response (status {response.status_code})",
            source=self.source_name,
            endpoint=url,
            status_code=response.status_code,
        )

    def _parse_response(self, body: str) -> list[int]:
        return extract_collection_ids(body)

    async def extract(
        self,
        username: str,
        *,
        token: str | None = None,
    ) -> ExtractionResult[list[int]]:
        """
        Extract the owned-game ids of a user's collection.

        Args:
            username: BGG account name
            token: Bearer token (defaults to the extractor's token)

        Returns:
            ExtractionResult[list[int]]: Unique ids in ascending order

        Raises:
            ValueError: If no token is available
            AuthorizationError: If BGG rejects the token
            ExtractionError: If no usable response arrives within the attempt ceiling
        """
        if not (token or self._token):
            raise ValueError("A BGG API token is required to read collections")

        url = self._build_url()
        params = self._build_params(username)
        start_time = time.perf_counter()

        self._logger.info("Starting collection extraction", username=username)

        response = await self._get_with_retry(
            url,
            params=params,
            max_attempts=self._fetch_config.collection_max_attempts,
            base_delay=self._fetch_config.collection_base_delay_seconds,
            token=token,
        )

        ids = self._parse_response(response.text)
        duration_ms = (time.perf_counter() - start_time) * 1000

        if not ids:
            total = collection_total(response.text)
            self._logger.warning(
                "No objectid items found; is the collection public and filtered correctly?",
                username=username,
                total="unknown" if total is None else total,
            )

        self._logger.info(
            "Collection extraction successful",
            username=username,
            games=len(ids),
            requests=self._requests_made,
            duration_ms=round(duration_ms, 2),
        )

        return ExtractionResult(
            data=ids,
            source=self.source_name,
            endpoint=str(response.request.url),
            duration_ms=duration_ms,
            requests_made=self._requests_made,
            extracted_at=datetime.now(timezone.utc),
        )
