"""
Base extractor with retry logic, pacing hooks, and error handling.

Provides a foundation for the BGG API extractors: a shared HTTP
client, linear-backoff retries driven by tenacity, structured
logging, and result wrapping with metadata.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, Field
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from boardgame_shelf.config import FetchConfig, get_settings
from boardgame_shelf.logger import get_logger

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


class ExtractionError(Exception):
    """Base exception for extraction errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class TransientResponseError(ExtractionError):
    """Raised for responses worth retrying (still generating, empty, unexpected)."""

    pass


class AuthorizationError(ExtractionError):
    """Raised when the API rejects the credential. Never retried."""

    pass


class ExtractionResult(BaseModel, Generic[T]):
    """
    Wrapper for extraction results with metadata.

    Provides consistent structure for all extraction outputs,
    including timing, source tracking and request counts.
    """

    data: T
    source: str
    endpoint: str
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: float | None = None
    requests_made: int = 0


def body_snippet(text: str, length: int = 120) -> str:
    """First bytes of a response body with whitespace collapsed."""
    return " ".join(text[:length].split())


class BaseExtractor(ABC, Generic[T]):
    """
    Abstract base class for BGG extractors.

    Provides common functionality including:
    - HTTP client management
    - Retry logic with linear backoff
    - An injectable sleep, used for backoff and pacing alike
    - Structured logging

    Subclasses must implement:
    - source_name: Identifier for the data source
    - extract(): Main extraction logic
    - _parse_response(): Response body parsing
    """

    def __init__(
        self,
        *,
        fetch_config: FetchConfig | None = None,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        sleep: SleepFunc | None = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            fetch_config: Chunking/retry configuration (uses settings if None)
            base_url: API base URL (uses settings if None)
            token: Bearer token (uses settings if None)
            timeout: HTTP request timeout in seconds
            sleep: Coroutine used for every wait (defaults to asyncio.sleep)
        """
        settings = get_settings()
        self._fetch_config = fetch_config or settings.fetch
        self._base_url = (base_url or settings.bgg.base_url).rstrip("/")
        if token is None and settings.bgg.token is not None:
            token = settings.bgg.token.get_secret_value()
        self._token = token or None
        self._timeout = timeout or settings.bgg.timeout_seconds
        self._user_agent = settings.bgg.user_agent
        self._sleep: SleepFunc = sleep or asyncio.sleep
        self._requests_made = 0
        self._logger = get_logger(
            self.__class__.__name__,
            component="extractor",
            source=self.source_name,
        )
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return identifier for this data source."""
        ...

    @property
    def requests_made(self) -> int:
        """Number of HTTP requests issued so far."""
        return self._requests_made

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": self._user_agent,
                    "Accept": "application/xml,text/xml;q=0.9,*/*;q=0.8",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseExtractor[T]":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _auth_headers(self, token: str | None = None) -> dict[str, str]:
        token = token or self._token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _create_retrying(self, max_attempts: int, base_delay: float) -> AsyncRetrying:
        """Create a retry controller waiting base_delay * attempt between tries."""
        return AsyncRetrying(
            retry=retry_if_exception_type((TransientResponseError, httpx.TransportError)),
            stop=stop_after_attempt(max_attempts),
            wait=wait_incrementing(start=base_delay, increment=base_delay),
            before_sleep=self._log_retry_attempt,
            sleep=self._sleep,
        )

    def _log_retry_attempt(self, retry_state: RetryCallState) -> None:
        """Log retry attempts for observability."""
        self._logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _get_with_retry(
        self,
        url: str,
        *,
        params: dict[str, Any],
        max_attempts: int,
        base_delay: float,
        token: str | None = None,
    ) -> httpx.Response:
        """
        GET a URL until _validate_response accepts it.

        Args:
            url: Request URL
            params: Query parameters
            max_attempts: Attempt ceiling, first try included
            base_delay: Linear backoff step in seconds
            token: Bearer token overriding the extractor's own

        Returns:
            httpx.Response: The accepted response

        Raises:
            AuthorizationError: If the credential is rejected (not retried)
            ExtractionError: If every attempt was transient
        """
        headers = self._auth_headers(token)
        response: httpx.Response | None = None

        try:
            async for attempt in self._create_retrying(max_attempts, base_delay):
                with attempt:
                    self._logger.debug("Making request", url=url, params=params)
                    self._requests_made += 1
                    response = await self.client.get(url, params=params, headers=headers)
                    self._validate_response(response, url)
        except RetryError as e:
            self._logger.error(
                "Request failed after retries",
                url=url,
                attempts=max_attempts,
            )
            raise ExtractionError(
                f"{self.source_name}: no usable response after {max_attempts} attempts",
                source=self.source_name,
                endpoint=url,
                status_code=response.status_code if response is not None else None,
                original_error=e.last_attempt.exception(),
            ) from e

        assert response is not None
        return response

    @abstractmethod
    def _validate_response(self, response: httpx.Response, url: str) -> None:
        """
        Decide whether a response is usable.

        Must raise TransientResponseError for responses worth
        retrying and AuthorizationError for rejected credentials.
        """
        ...

    @abstractmethod
    async def extract(self, *args: Any, **kwargs: Any) -> ExtractionResult[T]:
        """
        Execute extraction logic.

        Returns:
            ExtractionResult[T]: Wrapped extraction result with metadata
        """
        ...

    @abstractmethod
    def _parse_response(self, body: str) -> T:
        """
        Parse a raw response body.

        Args:
            body: Response text

        Returns:
            T: Parsed data
        """
        ...
