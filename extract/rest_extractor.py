"""
REST API data source extractor with a fluent request configuration.

This module provides:
- URL construction from a base URL and an endpoint path
- Builder-style configuration (auth, headers, query, method, body)
- Retrieval as structured values, text, bytes or zero-copy raw bytes
- Decode errors that carry a bounded snippet of the offending body

No retry or backoff happens here. Every failure is raised immediately;
callers layer retries themselves.
"""

import base64
import copy
import httpx
from typing import Any, Iterable, Mapping, Optional, Tuple, Union
from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_json
from extract.base import Extractor
from extract.request import RequestTemplate
from extract.types import Checkpoint
from core.config import settings
from core.exceptions import (
    DecodeError,
    ExtractOperationError,
    TransportError,
    UnsupportedOperationError
)
import logging

logger = logging.getLogger(__name__)

# Characters of the raw body embedded in a DecodeError message
RESPONSE_SNIPPET_CHARS = 1024

HTTP_METHODS = frozenset(
    {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE", "CONNECT"}
)


def join_url(base_url: str, endpoint: str) -> str:
    """Join base and endpoint with exactly one '/' between them"""
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors()[:5]:
        location = ".".join(str(p) for p in detail["loc"]) or "<root>"
        parts.append(f"{location}: {detail['msg']}")
    if error.error_count() > 5:
        parts.append(f"... {error.error_count() - 5} more")
    return "; ".join(parts)


class RestExtractor(Extractor):
    """
    Extract data from a REST endpoint.

    Every ``with_*`` method returns a new extractor carrying an updated
    request template; the original is left untouched. A derived extractor
    shares the HTTP client of the one it was derived from.

    Features:
    - Basic and bearer authentication
    - Arbitrary headers and query parameters
    - Any HTTP method, with raw or JSON bodies
    - Structured decoding into pydantic-compatible shapes

    Attributes:
        base_url: Base URL the extractor was created with
        endpoint: Endpoint path the extractor was created with
    """

    def __init__(
        self,
        base_url: str,
        endpoint: str,
        *,
        source_name: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if client is not None and transport is not None:
            raise ValueError("Pass either client or transport, not both")

        self.base_url = base_url
        self.endpoint = endpoint
        self._name = source_name or "RestExtractor"
        self._client = client or httpx.AsyncClient(
            timeout=settings.HTTP_TIMEOUT if timeout is None else timeout,
            transport=transport,
            headers={"User-Agent": settings.USER_AGENT}
        )
        self._request = RequestTemplate(url=join_url(base_url, endpoint))

    def __repr__(self) -> str:
        return f"RestExtractor(method={self._request.method!r}, url={self._request.url!r})"

    async def __aenter__(self) -> "RestExtractor":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close this extractor's HTTP client"""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _evolve(self, request: RequestTemplate) -> "RestExtractor":
        derived = copy.copy(self)
        derived._request = request
        return derived

    def with_basic_auth(self, username: str, password: str) -> "RestExtractor":
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return self.with_header("Authorization", f"Basic {token}")

    def with_auth_token(self, token: str) -> "RestExtractor":
        return self.with_header("Authorization", f"Bearer {token}")

    def with_header(self, key: str, value: str) -> "RestExtractor":
        """Set a header; an existing header with the same name is overwritten"""
        return self._evolve(self._request.with_header(key, value))

    def with_query_param(
        self,
        query: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]
    ) -> "RestExtractor":
        """Append one or more query parameters"""
        pairs = query.items() if isinstance(query, Mapping) else query
        return self._evolve(self._request.with_params(pairs))

    def with_method(self, method: str) -> "RestExtractor":
        """
        Set the HTTP method. Headers, query parameters and body are kept.

        Unknown method names fall back to GET.
        """
        parsed = method.strip().upper()
        if parsed not in HTTP_METHODS:
            logger.warning(f"Unknown HTTP method {method!r} for {self._name}, using GET")
            parsed = "GET"
        return self._evolve(self._request.with_method(parsed))

    def with_body(self, body: Union[str, bytes]) -> "RestExtractor":
        """Attach a raw body"""
        return self._evolve(self._request.with_content(body))

    def with_json_body(self, value: Any) -> "RestExtractor":
        """Attach a JSON body and set the Content-Type header"""
        request = self._request.with_content(to_json(value))
        return self._evolve(request.with_header("Content-Type", "application/json"))

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def request(self) -> RequestTemplate:
        return self._request

    @property
    def url(self) -> str:
        """Full target URL including query parameters"""
        return str(self.build_request().url)

    def build_request(self) -> httpx.Request:
        return self._request.build(self._client)

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    async def _send(self) -> httpx.Response:
        request = self.build_request()
        logger.debug(f"{self._name}: {request.method} {request.url}")

        try:
            response = await self._client.send(request)
        except httpx.RequestError as e:
            raise TransportError(
                "HTTP request failed",
                context={
                    "url": str(request.url),
                    "method": request.method,
                    "source_name": self._name
                },
                original_exception=e
            )

        if response.is_error:
            logger.warning(
                f"{self._name}: {request.method} {request.url} "
                f"returned status {response.status_code}"
            )
        return response

    async def ping(self) -> int:
        """
        Send the configured request and report its status.

        Non-success statuses are logged, not raised. Only transport
        failures raise.

        Returns:
            HTTP status code of the response
        """
        response = await self._send()
        if response.is_success:
            logger.info(f"Ping successful with status code: {response.status_code}")
        else:
            logger.warning(f"Ping failed with status code: {response.status_code}")
        return response.status_code

    @classmethod
    async def close(cls) -> None:
        # Connections live in each instance's client; see aclose()
        logger.info("Closing RestExtractor resources.")

    async def extract_structured(self, shape: Any = None) -> Any:
        """
        Fetch the response and decode its JSON body.

        Args:
            shape: Target type for validation; ``None`` returns plain JSON values

        Raises:
            TransportError: If the request could not be sent
            ExtractOperationError: If the body is empty
            DecodeError: If the body is not valid JSON or does not fit ``shape``
        """
        response = await self._send()
        text = response.text

        if not text.strip():
            raise ExtractOperationError(
                f"Empty response body (status: {response.status_code})",
                context={
                    "url": str(response.request.url),
                    "status_code": response.status_code,
                    "source_name": self._name
                }
            )

        adapter = TypeAdapter(Any if shape is None else shape)
        try:
            return adapter.validate_json(text)
        except ValidationError as e:
            snippet = text[:RESPONSE_SNIPPET_CHARS]
            raise DecodeError(
                f"Failed to parse JSON: {_describe_validation_error(e)}. "
                f"Response snippet: {snippet}",
                context={
                    "url": str(response.request.url),
                    "status_code": response.status_code,
                    "body_length": len(text),
                    "source_name": self._name
                },
                original_exception=e
            )

    async def extract_text(self) -> str:
        response = await self._send()
        return response.text

    async def extract_bytes(self) -> bytes:
        response = await self._send()
        return response.content

    async def extract_raw(self) -> memoryview:
        """Response body as a read-only view, without copying"""
        response = await self._send()
        return memoryview(response.content)

    def source_name(self) -> str:
        return self._name

    async def metadata(self) -> str:
        raise UnsupportedOperationError(
            "RestExtractor does not provide source metadata",
            context={"source_name": self._name, "url": self._request.url}
        )

    def supports_incremental(self) -> bool:
        return False

    def checkpoint(self) -> Optional[Checkpoint]:
        return None

    def set_checkpoint(self, checkpoint: Checkpoint) -> None:
        raise UnsupportedOperationError(
            "Source does not support incremental",
            context={"source_name": self._name, "checkpoint_value": checkpoint.value}
        )
