"""
Immutable HTTP request template used by the REST extractor.

The template keeps every request component as a named field and is
rebuilt wholesale on each change, so changing one part (for example the
HTTP method) never drops headers, query parameters or the body.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple, Union
from core.exceptions import RequestBuildError
import httpx

Pair = Tuple[str, str]


@dataclass(frozen=True)
class RequestTemplate:
    """Everything needed to build one HTTP request"""

    url: str
    method: str = "GET"
    headers: Tuple[Pair, ...] = ()
    params: Tuple[Pair, ...] = ()
    content: Optional[bytes] = None

    def with_method(self, method: str) -> "RequestTemplate":
        return replace(self, method=method)

    def with_header(self, name: str, value: str) -> "RequestTemplate":
        """Set a header, replacing any existing value (names are case-insensitive)"""
        key = name.lower()
        headers = tuple((k, v) for k, v in self.headers if k.lower() != key)
        return replace(self, headers=headers + ((name, value),))

    def with_params(self, pairs: Iterable[Tuple[str, object]]) -> "RequestTemplate":
        """Append query parameters, keeping earlier ones"""
        added = tuple((str(k), str(v)) for k, v in pairs)
        return replace(self, params=self.params + added)

    def with_content(self, content: Union[str, bytes, None]) -> "RequestTemplate":
        if isinstance(content, str):
            content = content.encode("utf-8")
        return replace(self, content=content)

    def header(self, name: str) -> Optional[str]:
        key = name.lower()
        for k, v in self.headers:
            if k.lower() == key:
                return v
        return None

    def build(self, client: httpx.AsyncClient) -> httpx.Request:
        """
        Build a fresh request. The template itself is never consumed.

        Raises:
            RequestBuildError: If the URL, a header or the body is invalid
        """
        try:
            request = client.build_request(
                self.method,
                self.url,
                headers=list(self.headers),
                params=list(self.params) or None,
                content=self.content
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise RequestBuildError(
                "Could not build request from template",
                context={"url": self.url, "method": self.method},
                original_exception=e
            )

        if request.url.scheme not in ("http", "https"):
            raise RequestBuildError(
                f"Unsupported URL scheme: {request.url.scheme or '<none>'}",
                context={"url": self.url, "method": self.method}
            )

        return request
