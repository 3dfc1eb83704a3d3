from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from ..errors import FetchError

_RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})
_CHUNK_SIZE = 64 * 1024


class HttpTransport:
    """Streams a URL over HTTP(S). One ``open`` is one download attempt."""

    def __init__(self, client: httpx.Client | None = None, timeout: float = 60) -> None:
        self._client = client
        self._timeout = timeout

    @contextmanager
    def open(self, url: str) -> Iterator[tuple[Iterator[bytes], int | None]]:
        """Yield ``(chunks, expected_size)`` for ``url``.

        Raises:
            FetchError: On network failure, timeout, or a non-2xx response.
        """
        client = self._client or httpx.Client(timeout=self._timeout, follow_redirects=True)
        try:
            with client.stream("GET", url) as response:
                if response.is_error:
                    status = response.status_code
                    raise FetchError(
                        f"HTTP {status} fetching {url}",
                        url=url,
                        retryable=status >= 500 or status in _RETRYABLE_CLIENT_STATUSES,
                    )
                yield _iter_chunks(response, url), _content_length(response)
        except httpx.HTTPError as e:
            raise FetchError(f"Network error fetching {url}: {e}", url=url) from e
        finally:
            if self._client is None:
                client.close()


def _iter_chunks(response: httpx.Response, url: str) -> Iterator[bytes]:
    try:
        yield from response.iter_bytes(_CHUNK_SIZE)
    except httpx.HTTPError as e:
        raise FetchError(f"Network error reading {url}: {e}", url=url) from e


def _content_length(response: httpx.Response) -> int | None:
    value = response.headers.get("content-length")
    if value is None or not value.isdigit():
        return None
    return int(value)
