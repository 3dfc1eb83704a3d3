"""RetryingDownloader: bounded-retry plugin downloads into a temp file."""

from __future__ import annotations

import logging
import os
import platform
import tempfile
import time
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import tenacity

from ..errors import DownloadError, FetchError
from ..observers import NoProgress

if TYPE_CHECKING:
    from ..models.plugin import PluginRequirement
    from ..observers import ProgressObserver, RetryObserver

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://get.pulumi.com/releases/plugins"

_ARCH_ALIASES = {"x86_64": "amd64", "amd64": "amd64", "aarch64": "arm64", "arm64": "arm64"}


class Transport(Protocol):
    """Raw byte-stream fetch. One ``open`` is one attempt."""

    def open(self, url: str) -> AbstractContextManager[tuple[Iterator[bytes], int | None]]: ...


def platform_tag() -> tuple[str, str]:
    machine = platform.machine().lower()
    return platform.system().lower(), _ARCH_ALIASES.get(machine, machine)


def archive_name(requirement: PluginRequirement) -> str:
    os_name, arch = platform_tag()
    version = f"v{requirement.version}" if requirement.version is not None else "latest"
    return f"pulumi-{requirement.kind.value}-{requirement.name}-{version}-{os_name}-{arch}.tar.gz"


class RetryingDownloader:
    """Downloads a plugin archive, retrying transient failures.

    Each attempt writes into its own temp file; a failed attempt removes it.
    The successful attempt's file is returned and belongs to the caller.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        base_url: str = DEFAULT_BASE_URL,
        attempts: int = 5,
        retry_delay: float = 1.0,
        max_retry_delay: float = 30.0,
        temp_dir: Path | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self._transport = transport
        self._base_url = base_url.rstrip("/")
        self.attempts = attempts
        self.retry_delay = retry_delay
        self.max_retry_delay = max_retry_delay
        self._temp_dir = temp_dir
        self._sleep = sleep

    def download_url(self, requirement: PluginRequirement) -> str:
        """The explicit download URL, or the canonical archive URL under the base/server URL."""
        url = requirement.download_url
        if url and url.endswith((".tar.gz", ".tgz")):
            return url
        base = url.rstrip("/") if url else self._base_url
        return f"{base}/{archive_name(requirement)}"

    def fetch(
        self,
        requirement: PluginRequirement,
        progress: ProgressObserver | None = None,
        retry: RetryObserver | None = None,
    ) -> Path:
        """Download ``requirement`` and return the path of the temp archive.

        Raises:
            DownloadError: When every attempt failed; ``__cause__`` is the last failure.
        """
        url = self.download_url(requirement)
        progress = progress or NoProgress()
        attempts_made = 0

        def attempt() -> Path:
            nonlocal attempts_made
            attempts_made += 1
            logger.debug("%s download attempt %d/%d from %s", requirement.label, attempts_made, self.attempts, url)
            return self._download_once(url, progress)

        retrying = tenacity.Retrying(
            stop=tenacity.stop_after_attempt(self.attempts),
            wait=tenacity.wait_exponential(multiplier=self.retry_delay, max=self.max_retry_delay),
            retry=tenacity.retry_if_exception(_is_retryable),
            before_sleep=_notify(retry, self.attempts),
            sleep=self._sleep,
            reraise=True,
        )
        try:
            return retrying(attempt)
        except FetchError as e:
            raise DownloadError(requirement, url, attempts_made, e) from e

    def _download_once(self, url: str, progress: ProgressObserver) -> Path:
        fd, name = tempfile.mkstemp(prefix="plugin-", suffix=".tar.gz", dir=self._temp_dir)
        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as out, self._transport.open(url) as (chunks, size):
                for chunk in progress.wrap(chunks, size):
                    out.write(chunk)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise FetchError(f"Writing download of {url} failed: {e}", url=url) from e
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        return path


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, FetchError) and error.retryable


def _notify(observer: RetryObserver | None, limit: int) -> Callable[[tenacity.RetryCallState], None]:
    def before_sleep(retry_state: tenacity.RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.debug("attempt %d/%d failed: %s; retrying in %.2fs", retry_state.attempt_number, limit, error, delay)
        if observer is None or error is None:
            return
        try:
            observer.on_retry(error, retry_state.attempt_number, limit, delay)
        except Exception:
            logger.warning("retry observer raised; continuing", exc_info=True)

    return before_sleep
