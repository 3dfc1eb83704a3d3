"""Observers for user-facing output: messages, download progress and retry notices.

Observers only report. Nothing they do changes what the engine downloads,
installs or retries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Protocol

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TransferSpeedColumn,
)

logger = logging.getLogger(__name__)


class Reporter(Protocol):
    """Human-readable progress and warning messages."""

    def info(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...


class ProgressObserver(Protocol):
    """Wraps a download's byte chunks so transfer progress can be rendered.

    The wrapper must yield exactly the chunks it is given, in order.
    """

    def wrap(self, chunks: Iterable[bytes], expected_size: int | None) -> Iterator[bytes]: ...


class RetryObserver(Protocol):
    """Called after a failed download attempt, before sleeping ``delay`` seconds."""

    def on_retry(self, error: BaseException, attempt: int, limit: int, delay: float) -> None: ...


class LoggingReporter:
    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)


class ConsoleReporter:
    """Prints messages to a rich console (stderr by default)."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def info(self, message: str) -> None:
        self.console.print(message, markup=False, highlight=False)

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]warning:[/yellow] {escape(message)}", highlight=False)


class NoProgress:
    def wrap(self, chunks: Iterable[bytes], expected_size: int | None) -> Iterator[bytes]:
        yield from chunks


class RichProgressObserver:
    """Renders a rich progress bar while the chunks are consumed."""

    def __init__(self, console: Console | None = None, description: str = "Downloading plugin") -> None:
        self.console = console or Console(stderr=True)
        self.description = description

    def wrap(self, chunks: Iterable[bytes], expected_size: int | None) -> Iterator[bytes]:
        progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=self.console,
            transient=True,
        )
        with progress:
            task = progress.add_task(self.description, total=expected_size)
            for chunk in chunks:
                progress.advance(task, len(chunk))
                yield chunk


class ReportingRetryObserver:
    """Turns retry notifications into reporter warnings."""

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter

    def on_retry(self, error: BaseException, attempt: int, limit: int, delay: float) -> None:
        self.reporter.warning(
            f"Error downloading plugin: {error}\nWill retry in {delay:g}s [{attempt}/{limit}]"
        )
