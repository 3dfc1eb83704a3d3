"""Tests for the console and retry observers."""

import io

from rich.console import Console

from plugin_acquire.observers import ConsoleReporter, NoProgress, ReportingRetryObserver

from .helpers import RecordingReporter


def _console():
    return Console(file=io.StringIO(), width=200, color_system=None)


def test_warning_with_markup_like_text_is_printed_verbatim():
    console = _console()
    reporter = ConsoleReporter(console)

    reporter.warning("Error removing temporary file /tmp/[/x]plugin.tar.gz: busy")

    assert console.file.getvalue() == (
        "warning: Error removing temporary file /tmp/[/x]plugin.tar.gz: busy\n"
    )


def test_info_is_printed_verbatim():
    console = _console()
    ConsoleReporter(console).info("resource plugin [bold]aws-1.0.0 installing")
    assert console.file.getvalue() == "resource plugin [bold]aws-1.0.0 installing\n"


def test_retry_notice():
    reporter = RecordingReporter()
    ReportingRetryObserver(reporter).on_retry(RuntimeError("HTTP 503"), 2, 5, 2.0)
    assert reporter.warnings == ["Error downloading plugin: HTTP 503\nWill retry in 2s [2/5]"]


def test_no_progress_passes_chunks_through():
    assert list(NoProgress().wrap(iter([b"a", b"b"]), 2)) == [b"a", b"b"]
