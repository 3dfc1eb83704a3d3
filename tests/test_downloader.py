"""Tests for the retrying downloader and the HTTP transport."""

from contextlib import contextmanager

import httpx
import pytest

from plugin_acquire import PluginRequirement
from plugin_acquire.errors import DownloadError, FetchError
from plugin_acquire.fetchers import HttpTransport, RetryingDownloader
from plugin_acquire.fetchers import _downloader

AWS = PluginRequirement(kind="resource", name="aws", version="1.0.0")
PAYLOAD = b"tarball-bytes"


class FlakyTransport:
    """Fails the first ``failures`` opens, then streams PAYLOAD in two chunks."""

    def __init__(self, failures=0, retryable=True):
        self.failures = failures
        self.retryable = retryable
        self.urls = []

    @property
    def calls(self):
        return len(self.urls)

    @contextmanager
    def open(self, url):
        self.urls.append(url)
        if self.calls <= self.failures:
            raise FetchError(f"boom {self.calls}", url=url, retryable=self.retryable)
        yield iter([PAYLOAD[:4], PAYLOAD[4:]]), len(PAYLOAD)


class BrokenStreamTransport:
    """Starts streaming, then fails mid-download on the first attempt."""

    def __init__(self):
        self.calls = 0

    @contextmanager
    def open(self, url):
        self.calls += 1
        attempt = self.calls

        def chunks():
            yield PAYLOAD[:4]
            if attempt == 1:
                raise FetchError("connection reset", url=url)
            yield PAYLOAD[4:]

        yield chunks(), len(PAYLOAD)


class RecordingRetry:
    def __init__(self):
        self.calls = []

    def on_retry(self, error, attempt, limit, delay):
        self.calls.append((str(error), attempt, limit, delay))


class RecordingProgress:
    def __init__(self):
        self.seen = []
        self.expected = None

    def wrap(self, chunks, expected_size):
        self.expected = expected_size
        for chunk in chunks:
            self.seen.append(chunk)
            yield chunk


def _make(transport, tmp_path, attempts=5, sleeps=None):
    sleeps = sleeps if sleeps is not None else []
    return RetryingDownloader(
        transport,
        base_url="https://example.com/releases",
        attempts=attempts,
        retry_delay=1.0,
        max_retry_delay=30.0,
        temp_dir=tmp_path,
        sleep=sleeps.append,
    )


@pytest.fixture(autouse=True)
def _fixed_platform(monkeypatch):
    monkeypatch.setattr(_downloader, "platform_tag", lambda: ("linux", "amd64"))


# --- URL selection ---


def test_canonical_url_for_pinned_plugin(tmp_path):
    d = _make(FlakyTransport(), tmp_path)
    assert d.download_url(AWS) == (
        "https://example.com/releases/pulumi-resource-aws-v1.0.0-linux-amd64.tar.gz"
    )


def test_canonical_url_for_unpinned_plugin(tmp_path):
    d = _make(FlakyTransport(), tmp_path)
    req = PluginRequirement(kind="language", name="python")
    assert d.download_url(req).endswith("/pulumi-language-python-latest-linux-amd64.tar.gz")


def test_explicit_tarball_url_is_used_verbatim(tmp_path):
    d = _make(FlakyTransport(), tmp_path)
    req = AWS.model_copy(update={"download_url": "https://mirror.example.com/aws.tar.gz"})
    assert d.download_url(req) == "https://mirror.example.com/aws.tar.gz"


def test_server_url_gets_canonical_file_name(tmp_path):
    d = _make(FlakyTransport(), tmp_path)
    req = AWS.model_copy(update={"download_url": "https://mirror.example.com/plugins/"})
    assert d.download_url(req) == (
        "https://mirror.example.com/plugins/pulumi-resource-aws-v1.0.0-linux-amd64.tar.gz"
    )


def test_attempts_must_be_positive():
    with pytest.raises(ValueError):
        RetryingDownloader(FlakyTransport(), attempts=0)


# --- retry behaviour ---


def test_success_first_try(tmp_path):
    retry = RecordingRetry()
    path = _make(FlakyTransport(), tmp_path).fetch(AWS, retry=retry)
    assert path.read_bytes() == PAYLOAD
    assert retry.calls == []


def test_fails_n_times_then_succeeds(tmp_path):
    transport = FlakyTransport(failures=3)
    retry = RecordingRetry()
    sleeps = []
    path = _make(transport, tmp_path, attempts=5, sleeps=sleeps).fetch(AWS, retry=retry)

    assert path.read_bytes() == PAYLOAD
    assert transport.calls == 4
    assert [c[1] for c in retry.calls] == [1, 2, 3]
    assert all(c[2] == 5 for c in retry.calls)
    assert [c[0] for c in retry.calls] == ["boom 1", "boom 2", "boom 3"]
    assert [c[3] for c in retry.calls] == [1.0, 2.0, 4.0]
    assert sleeps == [1.0, 2.0, 4.0]
    # Only the returned artifact is left behind.
    assert list(tmp_path.iterdir()) == [path]


def test_always_failing_gives_up_after_limit(tmp_path):
    transport = FlakyTransport(failures=100)
    retry = RecordingRetry()
    with pytest.raises(DownloadError) as exc_info:
        _make(transport, tmp_path, attempts=3).fetch(AWS, retry=retry)

    err = exc_info.value
    assert transport.calls == 3
    assert err.attempts == 3
    assert err.requirement == AWS
    assert isinstance(err.__cause__, FetchError)
    assert str(err.__cause__) == "boom 3"
    assert len(retry.calls) == 2
    assert list(tmp_path.iterdir()) == []


def test_non_retryable_error_fails_immediately(tmp_path):
    transport = FlakyTransport(failures=100, retryable=False)
    with pytest.raises(DownloadError) as exc_info:
        _make(transport, tmp_path).fetch(AWS)
    assert transport.calls == 1
    assert exc_info.value.attempts == 1


def test_mid_stream_failure_is_retried_and_cleaned_up(tmp_path):
    transport = BrokenStreamTransport()
    path = _make(transport, tmp_path).fetch(AWS)
    assert transport.calls == 2
    assert path.read_bytes() == PAYLOAD
    assert list(tmp_path.iterdir()) == [path]


def test_raising_retry_observer_does_not_change_retries(tmp_path):
    class Exploding:
        def on_retry(self, error, attempt, limit, delay):
            raise RuntimeError("observer bug")

    transport = FlakyTransport(failures=2)
    path = _make(transport, tmp_path).fetch(AWS, retry=Exploding())
    assert transport.calls == 3
    assert path.read_bytes() == PAYLOAD


def test_progress_sees_every_chunk(tmp_path):
    progress = RecordingProgress()
    path = _make(FlakyTransport(), tmp_path).fetch(AWS, progress=progress)
    assert b"".join(progress.seen) == PAYLOAD == path.read_bytes()
    assert progress.expected == len(PAYLOAD)


# --- HTTP transport ---


URL = "https://example.com/releases/aws.tar.gz"


def test_http_transport_streams_body(httpx_mock):
    httpx_mock.add_response(url=URL, content=PAYLOAD)
    with HttpTransport().open(URL) as (chunks, size):
        assert b"".join(chunks) == PAYLOAD
    assert size == len(PAYLOAD)


def test_http_transport_404_is_not_retryable(httpx_mock):
    httpx_mock.add_response(url=URL, status_code=404)
    with pytest.raises(FetchError) as exc_info:
        with HttpTransport().open(URL):
            pass
    assert exc_info.value.retryable is False
    assert "HTTP 404" in str(exc_info.value)


@pytest.mark.parametrize("status", [429, 500, 503])
def test_http_transport_transient_statuses_are_retryable(httpx_mock, status):
    httpx_mock.add_response(url=URL, status_code=status)
    with pytest.raises(FetchError) as exc_info:
        with HttpTransport().open(URL):
            pass
    assert exc_info.value.retryable is True


def test_http_transport_network_error(httpx_mock):
    httpx_mock.add_exception(httpx.ConnectError("connection refused"), url=URL)
    with pytest.raises(FetchError, match="Network error") as exc_info:
        with HttpTransport().open(URL):
            pass
    assert exc_info.value.retryable is True


def test_downloader_over_http(httpx_mock, tmp_path):
    httpx_mock.add_response(
        url="https://example.com/releases/pulumi-resource-aws-v1.0.0-linux-amd64.tar.gz",
        content=PAYLOAD,
    )
    path = _make(HttpTransport(), tmp_path).fetch(AWS)
    assert path.read_bytes() == PAYLOAD
