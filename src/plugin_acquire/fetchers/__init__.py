from ._downloader import DEFAULT_BASE_URL, RetryingDownloader, Transport, archive_name
from ._http import HttpTransport

__all__ = [
    "DEFAULT_BASE_URL",
    "HttpTransport",
    "RetryingDownloader",
    "Transport",
    "archive_name",
]
