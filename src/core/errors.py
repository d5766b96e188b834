"""Exception hierarchy for the fetch pipeline.

- SourceFetchError: base for all fetch errors
- SourceNotFoundError: no source registered under the requested name
- RateLimitExceededError: the per-source request window is exhausted
- TransportError: network, DNS, TLS or timeout failure
- HttpStatusError: upstream answered with a non-2xx status
- DecryptError: a stored credential could not be decrypted

These are raised inside the pipeline and converted into ``FetchResult``
values by ``SourceFetcher.fetch``; none of them escape it.
"""


class SourceFetchError(Exception):
    """Base exception for all fetch pipeline errors."""


class SourceNotFoundError(SourceFetchError):
    """Raised when a source name is not present in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Source "{name}" not found.')
        self.name = name


class RateLimitExceededError(SourceFetchError):
    """Raised when the source's fixed-window request count is at the limit."""

    def __init__(self, name: str, limit: int) -> None:
        super().__init__(f'Rate limit exceeded for source "{name}" ({limit}/min).')
        self.name = name
        self.limit = limit


class TransportError(SourceFetchError):
    """Raised when the HTTP request could not be completed at all."""


class HttpStatusError(SourceFetchError):
    """Raised when the upstream responds outside the 2xx range."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code} error.")
        self.status_code = status_code


class DecryptError(SourceFetchError):
    """Raised when a stored credential cannot be decrypted."""
