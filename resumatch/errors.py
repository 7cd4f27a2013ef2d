"""Exception hierarchy shared across the matching pipeline."""


class ResumatchError(Exception):
    """Base class for every error raised by resumatch."""


class ProviderUnavailable(ResumatchError):
    """No credential is configured for any known completion provider."""


class ProviderError(ResumatchError):
    """The completion provider returned a non-success status or the transport failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedCompletion(ResumatchError):
    """A completion could not be parsed into the expected structure."""


class UnsupportedSource(ResumatchError):
    """A job-source response holds no recognizable listing container."""


class UnsupportedFormat(ResumatchError):
    """The resume document type cannot be converted to text."""
