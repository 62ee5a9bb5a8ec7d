"""Domain-level exceptions for ccgen."""

from pathlib import Path


class ConfigError(Exception):
    """Raised when credentials or settings for the selected mode are missing or invalid."""

    def __init__(self, message: str, *, path: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


class ProviderError(Exception):
    """Raised when a provider fails (network, auth, timeout, etc.)."""

    pass


class UnexpectedResponseFormat(ProviderError):
    """Backend returned a shape that cannot be read as text."""

    pass


class EmptyResponseError(ProviderError):
    """Transport returned no body."""

    pass


class NoResultError(ProviderError):
    """Agent session ended without a result message."""

    pass


class GenerationAborted(ProviderError):
    """Agent session was aborted by the caller before it finished."""

    pass


class CodeWriteError(Exception):
    """Raised when the generated file cannot be written."""

    pass
