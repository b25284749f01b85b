"""
Exceptions raised while batching and uploading asset file pairs.

Every error here is fatal for the bundle in progress: nothing is retried
and nothing is downgraded to a warning.
"""

from typing import Optional


def size_mb(num_bytes: int) -> float:
    return num_bytes / (1000 * 1000)


class ArbatchError(Exception):
    """Base class for all arbatch errors."""


class OversizePairError(ArbatchError):
    """A single file pair can never fit in a bundle."""

    def __init__(self, key: str, size: int, limit: int):
        self.key = key
        self.size = size
        self.limit = limit
        super().__init__(
            f"Image + Manifest filepair ({key}) too big ({size_mb(size)}MB) "
            f"for bundle size limit of {size_mb(limit)}MB."
        )


class AssetReadError(ArbatchError):
    """An asset file is missing or unreadable."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Cannot read asset file {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ManifestParseError(ArbatchError):
    """A manifest file is not a well-formed JSON object."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Malformed manifest {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SigningError(ArbatchError):
    pass


class SubmissionError(ArbatchError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UploaderFailedError(ArbatchError):
    """Raised when a bundle uploader that already failed is pulled again."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Bundle uploader stopped after a fatal error: {cause}")
