"""Error taxonomy for the conversion job.

Every failure is fatal for the batch. Library code raises these; the CLI
turns them into a message on stderr and a non-zero exit code.
"""

from __future__ import annotations

from pathlib import Path


class ImgTensorError(Exception):
    """Base class for all conversion failures."""


class ConfigurationError(ImgTensorError, ValueError):
    """Invalid or missing configuration (unknown step, no input source, ...)."""


class DecodeError(ImgTensorError, ValueError):
    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = None if path is None else str(path)


class ShapeMismatch(ImgTensorError, ValueError):
    """An image's output size disagrees with the batch's canonical size."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        expected: tuple[int, ...] | None = None,
        actual: tuple[int, ...] | None = None,
    ) -> None:
        super().__init__(message)
        self.path = None if path is None else str(path)
        self.expected = expected
        self.actual = actual


class EmptyBatch(ImgTensorError, ValueError):
    """No input images were resolved."""


class SerializationError(ImgTensorError, OSError):
    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = None if path is None else str(path)


__all__ = [
    "ConfigurationError",
    "DecodeError",
    "EmptyBatch",
    "ImgTensorError",
    "SerializationError",
    "ShapeMismatch",
]
