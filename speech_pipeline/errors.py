from __future__ import annotations

__all__ = [
    "InputError",
    "EmptyInputError",
    "UnsupportedInputError",
    "InvalidFileNameError",
    "PipelineError",
]

DEFAULT_SUGGESTION = "Please try again with different text or voice"


class InputError(ValueError):
    """Raised for requests that are rejected before any synthesis happens."""

    suggestion = "Enter text or upload a text file"


class EmptyInputError(InputError):
    pass


class UnsupportedInputError(InputError):
    pass


class InvalidFileNameError(InputError):
    suggestion = "Use a plain file name from the output listing"


class PipelineError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        chunks_processed: int = 0,
        total_chunks: int = 0,
        suggestion: str = DEFAULT_SUGGESTION,
    ) -> None:
        super().__init__(message)
        self.chunks_processed = chunks_processed
        self.total_chunks = total_chunks
        self.suggestion = suggestion
