from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Optional

from .errors import EmptyInputError, UnsupportedInputError

logger = logging.getLogger(__name__)

__all__ = ["is_text_upload", "read_text_input"]


def is_text_upload(path: Path, content_type: Optional[str] = None) -> bool:
    content_type = content_type or mimetypes.guess_type(path.name)[0] or ""
    return content_type.startswith("text/") or path.name.lower().endswith(".txt")


def read_text_input(
    text: Optional[str] = None,
    *,
    upload_path: Optional[Path] = None,
    content_type: Optional[str] = None,
    encoding: str = "utf-8",
) -> str:
    """
    Return the text to synthesize from either a direct string or an uploaded file.

    An upload takes precedence over ``text``. Only plain-text uploads are accepted,
    and blank content is rejected before any synthesis is attempted.
    """
    content = text or ""
    if upload_path is not None:
        upload_path = Path(upload_path)
        if not is_text_upload(upload_path, content_type):
            raise UnsupportedInputError("Unsupported file type. Please upload a text file (.txt)")
        if not upload_path.exists():
            raise FileNotFoundError(f"Input file does not exist: {upload_path}")
        content = upload_path.read_text(encoding=encoding)
        logger.debug("Read %d characters from %s", len(content), upload_path)

    if not content.strip():
        raise EmptyInputError("Please provide text content")
    return content
