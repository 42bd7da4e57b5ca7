from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from .tts_engine import MIN_AUDIO_BYTES

logger = logging.getLogger(__name__)

__all__ = ["concatenate_audio_files"]


def concatenate_audio_files(
    paths: Sequence[Path],
    output_path: Path,
    *,
    min_bytes: int = MIN_AUDIO_BYTES,
) -> bool:
    """
    Join per-chunk audio files into ``output_path`` by plain byte concatenation.

    A single input is copied as is. With several inputs, files of ``min_bytes`` or
    less are dropped. If merging hits an I/O error the first valid input becomes
    the whole output. Returns ``False`` when nothing usable was written.
    """
    if not paths:
        logger.error("No chunk files provided for merging.")
        return False

    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if len(paths) == 1:
            shutil.copyfile(paths[0], output_path)
            logger.info("Copied single chunk %s to %s", paths[0], output_path)
            return True

        merged = _merge_bytes(paths, min_bytes)
        if merged is None:
            logger.error("No valid audio files to concatenate.")
            return False
        output_path.write_bytes(merged)
    except OSError as exc:
        logger.error("Audio concatenation failed: %s", exc)
        return _copy_first_valid(paths, output_path, min_bytes)

    logger.info("Merged %d chunks into %s", len(paths), output_path)
    return True


def _merge_bytes(paths: Sequence[Path], min_bytes: int) -> Optional[bytes]:
    buffers: List[bytes] = []
    for path in paths:
        data = path.read_bytes()
        if len(data) <= min_bytes:
            logger.warning("Skipping %s: %d bytes is below the valid audio threshold.", path, len(data))
            continue
        buffers.append(data)
    if not buffers:
        return None
    return b"".join(buffers)


def _copy_first_valid(paths: Sequence[Path], output_path: Path, min_bytes: int) -> bool:
    for path in paths:
        try:
            if path.is_file() and path.stat().st_size > min_bytes:
                shutil.copyfile(path, output_path)
                logger.warning("Using %s alone as the merged output.", path)
                return True
        except OSError as exc:
            logger.debug("Cannot use %s as fallback output: %s", path, exc)
    return False
