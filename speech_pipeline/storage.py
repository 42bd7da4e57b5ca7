from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List

from .errors import InvalidFileNameError

logger = logging.getLogger(__name__)

__all__ = ["StoredFile", "ArtifactStore", "validate_file_name"]


@dataclass(frozen=True)
class StoredFile:
    name: str
    path: Path
    size: int
    created: datetime

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "path": str(self.path),
            "size": self.size,
            "created": self.created.isoformat(),
        }


def validate_file_name(name: str) -> str:
    if not name or ".." in name or "/" in name or "\\" in name:
        raise InvalidFileNameError(f"Invalid filename: {name!r}")
    return name


class ArtifactStore:
    """
    Durable output directory plus a scratch directory for per-chunk files.

    Generated names carry a millisecond timestamp and a random suffix so runs
    that overlap in time never share a file.
    """

    def __init__(self, output_dir: Path, temp_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.temp_dir = Path(temp_dir)
        self.ensure_directories()

    def ensure_directories(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.temp_dir.mkdir(parents=True, exist_ok=True)

    def new_output_path(self, prefix: str, extension: str = "mp3") -> Path:
        return self.output_dir / f"{prefix}_{_unique_suffix()}.{extension}"

    def new_temp_path(self, index: int, extension: str = "mp3") -> Path:
        return self.temp_dir / f"chunk_{index}_{_unique_suffix()}.{extension}"

    def discard(self, paths: Iterable[Path]) -> None:
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Failed to delete temporary file %s: %s", path, exc)

    def list_outputs(self) -> List[StoredFile]:
        files: List[StoredFile] = []
        for path in self.output_dir.iterdir():
            if not path.is_file():
                continue
            stat = path.stat()
            files.append(
                StoredFile(
                    name=path.name,
                    path=path,
                    size=stat.st_size,
                    created=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        files.sort(key=lambda f: f.created, reverse=True)
        return files

    def delete_output(self, name: str) -> Path:
        validate_file_name(name)
        path = self.output_dir / name
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {name}")
        path.unlink()
        logger.info("Deleted output %s", path)
        return path

    def usage(self) -> Dict[str, object]:
        files = self.list_outputs()
        return {
            "directory": str(self.output_dir),
            "fileCount": len(files),
            "totalSize": sum(f.size for f in files),
        }


def _unique_suffix() -> str:
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
