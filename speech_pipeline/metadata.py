from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from .errors import DEFAULT_SUGGESTION
from .pipeline import PipelineResult

__all__ = ["MetadataBuilder", "BYTES_PER_SECOND_ESTIMATE"]

# Rough playback rate used for the duration estimate shown to callers.
BYTES_PER_SECOND_ESTIMATE = 16000


@dataclass
class MetadataBuilder:
    output_path: Optional[Path] = None

    def build_metadata(self, result: PipelineResult) -> Dict[str, object]:
        voice_info = result.voice_info
        return {
            "success": True,
            "message": f"Audio generated successfully with {voice_info.voice}!",
            "file": str(result.output_path),
            "fileName": result.file_name,
            "voiceInfo": voice_info.to_dict(),
            "textLength": result.text_length,
            "fileSize": result.file_size,
            "chunksProcessed": result.chunks_processed,
            "totalChunks": result.total_chunks,
            "successRate": result.success_rate,
            "estimatedDuration": f"{round(result.file_size / BYTES_PER_SECOND_ESTIMATE)} seconds",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def build_error(self, exc: Exception, *, error: str = "Audio generation failed") -> Dict[str, object]:
        payload: Dict[str, object] = {
            "success": False,
            "error": error,
            "message": str(exc),
            "suggestion": getattr(exc, "suggestion", DEFAULT_SUGGESTION),
        }
        if hasattr(exc, "chunks_processed"):
            payload["chunksProcessed"] = exc.chunks_processed
            payload["totalChunks"] = exc.total_chunks
        return payload

    def write_metadata(self, metadata: Dict[str, object]) -> None:
        if self.output_path is None:
            raise ValueError("No metadata output path configured.")
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with self.output_path.open("w", encoding="utf-8") as f:
            json.dump(metadata, f, ensure_ascii=False, indent=2)
