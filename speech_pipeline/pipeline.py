from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .errors import InputError, PipelineError
from .merger import concatenate_audio_files
from .split_text import DEFAULT_MAX_CHUNK_CHARS, chunk_text
from .storage import ArtifactStore
from .synthesizer import SpeechSynthesizer, SynthesisOptions
from .tts_engine import MIN_AUDIO_BYTES, SynthesisResult, guess_audio_extension

logger = logging.getLogger(__name__)

__all__ = ["PipelineConfig", "VoiceInfo", "PipelineResult", "ChunkPipeline"]


@dataclass
class PipelineConfig:
    """
    Knobs controlling how a request is chunked and paced.
    """

    chunk_max_chars: int = DEFAULT_MAX_CHUNK_CHARS
    chunk_delay_sec: float = 0.3
    min_audio_bytes: int = MIN_AUDIO_BYTES
    output_prefix: str = "long_audio"
    single_prefix: str = "audio"


@dataclass(frozen=True)
class VoiceInfo:
    voice: str
    language: str
    service: str
    provider: str

    @classmethod
    def from_result(cls, result: SynthesisResult) -> "VoiceInfo":
        return cls(
            voice=result.voice,
            language=result.language,
            service=result.service,
            provider=result.provider,
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class PipelineResult:
    output_path: Path
    file_size: int
    chunks_processed: int
    total_chunks: int
    text_length: int
    voice_info: VoiceInfo

    @property
    def file_name(self) -> str:
        return self.output_path.name

    @property
    def success_rate(self) -> int:
        if not self.total_chunks:
            return 0
        return round(self.chunks_processed / self.total_chunks * 100)


class ChunkPipeline:
    """
    Drives one request from raw text to a single audio file.

    Text short enough for one provider call is synthesized directly. Longer text
    is chunked and synthesized one chunk at a time, each chunk written to a
    scratch file, then the scratch files are merged and removed.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        store: ArtifactStore,
        config: Optional[PipelineConfig] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.synthesizer = synthesizer
        self.store = store
        self.config = config or PipelineConfig()
        self._sleep = sleep

    def process(self, text: str, options: Optional[SynthesisOptions] = None) -> PipelineResult:
        options = options or SynthesisOptions()
        if len(text) <= self.config.chunk_max_chars:
            return self._process_single(text, options)
        return self._process_chunks(text, options)

    def _process_single(self, text: str, options: SynthesisOptions) -> PipelineResult:
        logger.info("Short text (%d chars), synthesizing in a single call.", len(text))
        try:
            result = self.synthesizer.generate_audio(text, options)
        except InputError:
            raise
        except Exception as exc:
            raise PipelineError("Failed to generate audio for short text", total_chunks=1) from exc
        if not result.success:
            raise PipelineError("Failed to generate audio for short text", total_chunks=1)

        output_path = self.store.new_output_path(
            self.config.single_prefix, guess_audio_extension(result.audio)
        )
        output_path.write_bytes(result.audio)
        return PipelineResult(
            output_path=output_path,
            file_size=result.size,
            chunks_processed=1,
            total_chunks=1,
            text_length=len(text),
            voice_info=VoiceInfo.from_result(result),
        )

    def _process_chunks(self, text: str, options: SynthesisOptions) -> PipelineResult:
        chunks = chunk_text(text, self.config.chunk_max_chars)
        total = len(chunks)
        logger.info("Long text (%d chars) split into %d chunks.", len(text), total)

        created: List[Path] = []
        chunk_files: List[Path] = []
        voice_info: Optional[VoiceInfo] = None

        try:
            for position, chunk in enumerate(chunks):
                try:
                    result = self.synthesizer.generate_audio(chunk.text, options)
                    if not result.success:
                        logger.warning("Chunk %d/%d produced no audio.", position + 1, total)
                    else:
                        path = self.store.new_temp_path(chunk.index, guess_audio_extension(result.audio))
                        created.append(path)
                        path.write_bytes(result.audio)
                        chunk_files.append(path)
                        if voice_info is None:
                            voice_info = VoiceInfo.from_result(result)
                        logger.debug(
                            "Chunk %d/%d: %d bytes via %s.", position + 1, total, result.size, result.service
                        )
                except Exception as exc:
                    logger.warning("Chunk %d/%d failed: %s", position + 1, total, exc)

                if position < total - 1 and self.config.chunk_delay_sec > 0:
                    self._sleep(self.config.chunk_delay_sec)

            if not chunk_files:
                raise PipelineError(
                    f"All {total} chunks failed to process",
                    chunks_processed=0,
                    total_chunks=total,
                )

            extension = chunk_files[0].suffix.lstrip(".")
            output_path = self.store.new_output_path(self.config.output_prefix, extension)
            if not concatenate_audio_files(chunk_files, output_path, min_bytes=self.config.min_audio_bytes):
                raise PipelineError(
                    "Failed to concatenate audio files",
                    chunks_processed=0,
                    total_chunks=total,
                )

            logger.info("Processed %d/%d chunks into %s", len(chunk_files), total, output_path)
            return PipelineResult(
                output_path=output_path,
                file_size=output_path.stat().st_size,
                chunks_processed=len(chunk_files),
                total_chunks=total,
                text_length=len(text),
                voice_info=voice_info,
            )
        finally:
            self.store.discard(created)
