"""
Chunked multi-provider text-to-speech pipeline.

This package exposes the building blocks used by the CLI entry point:

- Text chunking (`split_text`).
- Voice catalog and "auto" resolution (`voices`).
- Engine abstractions and concrete providers (`tts_engine`, `placeholder`).
- Provider ordering and fallback (`synthesizer`).
- Chunk-by-chunk request processing (`pipeline`).
- Audio concatenation (`merger`).
- Output/scratch file handling (`storage`), request input (`inputs`) and
  result payloads (`metadata`).
"""

from .errors import (
    EmptyInputError,
    InputError,
    InvalidFileNameError,
    PipelineError,
    UnsupportedInputError,
)
from .split_text import TextChunk, chunk_text
from .voices import (
    VoiceCatalog,
    VoiceDescriptor,
    detect_language,
    group_voices,
    load_default_catalog,
    resolve_voice,
)
from .tts_engine import (
    GoogleTranslateTtsEngine,
    MockTtsEngine,
    PlaceholderToneEngine,
    SynthesisResult,
    TtsEngine,
    VoiceRssTtsEngine,
)
from .synthesizer import SpeechSynthesizer, SynthesisOptions
from .merger import concatenate_audio_files
from .storage import ArtifactStore
from .pipeline import ChunkPipeline, PipelineConfig, PipelineResult, VoiceInfo
from .inputs import read_text_input
from .metadata import MetadataBuilder

__all__ = [
    "InputError",
    "EmptyInputError",
    "UnsupportedInputError",
    "InvalidFileNameError",
    "PipelineError",
    "TextChunk",
    "chunk_text",
    "VoiceCatalog",
    "VoiceDescriptor",
    "detect_language",
    "group_voices",
    "load_default_catalog",
    "resolve_voice",
    "TtsEngine",
    "GoogleTranslateTtsEngine",
    "VoiceRssTtsEngine",
    "PlaceholderToneEngine",
    "MockTtsEngine",
    "SynthesisResult",
    "SpeechSynthesizer",
    "SynthesisOptions",
    "concatenate_audio_files",
    "ArtifactStore",
    "ChunkPipeline",
    "PipelineConfig",
    "PipelineResult",
    "VoiceInfo",
    "read_text_input",
    "MetadataBuilder",
]
