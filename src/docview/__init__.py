"""
docview package exports the document view layer for library consumers.
"""

from __future__ import annotations

from .builder import build_document, build_payload, load_payload, payload_from_dict
from .config import (
    ContextualVectorsConfig,
    DocViewConfig,
    PipeConfig,
    config_from_dict,
    config_from_yaml,
    load_config,
)
from .contextual import ContextualVectorExtractor, ContextualVectors
from .document import Document
from .errors import (
    CapacityExceededError,
    DocViewError,
    ErrorKind,
    InvalidArgumentError,
    MalformedPayloadError,
    MissingPipelineStageError,
    VectorsNotLoadedError,
)
from .lexicon import InMemoryLexicon, Lexicon
from .models import Addons, AnalysisPayload, AnnotatedToken, RangeEntry
from .projections import As, Its
from .vectors import WordVectorTable, load_word_vectors

__all__ = [
    "Addons",
    "AnalysisPayload",
    "AnnotatedToken",
    "As",
    "CapacityExceededError",
    "ContextualVectorExtractor",
    "ContextualVectors",
    "ContextualVectorsConfig",
    "DocViewConfig",
    "DocViewError",
    "Document",
    "ErrorKind",
    "InMemoryLexicon",
    "InvalidArgumentError",
    "Its",
    "Lexicon",
    "MalformedPayloadError",
    "MissingPipelineStageError",
    "PipeConfig",
    "RangeEntry",
    "VectorsNotLoadedError",
    "WordVectorTable",
    "build_document",
    "build_payload",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "load_payload",
    "load_word_vectors",
    "payload_from_dict",
]

__version__ = "0.1.0"
