from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, List, Mapping, MutableMapping

import yaml


@dataclass(slots=True)
class PipeConfig:
    """Which upstream pipeline stages produced data for a document."""

    sentence: bool = True
    pos: bool = True
    entity: bool = True
    custom_entity: bool = True

    def to_dict(self) -> dict[str, Any]:
        return dict(asdict(self))

    def restrict(self, enabled: "PipeConfig") -> "PipeConfig":
        """Keep only the stages that ran and are also enabled in ``enabled``."""
        return PipeConfig(
            **{f.name: getattr(self, f.name) and getattr(enabled, f.name) for f in fields(self)}
        )


@dataclass(slots=True)
class ContextualVectorsConfig:
    """Options for extracting a document-scoped word vector subset."""

    lemma: bool = True
    specific_word_vectors: List[str] = field(default_factory=list)
    similar_word_vectors: bool = False
    word_vectors_limit: int = 0


@dataclass(slots=True)
class MarkupSettings:
    """Default markers used when an item is marked up without explicit ones."""

    begin_marker: str = "<mark>"
    end_marker: str = "</mark>"


@dataclass(slots=True)
class DocViewConfig:
    """Configuration options for documents built by this package."""

    pipe: PipeConfig = field(default_factory=PipeConfig)
    contextual_vectors: ContextualVectorsConfig = field(
        default_factory=ContextualVectorsConfig
    )
    markup: MarkupSettings = field(default_factory=MarkupSettings)

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _filter_fields(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {f.name for f in fields(cls)}
    return {key: data[key] for key in data if key in allowed}


def pipe_config_from_dict(data: Mapping[str, Any] | None) -> PipeConfig:
    if data is None:
        return PipeConfig()
    return PipeConfig(**_filter_fields(PipeConfig, data))


def contextual_vectors_config_from_dict(
    data: Mapping[str, Any] | None,
) -> ContextualVectorsConfig:
    if data is None:
        return ContextualVectorsConfig()
    return ContextualVectorsConfig(**_filter_fields(ContextualVectorsConfig, data))


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    builders = {
        "pipe": (PipeConfig, pipe_config_from_dict),
        "contextual_vectors": (
            ContextualVectorsConfig,
            contextual_vectors_config_from_dict,
        ),
        "markup": (
            MarkupSettings,
            lambda value: MarkupSettings(**_filter_fields(MarkupSettings, value)),
        ),
    }
    for key, (cls, build) in builders.items():
        if key not in data:
            continue
        value = data[key]
        if isinstance(value, cls):
            kwargs[key] = value
        elif isinstance(value, Mapping):
            kwargs[key] = build(value)
    return kwargs


def config_from_dict(data: Mapping[str, Any] | None) -> DocViewConfig:
    """Build a DocViewConfig from a dictionary-like input."""
    if data is None:
        return DocViewConfig()
    return DocViewConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> DocViewConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> DocViewConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return DocViewConfig()
    return config_from_yaml(path)
