from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

import typer
import yaml

from .builder import load_payload
from .config import DocViewConfig, load_config
from .document import Document
from .errors import DocViewError
from .lexicon import InMemoryLexicon
from .models import Addons
from .vectors import WordVectorTable, load_word_vectors

app = typer.Typer(help="docview CLI: inspect analyzed documents.", no_args_is_help=True)


@app.callback()
def main_options(
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."
    ),
) -> None:
    """Configure logging for every sub-command."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def tokens(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
) -> None:
    """Print a table of the tokens in an analysis payload."""
    cfg = load_config(config)
    document = _open_document(input_path, cfg, None)
    document.print_tokens()


@app.command()
def vectors(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    vectors_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True,
        help="JSON word vector table.",
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    output_path: Path | None = typer.Option(
        None, "--output-path", "-o", help="Write the JSON here instead of stdout."
    ),
    lemma: bool | None = typer.Option(
        None, "--lemma/--no-lemma", help="Override config lemma flag."
    ),
    specific_words: List[str] = typer.Option(
        [], "--word", "-w", help="Extra word to include (repeatable)."
    ),
    similar: bool | None = typer.Option(
        None,
        "--similar/--no-similar",
        help="Add each word's nearest corpus neighbour.",
    ),
    limit: int | None = typer.Option(
        None, "--limit", help="Pad the vocabulary up to this many words."
    ),
) -> None:
    """Extract contextual word vectors for an analysis payload."""
    cfg = load_config(config)
    _apply_vector_overrides(cfg, lemma, specific_words, similar, limit)
    try:
        table = load_word_vectors(vectors_path)
    except DocViewError as exc:
        raise typer.BadParameter(str(exc)) from exc
    document = _open_document(input_path, cfg, table)
    try:
        snapshot = document.contextual_vectors(cfg.contextual_vectors)
    except DocViewError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if output_path is None:
        typer.echo(snapshot)
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(snapshot, encoding="utf-8")
    typer.echo(f"Wrote {json.loads(snapshot)['size']} vectors to {output_path}")


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = DocViewConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _apply_vector_overrides(
    config: DocViewConfig,
    lemma: bool | None,
    specific_words: List[str],
    similar: bool | None,
    limit: int | None,
) -> None:
    """Apply CLI overrides to the contextual vector settings when provided."""
    settings = config.contextual_vectors
    if lemma is not None:
        settings.lemma = lemma
    if specific_words:
        settings.specific_word_vectors = list(specific_words)
    if similar is not None:
        settings.similar_word_vectors = similar
    if limit is not None:
        settings.word_vectors_limit = limit


def _open_document(
    input_path: Path, config: DocViewConfig, table: WordVectorTable | None
) -> Document:
    """Load a payload from disk and wrap it in a Document."""
    # Seed the lexicon from the vector vocabulary so OOV checks are meaningful.
    lexicon = InMemoryLexicon(table.words if table is not None else ())
    try:
        payload = load_payload(input_path, lexicon)
        return Document(payload, Addons(word_vectors=table), config)
    except DocViewError as exc:
        raise typer.BadParameter(str(exc)) from exc


if __name__ == "__main__":
    main()
