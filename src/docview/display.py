from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .document import Document


def build_token_table(document: "Document", title: str = "Tokens") -> Table:
    """Build a rich table listing every token with its decoded fields."""
    table = Table(title=title, show_lines=False, padding=(0, 1))
    table.add_column("#", style="dim", justify="right")
    table.add_column("Value", style="yellow")
    table.add_column("Spaces", justify="right")
    table.add_column("POS", style="cyan")
    table.add_column("Lemma")
    table.add_column("Entity", style="green")
    table.add_column("Sentence", justify="right")

    for item in document.tokens():
        context = item.out(lambda ctx: ctx)
        entity = item.parent_entity()
        entity_label = "" if entity is None else f"{entity.index()}:{entity.out(_entity_type)}"
        table.add_row(
            str(context.index),
            context.value + (" (exp)" if context.is_expansion else ""),
            str(context.preceding_spaces),
            context.pos or "",
            context.lemma or "",
            entity_label,
            str(context.sentence_id),
        )
    return table


def _entity_type(span: object) -> str:
    return getattr(span, "type", None) or "-"


def print_tokens(document: "Document", console: Console | None = None) -> None:
    """Print the token table of ``document`` to ``console`` (stdout by default)."""
    if console is None:
        console = Console()
    if document.num_tokens == 0:
        console.print("[dim]document has no tokens[/dim]")
        return
    console.print(build_token_table(document))
