"""kartei CLI: card management, review sessions and configuration."""

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any

import typer

from kartei.application.config import AppConfig, resolve_config
from kartei.application.factory import get_review_service
from kartei.application.preview import format_interval, preview_intervals
from kartei.application.review_service import ReviewService
from kartei.application.wordlist import load_word_list
from kartei.consts import VERSION
from kartei.domain.exceptions import InvalidRatingError, KarteiError
from kartei.domain.models import Card, Rating

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="kartei: vocabulary flashcards with spaced repetition.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage kartei configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@contextmanager
def domain_errors() -> Iterator[None]:
    """Turn kartei errors into a red message and exit code 1."""
    try:
        yield
    except KarteiError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from None


def _config(ctx: typer.Context, **overrides: Any) -> AppConfig:
    """Resolve config with the global options plus per-command overrides."""
    merged = dict(ctx.obj.get("overrides", {})) if ctx.obj else {}
    merged.update({k: v for k, v in overrides.items() if v is not None})
    with domain_errors():
        config = resolve_config(merged)
    _set_verbosity(config.verbose)
    return config


def _set_verbosity(verbose: int) -> None:
    if verbose >= 2:
        logging.getLogger("kartei").setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger("kartei").setLevel(logging.INFO)


def _service(ctx: typer.Context, **overrides: Any) -> ReviewService:
    return get_review_service(_config(ctx, **overrides))


def card_front(card: Card) -> str:
    content = card.content
    word = content.get("german") or content.get("word") or "?"
    gender = content.get("gender")
    return f"{gender} {word}" if gender else str(word)


def card_back(card: Card) -> str:
    content = card.content
    lines = [str(content.get("spanish") or content.get("translation") or "?")]
    if content.get("plural"):
        lines.append(f"Plural: {content['plural']}")
    if content.get("exampleGerman"):
        example = content["exampleGerman"]
        if content.get("exampleSpanish"):
            example += f" ({content['exampleSpanish']})"
        lines.append(f"Example: {example}")
    return "\n".join(lines)


def card_line(card: Card) -> str:
    interval = format_interval(card.interval, precise=False) if card.interval else "-"
    return (
        f"{card.id}  {card.state.value:<8}  due {card.next_review_date.isoformat()}  "
        f"ivl {interval:>5}  ease {card.ease_factor:.2f}  {card_front(card)}"
    )


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    store: Annotated[
        Path | None, typer.Option("--store", help="Card file to use instead of the configured one.")
    ] = None,
    backend: Annotated[
        str | None, typer.Option(help="Card store backend: file or memory.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for kartei."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "store_path": store,
        "backend": backend,
        # 0 means "not given", so KARTEI_VERBOSE still applies
        "verbose": verbose or None,
    }


# ---------------------------------------------------------------------------
# Card commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="The word to learn.")],
    translation: Annotated[str, typer.Argument(help="Its translation.")],
    example: Annotated[str | None, typer.Option(help="Example sentence.")] = None,
    example_translation: Annotated[
        str | None, typer.Option(help="Translation of the example sentence.")
    ] = None,
    word_type: Annotated[
        str, typer.Option("--type", help="noun, verb, adjective, adverb or other.")
    ] = "other",
    gender: Annotated[str | None, typer.Option(help="Article for nouns: der, die, das.")] = None,
    plural: Annotated[str | None, typer.Option(help="Plural form.")] = None,
):
    """[bold green]Add[/bold green] a new word card, due today."""
    content: dict[str, Any] = {
        "german": word,
        "spanish": translation,
        "wordType": word_type,
        "gender": gender,
        "plural": plural,
        "exampleGerman": example or "",
        "exampleSpanish": example_translation or "",
    }
    service = _service(ctx)
    with domain_errors():
        card = service.add_word(content)
    typer.secho(f"Added {card_front(card)} ({card.id})", fg="green")


@app.command("import-words")
def import_words(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="YAML or JSON word list.")],
):
    """Create new cards from a word list file."""
    service = _service(ctx)
    with domain_errors():
        contents = load_word_list(path)
        cards = service.add_words(contents)
    typer.secho(f"Added {len(cards)} card(s) from {path.name}", fg="green")


@app.command("list")
def list_cards(
    ctx: typer.Context,
    due: Annotated[bool, typer.Option("--due", help="Only cards due today.")] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List stored cards."""
    service = _service(ctx)
    with domain_errors():
        cards = service.list_cards(due_only=due)

    if json_output:
        from kartei.application.records import card_to_json_dict

        typer.echo(json.dumps([card_to_json_dict(c) for c in cards], indent=2, ensure_ascii=False))
        return

    if not cards:
        typer.secho("No cards.", fg="yellow")
        return
    for card in cards:
        typer.echo(card_line(card))


@app.command()
def delete(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card ID.")],
):
    """Delete a card."""
    service = _service(ctx)
    with domain_errors():
        service.delete_card(card_id)
    typer.secho(f"Deleted {card_id}", fg="green")


@app.command()
def status(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show deck counts and what is due today."""
    service = _service(ctx)
    with domain_errors():
        summary = service.summary()

    if json_output:
        from dataclasses import asdict

        data = asdict(summary)
        data["due"] = summary.due
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(
        f"Cards: {summary.total}  New: {summary.new}  "
        f"Learning: {summary.learning}  Review: {summary.review}"
    )
    if summary.due:
        typer.secho(
            f"Due today: {summary.due} (learning {summary.due_learning}, "
            f"review {summary.due_review}, new {summary.due_new})",
            fg="green",
        )
    else:
        typer.secho("Nothing due today.", fg="yellow")
    if summary.mean_ease is not None:
        typer.echo(f"Mean ease: {summary.mean_ease:.2f}")


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


def _ask_rating() -> Rating | None:
    while True:
        answer = typer.prompt("Rating [1-4, q to stop]")
        if answer.strip().lower() in ("q", "quit"):
            return None
        try:
            return Rating.parse(answer)
        except InvalidRatingError:
            typer.secho("Answer 1 (Again), 2 (Hard), 3 (Good) or 4 (Easy).", fg="yellow")


@app.command()
def review(
    ctx: typer.Context,
    limit: Annotated[int | None, typer.Option(help="Maximum cards in this session.")] = None,
    seed: Annotated[int | None, typer.Option(help="Seed for the new-card shuffle.")] = None,
):
    """[bold green]Review[/bold green] due cards interactively."""
    config = _config(ctx, seed=seed, session_limit=limit)
    service = get_review_service(config)

    with domain_errors():
        session = service.build_session(config.session_limit)
    if not session:
        typer.secho("Nothing to review. Come back later!", fg="yellow")
        return

    reviewed = 0
    for i, card in enumerate(session, 1):
        typer.echo("")
        typer.secho(f"[{i}/{len(session)}] {card_front(card)}", bold=True)
        typer.prompt("Press Enter to reveal", default="", show_default=False)
        typer.echo(card_back(card))

        previews = preview_intervals(service.scheduler, card)
        typer.echo(
            "  ".join(f"{r.value}) {r.name.title()} {previews[r]}" for r in Rating)
        )
        rating = _ask_rating()
        if rating is None:
            break
        with domain_errors():
            service.rate(card.id, rating)
        reviewed += 1

    typer.secho(f"Reviewed {reviewed} card(s).", fg="green")


@app.command()
def preview(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card ID.")],
):
    """Show when a card would be due for each rating."""
    service = _service(ctx)
    with domain_errors():
        previews = service.preview(card_id)
    for rating, label in previews.items():
        typer.echo(f"{rating.name.title():<6} {label}")


# ---------------------------------------------------------------------------
# Bulk operations
# ---------------------------------------------------------------------------


@app.command()
def reset(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
):
    """Reset all scheduling progress (words are kept)."""
    if not force:
        typer.confirm("Reset progress on every card?", abort=True)
    service = _service(ctx)
    with domain_errors():
        count = service.reset_progress()
    typer.secho(f"Reset {count} card(s).", fg="green")


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    path: Annotated[
        Path | None, typer.Argument(help="Output file. Prints to stdout when omitted.")
    ] = None,
):
    """Export all cards as a JSON backup."""
    service = _service(ctx)
    with domain_errors():
        text = service.export_json()
    if path is None:
        typer.echo(text)
        return
    path.write_text(text + "\n", encoding="utf-8")
    typer.secho(f"Exported to {path}", fg="green")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="JSON backup to import.")],
):
    """Import cards from a JSON backup; cards already present are skipped."""
    service = _service(ctx)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        typer.secho(f"Error: could not read {path}: {e}", fg="red", err=True)
        raise typer.Exit(1) from None
    with domain_errors():
        count = service.import_json(text)
    typer.secho(f"Imported {count} card(s).", fg="green")


@app.command()
def migrate(ctx: typer.Context):
    """Rewrite the card store in the current record format."""
    service = _service(ctx)
    with domain_errors():
        count = service.migrate_store()
    typer.secho(f"Migrated {count} card(s).", fg="green")


@app.command()
def version():
    """Print the kartei version."""
    typer.echo(VERSION)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
