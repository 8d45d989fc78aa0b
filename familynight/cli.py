"""familynight CLI — run the content-safety pipeline from a terminal."""

import asyncio
import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from familynight import __version__
from familynight.config import Settings, get_settings

console = Console()

GAME_CHOICES = [
    "superhero-origin",
    "family-movie",
    "comic-maker",
    "noisy-storybook",
    "roast-battle",
    "dad-jokes",
    "character-quiz",
    "treehouse-designer",
    "restaurant-menu",
]


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _security_log(settings: Settings):
    from familynight.security.audit_log import SecurityLog
    from familynight.storage import JsonFileStore

    return SecurityLog(JsonFileStore(settings.store_path), user_agent=settings.user_agent)


def _safety_store(settings: Settings, log=None):
    from familynight.settings import SafetyModeStore
    from familynight.storage import JsonFileStore

    return SafetyModeStore(JsonFileStore(settings.store_path), log=log)


def _parse_data(data: str | None) -> dict:
    if not data:
        return {}
    try:
        parsed = json.loads(data)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--data")
    if not isinstance(parsed, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--data")
    return parsed


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Override FAMILYNIGHT_LOG_LEVEL")
@click.pass_context
def main(ctx: click.Context, log_level: str | None):
    """familynight — content safety for AI Family Night.

    Sanitize and validate what families type, build injection-resistant
    prompts, moderate what the model writes back, and review the security
    log those steps produce.
    """
    settings = get_settings()
    if log_level:
        settings.log_level = log_level.upper()
    _setup_logging(settings.log_level)
    ctx.obj = settings


# ── Sanitize / Validate ──────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.option("--max-length", default=500, show_default=True, help="Truncate after this many characters")
@click.pass_obj
def sanitize(settings: Settings, text: str, max_length: int):
    """Show the sanitised form of TEXT."""
    from familynight.security.sanitizer import is_suspicious_input, sanitize as sanitize_text

    log = _security_log(settings)
    result = sanitize_text(text, max_length=max_length, log=log)

    console.print(result, markup=False, highlight=False)
    if is_suspicious_input(text):
        console.print("[yellow]![/] Input looks suspicious; review the security log.")


@main.command()
@click.argument("text")
@click.option(
    "--context", "-c", default="general",
    type=click.Choice(["name", "story", "chat", "general"]),
    help="Which input policy to apply",
)
@click.pass_obj
def validate(settings: Settings, text: str, context: str):
    """Validate TEXT against an input policy."""
    from familynight.security.validator import validate as validate_text

    result = validate_text(text, context, log=_security_log(settings))
    if result.valid:
        console.print(f"  [green]v[/] Valid ({context})")
        console.print(result.sanitized, markup=False, highlight=False)
    else:
        console.print(f"  [red]x[/] {result.error}")
        sys.exit(1)


# ── Prompt ───────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.option("--game", "-g", required=True, type=click.Choice(GAME_CHOICES))
@click.option("--data", "-d", default=None, help="Extra form fields as a JSON object")
@click.option("--safe/--no-safe", default=None, help="Grandma Mode (default: saved setting)")
@click.pass_obj
def prompt(settings: Settings, text: str, game: str, data: str | None, safe: bool | None):
    """Print the system and user messages that would be sent for TEXT."""
    from familynight.errors import InvalidInputError
    from familynight.llm.prompt_builder import build_prompt

    log = _security_log(settings)
    safety_mode = _safety_store(settings).get() if safe is None else safe

    try:
        messages = build_prompt(text, game, _parse_data(data), safety_mode=safety_mode, log=log)
    except InvalidInputError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        sys.exit(1)

    for message in messages:
        console.print(Panel(Text(message.content), title=message.role, expand=False))


# ── Moderate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.option("--game", "-g", default="default", help="Game whose rules apply")
@click.option("--safe/--no-safe", default=None, help="Grandma Mode (default: saved setting)")
@click.option("--user-input", is_flag=True, help="Use the lenient checks for text a person typed")
@click.pass_obj
def moderate(settings: Settings, text: str, game: str, safe: bool | None, user_input: bool):
    """Run output moderation on TEXT and print the verdict."""
    from familynight.moderation.moderator import ContentModerator

    log = _security_log(settings)
    moderator = ContentModerator.from_settings(settings, log=log)

    if user_input:
        verdict = moderator.moderate_user_input(text)
    else:
        safety_mode = _safety_store(settings).get() if safe is None else safe
        verdict = asyncio.run(moderator.moderate_strict(text, game, safety_mode=safety_mode))

    if verdict.safe:
        console.print("  [green]SAFE[/]")
        return

    console.print(f"  [red]UNSAFE[/] {verdict.reason} [dim]({verdict.category})[/]")
    console.print(f"  Fallback: {moderator.fallback_for(game)}", markup=False)
    sys.exit(1)


# ── Generate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.option("--game", "-g", required=True, type=click.Choice(GAME_CHOICES))
@click.option("--data", "-d", default=None, help="Extra form fields as a JSON object")
@click.option("--safe/--no-safe", default=None, help="Grandma Mode (default: saved setting)")
@click.option("--max-tokens", default=1000, show_default=True)
@click.option("--stream", is_flag=True, help="Print the text as it arrives (after moderation)")
@click.pass_obj
def generate(
    settings: Settings,
    text: str,
    game: str,
    data: str | None,
    safe: bool | None,
    max_tokens: int,
    stream: bool,
):
    """Generate moderated content for a game. Needs ANTHROPIC_API_KEY."""
    from familynight.errors import InvalidInputError
    from familynight.generation import GenerationService

    log = _security_log(settings)
    safety_mode = _safety_store(settings).get() if safe is None else safe
    service = GenerationService.from_settings(settings, log=log)
    extra = _parse_data(data)

    console.print(f"\n[bold blue]familynight[/] — Generating for {game}\n")

    try:
        if stream:
            result = asyncio.run(
                service.generate_streaming(
                    text, game, extra,
                    on_chunk=lambda chunk: console.print(chunk, end="", markup=False, highlight=False),
                    safety_mode=safety_mode,
                    max_tokens=max_tokens,
                )
            )
            console.print()
        else:
            result = asyncio.run(
                service.generate(text, game, extra, safety_mode=safety_mode, max_tokens=max_tokens)
            )
    except InvalidInputError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        sys.exit(1)

    if result.success:
        if not stream:
            console.print(result.content, markup=False, highlight=False)
        return

    console.print(f"[yellow]{escape(result.fallback)}[/]")
    console.print(f"[dim]Reason: {escape(result.error)}[/]")
    sys.exit(1)


# ── Security log ─────────────────────────────────────────────────────


@main.group(name="log")
def security_log():
    """Review the local security event log."""


@security_log.command(name="show")
@click.option("--type", "-t", "event_type", default=None, help="Only events of this type")
@click.option("--limit", "-n", default=20, show_default=True)
@click.pass_obj
def show_log(settings: Settings, event_type: str | None, limit: int):
    """List recent security events, newest first."""
    events = _security_log(settings).query(event_type)

    if not events:
        console.print("[yellow]No security events recorded.[/]")
        return

    table = Table(title=f"Security Events ({len(events)} stored)")
    table.add_column("Time", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Details")

    for event in events[:limit]:
        details = ", ".join(f"{k}={v}" for k, v in event.metadata.items())
        table.add_row(event.timestamp[:19], event.type, details[:80])

    console.print(table)


@security_log.command(name="stats")
@click.pass_obj
def log_stats(settings: Settings):
    """Summarise the security log."""
    from familynight.moderation.moderator import moderation_stats

    log = _security_log(settings)
    stats = log.stats()

    table = Table(title="Security Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="green")
    table.add_row("Total", str(stats.total))
    table.add_row("Last 24 hours", str(stats.last_24_hours))
    table.add_row("Last week", str(stats.last_week))
    for event_type, count in sorted(stats.by_type.items()):
        table.add_row(f"  {event_type}", str(count))
    console.print(table)

    mod = moderation_stats(log)
    if mod.total:
        console.print(f"\n[bold]Moderation rejections:[/] {mod.total}")
        for category, count in sorted(mod.by_category.items()):
            console.print(f"  {category}: {count}")


@security_log.command(name="alerts")
@click.pass_obj
def log_alerts(settings: Settings):
    """Check the log for unusual activity."""
    alert = _security_log(settings).check_alerts()
    if alert.alert:
        console.print(f"  [red]ALERT[/] {alert.reason}")
    else:
        console.print("  [green]OK[/] No unusual activity")


@security_log.command(name="clear")
@click.confirmation_option(prompt="Delete every stored security event?")
@click.pass_obj
def clear_log(settings: Settings):
    """Delete every stored security event."""
    if _security_log(settings).clear():
        console.print("[green]Security log cleared.[/]")
    else:
        console.print("[red]Could not clear the security log.[/]")
        sys.exit(1)


@security_log.command(name="export")
@click.option("--output", "-o", default=None, help="Write to this file instead of stdout")
@click.pass_obj
def export_log(settings: Settings, output: str | None):
    """Export the log and its statistics as JSON."""
    from familynight.security.sanitizer import sanitize_filename

    document = _security_log(settings).export()
    if not output:
        click.echo(document)
        return

    from pathlib import Path

    path = Path(output)
    path = path.with_name(sanitize_filename(path.name))
    path.write_text(document, encoding="utf-8")
    console.print(f"[green]Exported to:[/] {path}")


# ── Settings ─────────────────────────────────────────────────────────


@main.command(name="safety-mode")
@click.argument("state", required=False, type=click.Choice(["on", "off"]))
@click.pass_obj
def safety_mode(settings: Settings, state: str | None):
    """Show or change Grandma Mode (extra-safe content)."""
    store = _safety_store(settings, log=_security_log(settings))

    if state is not None and not store.set(state == "on"):
        console.print("[red]Could not save the setting.[/]")
        sys.exit(1)

    enabled = store.get()
    label = "[green]ON[/]" if enabled else "[dim]OFF[/]"
    console.print(f"  Grandma Mode: {label}")


if __name__ == "__main__":
    main()
