"""Command-line interface for Autoply."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from autoply import __version__
from autoply.config import load_app_config, settings
from autoply.core.errors import AutoplyError
from autoply.core.models import ApplicantProfile, SubmissionOptions
from autoply.jobs.extraction import scrape as scrape_posting
from autoply.jobs.submission import submit_application
from autoply.platforms import ADAPTERS, detect_platform
from autoply.utils.logging import configure_logging

app = typer.Typer(
    name="autoply",
    help="Autoply - extract job postings and submit applications across hiring platforms",
    add_completion=False,
)
console = Console()


@app.callback()
def main_callback() -> None:
    configure_logging()


@app.command()
def scrape(
    url: str = typer.Argument(..., help="Job posting URL"),
    platform: Optional[str] = typer.Option(None, help="Platform id; detected from the URL when omitted"),
    as_json: bool = typer.Option(False, "--json", help="Print the posting as JSON"),
) -> None:
    """Extract a job posting."""
    try:
        posting = asyncio.run(scrape_posting(url, platform=platform))
    except AutoplyError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(posting.model_dump_json())
        return

    table = Table(title=posting.title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Platform", posting.platform.value)
    table.add_row("Company", posting.company)
    table.add_row("Location", posting.location or "-")
    table.add_row("Remote", "-" if posting.remote is None else str(posting.remote))
    table.add_row("Requirements", str(len(posting.requirements)))
    table.add_row("Qualifications", str(len(posting.qualifications)))
    table.add_row("Form Fields", str(len(posting.form_fields)))
    table.add_row("Custom Questions", str(len(posting.custom_questions)))
    console.print(table)

    for question in posting.custom_questions:
        marker = "*" if question.required else " "
        console.print(f"{marker} [bold]{question.id}[/bold] ({question.type.value}) {question.question}")


@app.command()
def apply(
    url: str = typer.Argument(..., help="Job posting URL"),
    profile: Path = typer.Option(..., exists=True, help="Applicant profile JSON file"),
    resume: Optional[Path] = typer.Option(None, exists=True, help="Resume file to upload"),
    cover_letter: Optional[Path] = typer.Option(None, exists=True, help="Cover letter file to upload"),
    answers: Optional[Path] = typer.Option(None, exists=True, help="JSON map of question id to answer"),
    platform: Optional[str] = typer.Option(None, help="Platform id; detected from the URL when omitted"),
) -> None:
    """Submit an application."""
    options = SubmissionOptions(
        profile=ApplicantProfile.model_validate_json(profile.read_text(encoding="utf-8")),
        resume_path=str(resume) if resume else None,
        cover_letter_path=str(cover_letter) if cover_letter else None,
        answers=json.loads(answers.read_text(encoding="utf-8")) if answers else {},
    )

    outcome = asyncio.run(submit_application(url, options, platform=platform))

    color = "green" if outcome.success else "red"
    console.print(f"[{color}]{outcome.status.value.upper()}[/{color}] {outcome.message}")
    for error in outcome.errors:
        console.print(f"  [yellow]• {error}[/yellow]")
    if outcome.screenshot_ref:
        console.print(f"📸 Screenshot: {outcome.screenshot_ref}")

    if not outcome.success:
        raise typer.Exit(1)


@app.command()
def platforms(url: Optional[str] = typer.Argument(None, help="Show which platform a URL maps to")) -> None:
    """List supported platforms."""
    if url:
        console.print(detect_platform(url).value)
        return

    table = Table(title="Supported Platforms")
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Sign-in Detection", style="yellow")
    for platform, adapter in ADAPTERS.items():
        table.add_row(platform.value, adapter.spec.display_name, "yes" if adapter.spec.auth_gate else "no")
    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    app_config = load_app_config()
    table = Table(title="Autoply Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Browser Headless", str(app_config.browser.headless))
    table.add_row("Browser Timeout (ms)", str(app_config.browser.timeout))
    table.add_row("Storage State", app_config.browser.storage_state or "-")
    table.add_row("Humanize", str(app_config.browser.humanize))
    table.add_row("Save Screenshots", str(app_config.application.save_screenshots))
    table.add_row("Screenshot Dir", app_config.application.screenshot_dir)
    table.add_row("Max Steps", str(app_config.application.max_steps))
    table.add_row("Ambiguous Counts As Success", str(app_config.application.ambiguous_is_success))

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Autoply v{__version__}")


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
