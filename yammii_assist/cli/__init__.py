"""
Command-Line Interface

CLI commands for the Yammii POS support assistant.

Commands:
    yammii-assist chat     - Interactive support chat
    yammii-assist ask      - Answer a single question
    yammii-assist extract  - Extract Q&A pairs from a document
    yammii-assist info     - Show model and knowledge base information

Usage:
    # Chat, with /add, /upload PATH, /stats and /quit commands
    yammii-assist chat

    # One question
    yammii-assist ask "刷卡机掉线怎么办？"

    # Extract knowledge from a manual
    yammii-assist extract manual.pdf --json
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from yammii_assist.config.settings import AssistConfig
from yammii_assist.errors import ExtractionFailed
from yammii_assist.types.knowledge import KnowledgeItem

__all__ = ["main", "app"]

app = typer.Typer(
    name="yammii-assist",
    help="Yammii POS technical support assistant",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def _main(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="TOML configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show debug logging",
    ),
) -> None:
    """Load .env, logging and configuration shared by all commands."""
    load_dotenv()
    _configure_logging(verbose)
    try:
        config = AssistConfig.from_file(config_file) if config_file else AssistConfig()
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/]")
        raise typer.Exit(code=2)
    ctx.obj = config


def _create_session(config: AssistConfig):
    from yammii_assist.api.session import SupportSession

    try:
        return SupportSession(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=2)


def _print_reply(reply: str) -> None:
    console.print(Panel(Markdown(reply), title="Yammii AI", border_style="orange3"))


def _knowledge_table(items: list[KnowledgeItem], title: str) -> Table:
    table = Table(title=title, show_lines=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Question", style="cyan")
    table.add_column("Answer")
    for i, item in enumerate(items, start=1):
        table.add_row(str(i), item.question, item.answer)
    return table


@app.command()
def chat(ctx: typer.Context) -> None:
    """Interactive support chat."""
    session = _create_session(ctx.obj)

    async def _run() -> None:
        for turn in session.messages:
            _print_reply(turn.text)
        console.print("[dim]Commands: /add, /upload PATH, /stats, /quit[/]")

        while True:
            try:
                line = console.input("[bold orange3]>[/] ")
            except (EOFError, KeyboardInterrupt):
                console.print()
                break

            command = line.strip()
            if not command:
                continue
            if command in ("/quit", "/exit"):
                break
            if command == "/stats":
                stats = session.stats()
                console.print(
                    f"Built-in entries: {stats['base_entries']}  "
                    f"Added entries: {stats['added_entries']}"
                )
                report = session.cost_report()
                console.print(
                    f"[dim]Model calls: {report.breakdown.total_calls}  "
                    f"Tokens: {report.breakdown.total_tokens}  "
                    f"Est. cost: ${report.breakdown.total_estimated_cost_usd:.6f}[/]"
                )
                for warning in report.warnings:
                    console.print(f"[yellow]{warning}[/]")
                continue
            if command == "/add":
                question = console.input("Question: ")
                answer = console.input("Answer: ")
                try:
                    session.add_manual_knowledge(question, answer)
                except ValueError as e:
                    console.print(f"[yellow]{e}[/]")
                else:
                    console.print("[green]Knowledge added.[/]")
                continue
            if command.startswith("/upload"):
                path = command.removeprefix("/upload").strip()
                if not path:
                    console.print("[yellow]Usage: /upload PATH[/]")
                    continue
                try:
                    with console.status("Analyzing document..."):
                        outcome = await session.import_document(Path(path).expanduser())
                except (FileNotFoundError, ValueError) as e:
                    console.print(f"[red]{e}[/]")
                    continue
                if outcome.message:
                    console.print(f"[yellow]{outcome.message}[/]")
                else:
                    console.print(f"[green]Added {outcome.added} knowledge items.[/]")
                continue

            with console.status("Thinking..."):
                reply = await session.ask(command)
            if reply is not None:
                _print_reply(reply)

    asyncio.run(_run())


@app.command()
def ask(
    ctx: typer.Context,
    question: str = typer.Argument(
        ...,
        help="Question for the support assistant",
    ),
) -> None:
    """Answer a single question."""
    session = _create_session(ctx.obj)

    async def _run() -> None:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Thinking...")
            reply = await session.ask(question)
            progress.update(task, completed=True)

        if reply is None:
            console.print("[yellow]Question is empty.[/]")
            raise typer.Exit(code=1)
        _print_reply(reply)

    asyncio.run(_run())


@app.command()
def extract(
    ctx: typer.Context,
    path: Path = typer.Argument(
        ...,
        help="Document to analyze (text, PDF or image)",
        exists=True,
        dir_okay=False,
    ),
    mime_type: Optional[str] = typer.Option(
        None,
        "--mime-type", "-m",
        help="Media type (guessed from the file name by default)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the items as JSON",
    ),
) -> None:
    """Extract Q&A pairs from a document."""
    from yammii_assist.assistant.extractor import DocumentExtractor
    from yammii_assist.providers import create_llm_provider
    from yammii_assist.types.knowledge import ExtractionRequest

    config: AssistConfig = ctx.obj

    try:
        request = ExtractionRequest.from_path(path, mime_type)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=2)

    extractor = DocumentExtractor(
        create_llm_provider(config),
        temperature=config.extraction_temperature,
    )

    async def _run() -> list[KnowledgeItem]:
        with console.status(f"Analyzing {path.name}..."):
            return await extractor.extract_request(request)

    try:
        items = asyncio.run(_run())
    except ExtractionFailed as e:
        console.print(f"[red]{e.message}[/]")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps([item.model_dump() for item in items], ensure_ascii=False))
        return

    if not items:
        console.print("[yellow]未能从文档中提取到有效信息。[/]")
        return
    console.print(_knowledge_table(items, f"Extracted from {path.name}"))


@app.command()
def info(ctx: typer.Context) -> None:
    """Show model and knowledge base information."""
    from yammii_assist.knowledge.assets import load_assets

    config: AssistConfig = ctx.obj
    try:
        assets = load_assets(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=2)

    table = Table(title="yammii-assist")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Provider", config.llm_provider)
    table.add_row("Model", config.llm_model)
    table.add_row("Chat temperature", str(config.chat_temperature))
    table.add_row("Extraction temperature", str(config.extraction_temperature))
    table.add_row("API key", "set" if config.google_api_key else "[red]missing[/]")
    table.add_row("Knowledge base", assets.base_source)
    table.add_row("Prompt template", assets.template_source)
    table.add_row("Built-in entries", str(assets.base_entry_count))

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()
