"""Command-line interface for asp-sanitizer.

Provides commands for redacting likely secrets from source files before
they are shared.

Commands:
    sanitize   Redact a source file and print or write the result
    languages  List supported languages and whether their grammars load

Configuration:
    Supports config files: asp.toml, .asp.yml, etc.
    CLI flags override config file values.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import get_language
from .config_loader import load_config, merge_cli_with_config
from .engine import EngineInitError
from .grammars import get_registry, is_supported, supported_languages
from .sanitizer import create_sanitizer
from .utils import read_file_safe

# Initialize CLI app
app = typer.Typer(
    name="asp-sanitize",
    help="""Redact likely secrets from source code.

Parses TypeScript, JavaScript and Python with tree-sitter and replaces
credential assignments and long opaque tokens with a placeholder.

Examples:
    asp-sanitize sanitize ./src/client.ts
    asp-sanitize sanitize settings.py --output settings.clean.py
    asp-sanitize languages
""",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich; debug level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"asp-sanitizer version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Redact likely secrets from source code."""


@app.command()
def sanitize(
    file: Path = typer.Argument(
        ...,
        help="Source file to sanitize.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    lang: str | None = typer.Option(
        None,
        "--lang",
        "-l",
        help="Language of the file (typescript, javascript, python). [default: from extension, typescript if none]",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (asp.toml or .asp.yml).",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the sanitized source here instead of printing it.",
    ),
    replacement: str | None = typer.Option(
        None,
        "--replacement",
        help='Replacement text for redacted spans. [default: "<REDACTED>"]',
    ),
    extra_names: str | None = typer.Option(
        None,
        "--extra-names",
        help="Additional sensitive name fragments (comma-separated).",
    ),
    no_redact: bool = typer.Option(
        False,
        "--no-redact",
        help="Disable redaction (pass the file through unchanged).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show debug logging.",
    ),
) -> None:
    """Sanitize a file by redacting sensitive information.

    \b
    EXAMPLES:
      # Print a redacted copy of a TypeScript file
      asp-sanitize sanitize ./src/client.ts

      # Force the language and write to a file
      asp-sanitize sanitize snippet.txt --lang python -o snippet.clean.txt
    """
    configure_logging(verbose)

    # Files without an extension are treated as TypeScript
    language = lang or get_language(file) or "typescript"
    if not is_supported(language):
        err_console.print(
            f"[yellow]Warning: unsupported language '{language}', output is unchanged.[/yellow]"
        )

    try:
        project_config = load_config(Path.cwd(), config_file)
        config = merge_cli_with_config(
            project_config,
            no_redact=no_redact,
            replacement=replacement,
            extra_names=extra_names,
        )

        code, encoding = read_file_safe(file)
        sanitizer = create_sanitizer(config=config)
        sanitized = sanitizer.sanitize(code, language)
    except EngineInitError as e:
        err_console.print(f"[red]Fatal: {e}[/red]")
        raise typer.Exit(1) from None
    except OSError as e:
        err_console.print(f"[red]Error reading {file}: {e}[/red]")
        raise typer.Exit(1) from None

    if output is not None:
        try:
            with open(output, "w", encoding=encoding, newline="") as f:
                f.write(sanitized)
        except OSError as e:
            err_console.print(f"[red]Error writing {output}: {e}[/red]")
            raise typer.Exit(1) from None
        err_console.print(f"[green]✓[/green] Wrote {output}")
    else:
        # out() writes the text as-is: no markup, emoji codes or wrapping
        console.out("--- Sanitized Output ---", highlight=False)
        console.out(sanitized, highlight=False, end="" if sanitized.endswith("\n") else "\n")
        console.out("------------------------", highlight=False)

    stats = sanitizer.get_stats()
    if stats:
        err_console.print("[cyan]Redactions applied:[/cyan]")
        for name, count in stats.items():
            err_console.print(f"  {name}: {count}")


@app.command()
def languages() -> None:
    """List supported languages and whether their grammars load."""
    registry = get_registry()

    console.print("[cyan]Supported languages:[/cyan]")
    for name in supported_languages():
        if registry.resolve(name) is not None:
            console.print(f"  {name} [green]✓[/green]")
        else:
            console.print(f"  {name} [red]grammar unavailable[/red]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
