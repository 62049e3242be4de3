from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from pathsel.config import (
    PathselConfig,
    config_path,
    default_use_default_excludes,
    load_config,
    save_config,
)
from pathsel.engine import PatternError
from pathsel.models import FileRecord
from pathsel.scanner import scan_selected_files_with_status
from pathsel.selector import PathSelector, build_path_selector


app = typer.Typer(help="pathsel CLI")
console = Console()

INCLUDE_HELP = "Include pattern(s), legacy or `syntax:expression` (repeatable)."
EXCLUDE_HELP = "Exclude pattern(s), legacy or `syntax:expression` (repeatable)."
DEFAULT_EXCLUDES_HELP = "Also exclude SCM metadata and editor temp files."
CONFIG_DIR_HELP = "Directory holding `.pathsel.json`. Defaults to the current directory."


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logger = logging.getLogger("pathsel")
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(logging.DEBUG)


def _load_settings(config_dir: Path | None) -> PathselConfig:
    if config_path(config_dir).exists():
        return load_config(config_dir)
    return PathselConfig(use_default_excludes=default_use_default_excludes())


def _build_selector(
    base: Path,
    include: list[str] | None,
    exclude: list[str] | None,
    default_excludes: bool | None,
    config_dir: Path | None,
) -> PathSelector:
    settings = _load_settings(config_dir)
    use_default_excludes = (
        settings.use_default_excludes if default_excludes is None else default_excludes
    )
    return build_path_selector(
        base,
        [*settings.includes, *(include or [])],
        [*settings.excludes, *(exclude or [])],
        use_default_excludes=use_default_excludes,
    )


def _render_records(records: list[FileRecord], *, with_digest: bool) -> None:
    if not records:
        return

    table = Table(title="Selected")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("Modified (ns)", justify="right")
    if with_digest:
        table.add_column("SHA-256")

    for record in records:
        row = [escape(record.path), str(record.size), str(record.mtime_ns)]
        if with_digest:
            row.append(record.sha256 or "")
        table.add_row(*row)

    console.print(table)


def _render_patterns(title: str, patterns: tuple[str, ...], empty: str) -> None:
    console.print(Text(f"{title} ({len(patterns)}):", style="bold"))
    if not patterns:
        console.print(f"  [dim]{empty}[/dim]")
    for pattern in patterns:
        console.print(f"  {escape(pattern)}")


@app.command()
def init(
    config_dir: Path | None = typer.Option(None, "--config-dir", help=CONFIG_DIR_HELP),
) -> None:
    """Write an empty `.pathsel.json` in the current directory."""
    path = config_path(config_dir)
    if path.exists():
        console.print(f"[yellow]Config already exists:[/yellow] {path}")
        raise typer.Exit(code=1)
    config = PathselConfig(use_default_excludes=default_use_default_excludes())
    save_config(config, config_dir)
    console.print(f"[green]Initialized pathsel[/green] config at {path}")


@app.command(name="list")
def list_files(
    root: Path = typer.Argument(Path("."), help="Base directory to scan."),
    include: list[str] | None = typer.Option(None, "--include", help=INCLUDE_HELP),
    exclude: list[str] | None = typer.Option(None, "--exclude", help=EXCLUDE_HELP),
    default_excludes: bool | None = typer.Option(
        None, "--default-excludes/--no-default-excludes", help=DEFAULT_EXCLUDES_HELP
    ),
    digest: bool = typer.Option(False, "--digest", help="Compute the SHA-256 of each file."),
    config_dir: Path | None = typer.Option(None, "--config-dir", help=CONFIG_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pruning decisions."),
) -> None:
    """List the files under ROOT selected by the patterns."""
    _configure_logging(verbose)
    root = root.resolve()
    if not root.is_dir():
        console.print(f"[red]Not a directory: {root}[/red]")
        raise typer.Exit(code=1)

    try:
        selector = _build_selector(root, include, exclude, default_excludes, config_dir)
        records = scan_selected_files_with_status(
            root, selector, with_digest=digest, console=console
        )
    except KeyboardInterrupt:
        console.print("[yellow]Scan interrupted.[/yellow]")
        raise typer.Exit(code=130)
    except (PatternError, OSError, ValueError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    _render_records(records, with_digest=digest)
    console.print(f"Selected {len(records)} file(s) under {root} ({escape(str(selector))})")


@app.command()
def check(
    paths: list[Path] = typer.Argument(..., help="Paths to test."),
    root: Path = typer.Option(Path("."), "--root", help="Base directory of the patterns."),
    include: list[str] | None = typer.Option(None, "--include", help=INCLUDE_HELP),
    exclude: list[str] | None = typer.Option(None, "--exclude", help=EXCLUDE_HELP),
    default_excludes: bool | None = typer.Option(
        None, "--default-excludes/--no-default-excludes", help=DEFAULT_EXCLUDES_HELP
    ),
    config_dir: Path | None = typer.Option(None, "--config-dir", help=CONFIG_DIR_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log selector construction."),
) -> None:
    """Tell whether each PATH is selected and whether it could hold selected files."""
    _configure_logging(verbose)
    root = root.resolve()
    try:
        selector = _build_selector(root, include, exclude, default_excludes, config_dir)
    except (PatternError, OSError, ValueError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=escape(str(selector)))
    table.add_column("Path")
    table.add_column("Selected")
    table.add_column("Could hold selected")
    for path in paths:
        resolved = (root / path).resolve()
        table.add_row(
            escape(str(path)),
            "yes" if selector.is_selected(resolved) else "no",
            "yes" if selector.could_hold_selected(resolved) else "no",
        )
    console.print(table)


@app.command()
def explain(
    include: list[str] | None = typer.Option(None, "--include", help=INCLUDE_HELP),
    exclude: list[str] | None = typer.Option(None, "--exclude", help=EXCLUDE_HELP),
    default_excludes: bool | None = typer.Option(
        None, "--default-excludes/--no-default-excludes", help=DEFAULT_EXCLUDES_HELP
    ),
    config_dir: Path | None = typer.Option(None, "--config-dir", help=CONFIG_DIR_HELP),
) -> None:
    """Show how the patterns are normalized for file and directory matching."""
    try:
        selector = _build_selector(Path.cwd(), include, exclude, default_excludes, config_dir)
    except (PatternError, OSError, ValueError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    console.print(escape(str(selector)))
    _render_patterns("File includes", selector.include_patterns, "everything")
    _render_patterns("File excludes", selector.exclude_patterns, "nothing")
    _render_patterns("Directory includes", selector.directory_include_patterns, "every directory")
    _render_patterns("Directory excludes", selector.directory_exclude_patterns, "nothing")
    simplified = selector.try_simplify()
    if simplified is not None:
        console.print(f"[green]Simplifies to[/green] {escape(repr(simplified))}")
