#!/usr/bin/env python3
"""
Theme Library - export/import CLI

Export themes, theme groups or extracts to a portable JSON snapshot and
import snapshots back with conflict resolution.
"""

import sys
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt, Confirm
from rich import box

from config import setup_logging
from models import ExportKind, Resolution, ImportPreview, ImportResult
from repositories import get_repository, StoreError
from transfer import TransferService, ImportSession, SessionState, TransferError, SessionError

console = Console()
logger = logging.getLogger("cli")

RESOLUTION_CHOICES = [r.value for r in Resolution]


def show_library():
    """Print the library contents."""
    library = get_repository().read_all()

    table = Table(title="Themes", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Extracts", justify="right")
    for theme in library.themes:
        table.add_row(theme.id, theme.name, str(library.extract_count(theme.id)))
    console.print(table)

    table = Table(title="Theme groups", box=box.ROUNDED)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="magenta")
    table.add_column("Themes", justify="right")
    table.add_column("Extracts", justify="right")
    for group in library.theme_groups:
        table.add_row(group.id, group.name, str(len(group.theme_ids)), str(library.group_extract_count(group)))
    console.print(table)

    console.print(f"[dim]{len(library.extracts)} extract(s) in library[/dim]")


def show_preview(preview: ImportPreview, file_name: str = ""):
    """Render an import preview."""
    s = preview.summary
    console.print(Panel(
        f"[bold]{s.total_themes}[/bold] theme(s)   "
        f"[bold]{s.total_theme_groups}[/bold] group(s)   "
        f"[bold]{s.total_extracts}[/bold] extract(s)",
        title=f"Import preview {file_name}".strip(),
        box=box.ROUNDED,
    ))

    if preview.themes:
        table = Table(box=box.SIMPLE, title="Themes")
        table.add_column("Name", style="cyan")
        table.add_column("Extracts", justify="right")
        for t in preview.themes:
            table.add_row(t.name, str(t.extract_count))
        console.print(table)

    if preview.theme_groups:
        table = Table(box=box.SIMPLE, title="Theme groups")
        table.add_column("Name", style="magenta")
        table.add_column("Themes", justify="right")
        for g in preview.theme_groups:
            table.add_row(g.name, str(g.theme_count))
        console.print(table)

    if s.conflicts_count:
        console.print(f"[yellow]{s.conflicts_count} conflict(s) detected[/yellow]")
        table = Table(box=box.SIMPLE)
        table.add_column("Type")
        table.add_column("Imported ID", style="dim")
        table.add_column("Name", style="yellow")
        table.add_column("Existing ID", style="dim")
        for c in preview.conflicts:
            table.add_row(c.type.value, c.original_id, c.imported_item.name, c.existing_id)
        console.print(table)


def show_result(result: ImportResult):
    lines = [
        f"Themes created:        [green]{result.created_themes}[/green]",
        f"Theme groups created:  [green]{result.created_theme_groups}[/green]",
        f"Extracts created:      [green]{result.created_extracts}[/green]",
        f"Items skipped:         [yellow]{result.skipped_items}[/yellow]",
    ]
    style = "green" if not result.errors else "yellow"
    console.print(Panel("\n".join(lines), title="Import complete", border_style=style, box=box.ROUNDED))
    for error in result.errors:
        console.print(f"  [red]✗[/red] {error}")


def parse_resolutions(values: list[str]) -> dict[str, Resolution]:
    """ID=RESOLUTION pairs from --resolve."""
    resolutions = {}
    for value in values or []:
        original_id, sep, resolution = value.partition("=")
        if not sep:
            raise ValueError(f"Expected ID=RESOLUTION, got '{value}'")
        resolutions[original_id.strip()] = Resolution(resolution.strip().upper())
    return resolutions


def cmd_export(args) -> int:
    service = TransferService()
    result = service.export_selection(args.kind, args.ids)

    out = Path(args.output) if args.output else Path(result.file_name)
    out.write_bytes(result.data)

    m = result.metadata
    console.print(
        f"[green]Exported[/green] {m.total_themes} theme(s), {m.total_theme_groups} group(s), "
        f"{m.total_extracts} extract(s) to [bold]{out}[/bold]"
    )
    return 0


def cmd_preview(args) -> int:
    path = Path(args.file)
    preview = TransferService().preview_import(path.read_bytes())
    show_preview(preview, path.name)
    return 0


def cmd_import(args) -> int:
    path = Path(args.file)
    session = ImportSession(TransferService())
    preview = session.load(path.read_bytes(), path.name)
    show_preview(preview, path.name)

    if session.conflicts:
        session.open_conflicts()
        explicit = parse_resolutions(args.resolve)

        for conflict in session.conflicts:
            if conflict.original_id in explicit:
                choice = explicit[conflict.original_id]
            elif args.default:
                choice = Resolution(args.default)
            elif args.yes:
                choice = Resolution.REUSE_EXISTING
            else:
                choice = Resolution(Prompt.ask(
                    f"'{conflict.imported_item.name}' ({conflict.type.value})",
                    choices=RESOLUTION_CHOICES,
                    default=Resolution.REUSE_EXISTING.value,
                ))
            session.set_resolution(conflict.original_id, choice, conflict.type)

    if not args.yes and not Confirm.ask("Start import?", default=True):
        session.close()
        console.print("[dim]Import cancelled[/dim]")
        return 1

    result = session.start_import()
    show_result(result)
    return 0 if session.state is SessionState.SUCCESS and not result.errors else 2


def cli(argv=None) -> int:
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Export and import the theme library",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  theme-transfer list                          # Show library contents
  theme-transfer export all                    # Export everything
  theme-transfer export themes t1 t2 -o x.json # Export two themes + extracts
  theme-transfer preview x.json                # Show what an import would do
  theme-transfer import x.json --default SKIP  # Import, skipping conflicts
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List library contents")

    p = sub.add_parser("export", help="Export a selection to a snapshot file")
    p.add_argument("kind", choices=[k.value for k in ExportKind])
    p.add_argument("ids", nargs="*", help="IDs to export (ignored for 'all')")
    p.add_argument("--output", "-o", help="Output file (default: suggested name)")

    p = sub.add_parser("preview", help="Preview a snapshot import")
    p.add_argument("file")

    p = sub.add_parser("import", help="Import a snapshot")
    p.add_argument("file")
    p.add_argument("--resolve", action="append", metavar="ID=RESOLUTION",
                   help=f"Resolution for one conflict ({', '.join(RESOLUTION_CHOICES)})")
    p.add_argument("--default", choices=RESOLUTION_CHOICES,
                   help="Resolution for every conflict not given with --resolve")
    p.add_argument("--yes", "-y", action="store_true", help="Do not prompt")

    args = parser.parse_args(argv)

    setup_logging(
        "DEBUG" if args.verbose else None,
        handler=RichHandler(console=console, show_path=False),
    )

    commands = {
        "list": lambda a: show_library() or 0,
        "export": cmd_export,
        "preview": cmd_preview,
        "import": cmd_import,
    }

    try:
        return commands[args.command](args)
    except TransferError as e:
        console.print(f"[red]{e.code}[/red]: {e.message}")
        return 1
    except (StoreError, SessionError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(cli())
