#!/usr/bin/env python3
"""
BMK - Bookmark Keeper

Command-line front end for the bookmark store.
"""
import sys
import argparse
import json
import locale
import logging
from pathlib import Path
from typing import List

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from bmk.config import init_config, get_config
from bmk.constants import (
    CATEGORY_ALL, DEFAULT_CATEGORIES, FAVORITES_ALL, FAVORITES_ONLY, SORT_METHODS,
)
from bmk.db import get_db
from bmk.errors import BookmarkError, StorageError
from bmk.exporters import export_file
from bmk.importers import parse_import, read_import_file, validate_import
from bmk.models import Bookmark
from bmk.query import query
from bmk.store import BookmarkStore

logger = logging.getLogger(__name__)


console = Console()
err_console = Console(stderr=True)


def get_store(args) -> BookmarkStore:
    """Open the configured database and load the collection."""
    config = get_config()
    try:
        db = get_db(args.db)
    except SQLAlchemyError as e:
        raise StorageError(f"Could not open database: {e}") from e
    store = BookmarkStore(db, key=config.storage_key)
    store.load()
    return store


def format_bookmark(bookmark: Bookmark) -> str:
    """Format a bookmark as plain text."""
    star = "★ " if bookmark.is_favorite else ""
    lines = [f"[{bookmark.id}] {star}{bookmark.title} ({bookmark.category})", f"    {bookmark.url}"]
    if bookmark.description:
        lines.append(f"    {bookmark.description}")
    return "\n".join(lines)


def output_bookmarks(bookmarks: List[Bookmark], format: str = "table"):
    """Output bookmarks in the specified format."""
    config = get_config()

    if format == "table":
        table = Table(title=f"Bookmarks ({len(bookmarks)})")
        table.add_column("ID", style="cyan")
        table.add_column("★", style="red")
        table.add_column("Title", style="green")
        table.add_column("URL", style="blue")
        table.add_column("Category", style="yellow")
        table.add_column("Created", style="magenta")

        for b in bookmarks:
            created = b.created.strftime("%Y-%m-%d %H:%M") if b.created else ""
            table.add_row(
                b.id,
                "★" if b.is_favorite else "",
                b.title[:50],
                b.url[:50],
                b.category,
                created,
            )

        console.print(table)
    elif format == "json":
        data = [b.to_dict() for b in bookmarks]
        print(json.dumps(data, indent=2 if config.export_pretty else None, ensure_ascii=False))
    elif format == "urls":
        for b in bookmarks:
            print(b.url)
    else:  # plain
        for b in bookmarks:
            print(format_bookmark(b))
            print()


def cmd_add(args):
    """Add a new bookmark."""
    store = get_store(args)
    bookmark = store.add(
        title=args.title,
        url=args.url,
        category=args.category,
        description=args.description or "",
    )
    if args.quiet:
        print(bookmark.id)
    else:
        console.print(f"[green]Added bookmark {bookmark.id}: {bookmark.title}[/green]")


def cmd_list(args):
    """List bookmarks with optional filters."""
    store = get_store(args)
    config = get_config()

    results = query(
        store.bookmarks,
        search=args.search or "",
        category=args.category or CATEGORY_ALL,
        favorites=FAVORITES_ONLY if args.favorites else FAVORITES_ALL,
        sort=args.sort or config.default_sort,
    )

    if not results and args.output == "table":
        console.print("[yellow]No bookmarks found[/yellow]")
        return

    output_bookmarks(results, args.output)


def cmd_edit(args):
    """Edit a bookmark."""
    store = get_store(args)
    bookmark = store.edit(
        args.id,
        title=args.title,
        url=args.url,
        category=args.category,
        description=args.description,
    )
    if bookmark is None:
        console.print(f"[red]Bookmark not found: {args.id}[/red]")
        sys.exit(1)
    if not args.quiet:
        console.print(f"[green]Updated bookmark {args.id}[/green]")


def cmd_delete(args):
    """Delete one or more bookmarks."""
    store = get_store(args)
    deleted_count = 0

    for bookmark_id in args.ids:
        if store.delete(bookmark_id):
            deleted_count += 1
            if not args.quiet:
                console.print(f"[green]Deleted bookmark {bookmark_id}[/green]")
        else:
            err_console.print(f"[yellow]Bookmark not found: {bookmark_id}[/yellow]")

    if args.quiet:
        print(deleted_count)


def cmd_favorite(args):
    """Toggle the favorite flag of a bookmark."""
    store = get_store(args)
    bookmark = store.toggle_favorite(args.id)
    if bookmark is None:
        console.print(f"[red]Bookmark not found: {args.id}[/red]")
        sys.exit(1)
    if not args.quiet:
        state = "now a favorite" if bookmark.is_favorite else "no longer a favorite"
        console.print(f"[green]{bookmark.title} is {state}[/green]")


def cmd_export(args):
    """Export all bookmarks to a timestamped JSON file."""
    store = get_store(args)
    config = get_config()
    directory = Path(args.dir or config.export_dir)

    path = export_file(store.bookmarks, directory, pretty=config.export_pretty)
    if args.quiet:
        print(path)
    else:
        console.print(f"[green]Exported {len(store)} bookmarks to {path}[/green]")


def cmd_import(args):
    """Import bookmarks from a JSON file."""
    store = get_store(args)
    config = get_config()

    # Reject unreadable or invalid files before asking anything
    text = read_import_file(Path(args.file))
    validate_import(parse_import(text))

    proceed = True
    if len(store) and config.confirm_import and not args.yes:
        proceed = Confirm.ask(
            f"There are already {len(store)} bookmarks. "
            f"Imported bookmarks will be added to them. Continue?",
            console=console,
        )

    result = store.import_text(text, proceed=proceed)

    if not result.proceeded:
        console.print("[yellow]Import cancelled[/yellow]")
        return

    if args.quiet:
        print(result.imported_count)
    else:
        console.print(
            f"[green]Imported {result.imported_count} bookmarks[/green] "
            f"(skipped {result.duplicate_count} duplicates)"
        )


def cmd_categories(args):
    """List categories in use, or the suggested ones when the collection is empty."""
    store = get_store(args)
    categories = store.categories() or list(DEFAULT_CATEGORIES)
    for name in categories:
        print(name)


def cmd_config(args):
    """Show configuration values, or save them to a config file."""
    config = get_config()

    if args.save is not None:
        path = Path(args.save) if args.save else None
        config.save(path)
        if not args.quiet:
            console.print("[green]Configuration saved[/green]")
        return

    if args.key:
        if not hasattr(config, args.key):
            console.print(f"[red]Unknown config key: {args.key}[/red]")
            sys.exit(1)
        print(getattr(config, args.key))
        return

    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    for key, value in vars(config).items():
        table.add_row(key, str(value))
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="BMK - Bookmark Keeper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bmk add "Go Docs" https://go.dev dev --description "Language docs"
  bmk list --search docs --category dev --sort title
  bmk list --favorites --output urls
  bmk edit 1f0c... --title "Go Documentation"
  bmk favorite 1f0c...
  bmk delete 1f0c... 9ab3...
  bmk export --dir backups
  bmk import bookmarks_20240501_093000.json --yes

Configuration:
  Default database: ./bmk.db or from config
  Config file: ~/.config/bmk/config.toml
  Environment: BMK_DATABASE, BMK_OUTPUT_FORMAT
        """
    )

    # Global options
    parser.add_argument("--db", help="Database file (default: bmk.db)")
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")
    parser.add_argument("-o", "--output", choices=["table", "json", "plain", "urls"],
                        help="Output format")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Add a bookmark")
    add_parser.add_argument("title", help="Bookmark title")
    add_parser.add_argument("url", help="URL to bookmark")
    add_parser.add_argument("category", help="Category")
    add_parser.add_argument("--description", help="Description")
    add_parser.set_defaults(func=cmd_add)

    list_parser = subparsers.add_parser("list", help="List bookmarks")
    list_parser.add_argument("--search", "-s", help="Search title, URL and description")
    list_parser.add_argument("--category", "-c", help="Only this category")
    list_parser.add_argument("--favorites", "-f", action="store_true", help="Only favorites")
    list_parser.add_argument("--sort", choices=SORT_METHODS, help="Sort order")
    list_parser.set_defaults(func=cmd_list)

    edit_parser = subparsers.add_parser("edit", help="Edit a bookmark")
    edit_parser.add_argument("id", help="Bookmark ID")
    edit_parser.add_argument("--title", help="New title")
    edit_parser.add_argument("--url", help="New URL")
    edit_parser.add_argument("--category", help="New category")
    edit_parser.add_argument("--description", help="New description (empty string clears it)")
    edit_parser.set_defaults(func=cmd_edit)

    delete_parser = subparsers.add_parser("delete", help="Delete bookmarks")
    delete_parser.add_argument("ids", nargs="+", help="Bookmark IDs")
    delete_parser.set_defaults(func=cmd_delete)

    favorite_parser = subparsers.add_parser("favorite", help="Toggle favorite")
    favorite_parser.add_argument("id", help="Bookmark ID")
    favorite_parser.set_defaults(func=cmd_favorite)

    export_parser = subparsers.add_parser("export", help="Export to a JSON file")
    export_parser.add_argument("--dir", help="Output directory (default: config export_dir)")
    export_parser.set_defaults(func=cmd_export)

    import_parser = subparsers.add_parser("import", help="Import from a JSON file")
    import_parser.add_argument("file", help="JSON file to import")
    import_parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    import_parser.set_defaults(func=cmd_import)

    categories_parser = subparsers.add_parser("categories", help="List categories")
    categories_parser.set_defaults(func=cmd_categories)

    config_parser = subparsers.add_parser("config", help="Show configuration")
    config_parser.add_argument("key", nargs="?", help="Config key")
    config_parser.add_argument("--save", metavar="PATH", nargs="?", const="",
                               help="Write the effective configuration (default: ~/.config/bmk/config.toml)")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_args = {}
    if args.output:
        config_args["output_format"] = args.output
    if args.config:
        config_args["config_file"] = Path(args.config)

    config = init_config(database=args.db, **config_args)

    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.debug("Falling back to the C collation locale")

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.WARNING),
        format="%(levelname)s: %(message)s",
    )
    console.no_color = not config.color_output

    if not args.output:
        args.output = config.output_format

    try:
        args.func(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except BookmarkError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
