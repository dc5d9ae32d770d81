"""CLI entry point: python -m articlex PATH|- [options]"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from articlex.config import ExtractorConfig, RuleConfigError
from articlex.engine import extract_html
from articlex.items import ExtractionResult

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="articlex",
        description=(
            "Extract title, author, publish date and structured content from an\n"
            "article page. Reads HTML from a file or stdin, prints JSON."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("path", metavar="PATH",
                        help="HTML file to read, or '-' for stdin")
    parser.add_argument("--base-url", default="", metavar="URL",
                        help="Page URL used to absolutize image URLs")
    parser.add_argument("--debug", action="store_true", default=False,
                        help="Include locator and assembly counters as debugInfo")
    parser.add_argument("--config", default=None, metavar="FILE",
                        help="YAML rules profile (default/domains layout)")
    parser.add_argument("--max-ancestor-hops", type=int, default=None, metavar="N",
                        help="Cap on ancestor walks (default: 50)")
    parser.add_argument("--indent", type=int, default=2, metavar="N",
                        help="JSON indent (default: 2)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: WARNING)")
    parser.add_argument("--summary", action="store_true", default=False,
                        help="Print a table of content items instead of JSON")
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _build_config(args: argparse.Namespace) -> ExtractorConfig:
    config = (
        ExtractorConfig.from_yaml(args.config, args.base_url)
        if args.config else ExtractorConfig()
    )
    if args.max_ancestor_hops is not None:
        if args.max_ancestor_hops < 1:
            raise RuleConfigError("--max-ancestor-hops must be a positive integer")
        config = dataclasses.replace(config, max_ancestor_hops=args.max_ancestor_hops)
    return config


def _print_summary(result: ExtractionResult) -> None:
    from rich import box
    from rich.console import Console
    from rich.table import Table

    console = Console()
    console.print(f"  [bold]Title     :[/bold] [cyan]{result.title or '-'}[/cyan]")
    console.print(f"  [bold]Author    :[/bold] [green]{result.author or '-'}[/green]")
    console.print(f"  [bold]Published :[/bold] [yellow]{result.publish_date or '-'}[/yellow]")
    if result.error:
        console.print(f"  [bold red]Error     :[/bold red] {result.error}")
    console.print()

    tbl = Table(
        title=f"[bold green]Content Items ({len(result.content)})[/bold green]",
        box=box.SIMPLE_HEAVY,
        show_lines=False,
    )
    tbl.add_column("#",       style="dim",  justify="right", width=4, no_wrap=True)
    tbl.add_column("Type",    style="cyan", width=10,                no_wrap=True)
    tbl.add_column("Preview", max_width=70,                          no_wrap=True)

    for i, item in enumerate(result.content, 1):
        preview = (
            getattr(item, "text", None)
            or getattr(item, "src", None)
            or getattr(item, "html", None)
            or ", ".join(getattr(item, "items", []) or [])
        )
        tbl.add_row(str(i), item.type, str(preview)[:70])
    console.print(tbl)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _build_config(args)
    except (RuleConfigError, OSError) as exc:
        print(f"ERROR: Invalid config: {exc}", file=sys.stderr)
        return 1

    try:
        html = _read_input(args.path)
    except OSError as exc:
        print(f"ERROR: Could not read {args.path}: {exc}", file=sys.stderr)
        return 1

    result = extract_html(html, base_url=args.base_url, debug=args.debug, config=config)

    if args.summary:
        _print_summary(result)
    else:
        print(result.to_json(indent=args.indent))

    if result.error:
        logger.debug("Extraction error: %s", result.error)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
