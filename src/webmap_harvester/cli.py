"""
Command-line interface for webmap-harvester.

Commands:
- harvest: Load a map page and request every tile and glyph shard it could use
- plan: Count (or list) the tile URLs a saved TileJSON document expands to
- fonts: Expand sample glyph URLs into their full shard sets
"""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .capture.browser import launch_page
from .config import HarvestConfig, load_config, parse_bounds
from .errors import ConfigError
from .resources.glyphs import dedupe_families, expand
from .session import HarvestReport, HarvestSession
from .tiles.descriptor import parse_tilejson
from .tiles.enumerator import TileSpaceEnumerator

console = Console()


async def _harvest(url: str, config: HarvestConfig) -> HarvestReport:
    async with launch_page(config.browser) as page:
        session = HarvestSession(page, config)
        return await session.run(url)


def print_summary(report: HarvestReport) -> None:
    """Print a status breakdown of a finished harvest."""
    table = Table(title="Harvest summary")
    table.add_column("Status")
    table.add_column("Requests", justify="right")
    for status, count in report.summary().items():
        style = "green" if status.startswith('2') else "yellow" if status != 'failed' else "red"
        table.add_row(f"[{style}]{status}[/]", str(count))
    console.print(table)

    console.print(f"  Glyph requests: [cyan]{len(report.font_outcomes)}[/]")
    console.print(f"  Tile requests:  [cyan]{len(report.tile_outcomes)}[/]")
    if report.skipped:
        console.print(f"  [yellow]⚠ Skipped {len(report.skipped)} tilesets[/]")
        for reason in report.skipped:
            console.print(f"    [dim]{escape(reason)}[/]")


@click.group()
def main():
    """WebMap Harvester - Request every tile and glyph a web map can use."""
    pass


@main.command()
@click.argument('url')
@click.option('-c', '--config', 'config_path', type=click.Path(exists=True, path_type=Path),
              help='JSON configuration file')
@click.option('--delay-ms', type=int, help='Wait after each request (default: 50)')
@click.option('--step', type=float, help='Coordinate increment in degrees (default: 1)')
@click.option('--bounds', help='Static tileset bounds as W,S,E,N')
@click.option('--min-zoom', type=int, help='Static tileset min zoom')
@click.option('--max-zoom', type=int, help='Static tileset max zoom')
@click.option('--tileset', 'tilesets', multiple=True, help='Static tileset id (repeatable)')
@click.option('--font-stack', 'font_stacks', multiple=True, help='Static font stack (repeatable)')
@click.option('--font-owner', help='Account owning the static font stacks')
@click.option('--skip-fonts', is_flag=True, help='Do not request glyph shards')
@click.option('--skip-tiles', is_flag=True, help='Do not request tiles')
@click.option('--zoom-steps', type=int, help='Zoom the map this many times after load')
@click.option('--headed', is_flag=True, help='Show the browser window')
@click.option('--timeout', type=float, help='Navigation timeout in seconds')
@click.option('--report', 'report_path', type=click.Path(path_type=Path),
              help='Write outcomes as JSON to this path')
@click.option('-v', '--verbose', is_flag=True, help='Verbose output')
def harvest(url: str, config_path: Path | None, delay_ms: int | None, step: float | None,
            bounds: str | None, min_zoom: int | None, max_zoom: int | None,
            tilesets: tuple[str, ...], font_stacks: tuple[str, ...], font_owner: str | None,
            skip_fonts: bool, skip_tiles: bool, zoom_steps: int | None, headed: bool,
            timeout: float | None, report_path: Path | None, verbose: bool):
    """Load URL and request every tile and glyph shard its map can use."""
    try:
        config = load_config(config_path) if config_path else HarvestConfig()
        config = config.merged(
            delay_ms=delay_ms,
            step_degrees=step,
            bounds=parse_bounds(bounds) if bounds else None,
            min_zoom=min_zoom,
            max_zoom=max_zoom,
            tilesets=tilesets or None,
            font_stacks=font_stacks or None,
            font_owner=font_owner,
            fetch_fonts=False if skip_fonts else None,
            fetch_tiles=False if skip_tiles else None,
            verbose=True if verbose else None,
            zoom_steps=zoom_steps,
            headless=False if headed else None,
            timeout=timeout,
        )
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    if config.step_degrees <= 0:
        raise click.UsageError("--step must be positive")
    if config.delay_ms < 0:
        raise click.UsageError("--delay-ms must not be negative")

    console.print(f"\n[bold]Harvesting:[/] {escape(url)}")
    console.print(f"  Delay: [cyan]{config.delay_ms}ms[/], step: [cyan]{config.step_degrees}°[/]\n")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Harvesting...", total=None)
        try:
            report = asyncio.run(_harvest(url, config))
        except Exception as e:
            console.print(f"[red]Harvest failed:[/] {escape(str(e))}")
            raise SystemExit(1) from e

    console.print()
    print_summary(report)

    if report_path:
        report_path.write_text(json.dumps(report.to_dict(), indent=2))
        console.print(f"\n[green]✓ Report written to {report_path}[/]")


@main.command()
@click.argument('tilejson', type=click.Path(exists=True, path_type=Path))
@click.option('--step', type=float, default=1.0, show_default=True,
              help='Coordinate increment in degrees')
@click.option('--list', 'list_urls', is_flag=True, help='Print every URL')
def plan(tilejson: Path, step: float, list_urls: bool):
    """Show how many tile URLs a saved TileJSON document expands to."""
    if step <= 0:
        raise click.UsageError("--step must be positive")
    try:
        document = json.loads(tilejson.read_text())
    except json.JSONDecodeError as e:
        raise click.UsageError(f"Invalid JSON in {tilejson}: {e}") from e

    result = parse_tilejson(document, str(tilejson))
    if not result.ok:
        console.print(f"[red]✗ {escape(str(result.error))}[/]")
        raise SystemExit(1)

    descriptor = result.descriptor
    enumerator = TileSpaceEnumerator(step=step)
    bounds = descriptor.bounds

    table = Table(title=f"Plan for {tilejson.name}")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Bounds", f"{bounds.west}, {bounds.south}, {bounds.east}, {bounds.north}")
    table.add_row("Zoom", f"{descriptor.min_zoom}-{descriptor.max_zoom}")
    table.add_row("Templates", str(len(descriptor.url_templates)))
    table.add_row("Requests", str(enumerator.count(descriptor)))
    console.print(table)

    if list_urls:
        for url in enumerator.enumerate(descriptor):
            click.echo(url)


@main.command()
@click.argument('urls', nargs=-1, required=True)
@click.option('--list', 'list_urls', is_flag=True, help='Print every shard URL')
def fonts(urls: tuple[str, ...], list_urls: bool):
    """Group sample glyph URLs into font families and expand them."""
    families = dedupe_families(urls)
    for family in families:
        shards = list(expand(family))
        console.print(f"[cyan]{escape(family.template)}[/]: {len(shards)} shards")
        if list_urls:
            for shard in shards:
                click.echo(shard)


if __name__ == '__main__':
    main()
